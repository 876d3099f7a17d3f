"""Appointment scheduling core for the Neurodent clinic."""
from neurodent_scheduling.availability import AvailabilityStatus, SlotAvailability, SlotClassifier, classify_error
from neurodent_scheduling.booking_window import (
    BookingPurpose,
    BookingWindow,
    booking_window,
    is_within_window,
    max_bookable_date,
    min_bookable_date,
)
from neurodent_scheduling.models import AppointmentDraft, AppointmentRecord, Slot, icon_for
from neurodent_scheduling.orchestrator import BookingOrchestrator, BookingOutcome, BookingState
from neurodent_scheduling.validation import ValidationResult, validate_appointment

__version__ = "0.1.0"

__all__ = [
    "AppointmentDraft",
    "AppointmentRecord",
    "AvailabilityStatus",
    "BookingOrchestrator",
    "BookingOutcome",
    "BookingPurpose",
    "BookingState",
    "BookingWindow",
    "Slot",
    "SlotAvailability",
    "SlotClassifier",
    "ValidationResult",
    "booking_window",
    "classify_error",
    "icon_for",
    "is_within_window",
    "max_bookable_date",
    "min_bookable_date",
    "validate_appointment",
]
