"""Slot availability classification.

Three outcomes must stay distinguishable for the booking UI:
- SCHEDULE_EMPTY: the doctor has not published hours for that date
- FULLY_BOOKED: slots exist, none are free
- HAS_OPENINGS: at least one slot can be booked

Network and auth failures are raised, never reported as "no availability".
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from neurodent_scheduling.appointment_service import AppointmentService
from neurodent_scheduling.logging_config import get_logger
from neurodent_scheduling.models import Slot, icon_for  # noqa: F401 (re-exported)
from neurodent_scheduling.time_utils import DateLike, format_iso_date

logger = get_logger(__name__)

SCHEDULE_EMPTY_MESSAGE = "Time slots not scheduled by the doctor"
FULLY_BOOKED_MESSAGE = "All time slots are booked for this date"


class AvailabilityStatus(str, Enum):
    """What a slot fetch tells the patient."""
    SCHEDULE_EMPTY = "schedule_empty"
    FULLY_BOOKED = "fully_booked"
    HAS_OPENINGS = "has_openings"


class ErrorClass(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class SlotAvailability:
    """Classified slots for one (doctor, date)."""
    doctor_id: str
    date: str
    status: AvailabilityStatus
    slots: List[Slot] = field(default_factory=list)
    all_unavailable_reason: Optional[str] = None

    @property
    def available_slots(self) -> List[Slot]:
        return [s for s in self.slots if s.is_available]

    @property
    def bookable(self) -> bool:
        return self.status == AvailabilityStatus.HAS_OPENINGS

    def find_slot(self, slot_id: str) -> Optional[Slot]:
        """Look up a slot the UI selected; booked slots are not selectable."""
        for slot in self.slots:
            if slot.id == slot_id and slot.is_available:
                return slot
        return None


def classify_error(http_status: Optional[int]) -> str:
    """
    Classify a failed API call.

    Args:
        http_status: Response status, or None when no response arrived

    Returns:
        'unauthenticated' for 401 (send the user to login), else 'transient'
    """
    if http_status == 401:
        return ErrorClass.UNAUTHENTICATED.value
    return ErrorClass.TRANSIENT.value


def classify_slots(doctor_id: str, date: str, slots: List[Slot], message: Optional[str] = None) -> SlotAvailability:
    """Pure classification of an already-fetched slot list."""
    if not slots:
        status = AvailabilityStatus.SCHEDULE_EMPTY
        reason = message or SCHEDULE_EMPTY_MESSAGE
    elif not any(s.is_available for s in slots):
        status = AvailabilityStatus.FULLY_BOOKED
        reason = FULLY_BOOKED_MESSAGE
    else:
        status = AvailabilityStatus.HAS_OPENINGS
        reason = None

    return SlotAvailability(
        doctor_id=doctor_id,
        date=date,
        status=status,
        slots=list(slots),
        all_unavailable_reason=reason,
    )


class SlotClassifier:
    """Fetches a doctor's slots for a date and classifies them."""

    def __init__(self, appointments: AppointmentService):
        self.appointments = appointments

    def fetch_slots(self, doctor_id: str, appointment_date: DateLike) -> SlotAvailability:
        """
        Fetch and classify slots.

        Raises:
            AuthRequired: Backend returned 401
            TransientFailure: Network error, timeout or any other non-2xx status
        """
        date_str = format_iso_date(appointment_date)
        result = self.appointments.get_doctor_slots(doctor_id, date_str)

        if not result.success:
            # 2xx with success=false: no schedule document for that day
            availability = classify_slots(doctor_id, date_str, [], result.message)
        else:
            availability = classify_slots(doctor_id, date_str, result.slots)

        logger.info(
            "slots_classified",
            doctor_id=doctor_id,
            date=date_str,
            status=availability.status.value,
            total=len(availability.slots),
            open=len(availability.available_slots),
        )
        return availability
