"""Appointment draft validation.

Runs before any network call. Every rule is checked and every violation is
reported, in rule order; the UI shows the first one.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from neurodent_scheduling import config
from neurodent_scheduling.booking_window import BookingPurpose, booking_window, clinic_now
from neurodent_scheduling.errors import FormatError, ValidationError
from neurodent_scheduling.models import AppointmentDraft
from neurodent_scheduling.time_utils import TimeOfDay, duration_hours, is_date_in_past, parse_iso_date


@dataclass
class ValidationResult:
    """Outcome of validate_appointment()."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None

    def raise_for_errors(self):
        if not self.is_valid:
            raise ValidationError(self.errors)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_appointment(
    draft: Union[AppointmentDraft, Mapping[str, Any]],
    now: Optional[datetime] = None,
    purpose: BookingPurpose = BookingPurpose.BOOK
) -> ValidationResult:
    """
    Validate appointment booking data.

    Args:
        draft: AppointmentDraft, or a mapping using wire or attribute names
        now: Current clinic time (default: clinic_now())
        purpose: BOOK or RESCHEDULE; decides whether today is allowed

    Returns:
        ValidationResult with every violated rule

    Raises:
        TypeError: If draft is neither an AppointmentDraft nor a mapping
    """
    if isinstance(draft, Mapping):
        draft = AppointmentDraft.model_validate(dict(draft))
    elif not isinstance(draft, AppointmentDraft):
        raise TypeError(f"Expected AppointmentDraft or mapping, got {type(draft).__name__}")
    if now is not None and not isinstance(now, datetime):
        raise TypeError(f"now must be a datetime, got {type(now).__name__}")

    now = now or clinic_now()
    errors = []

    if _blank(draft.doctor_id):
        errors.append("Doctor is required")

    if _blank(draft.appointment_date):
        errors.append("Appointment date is required")
    else:
        try:
            appointment_date = parse_iso_date(draft.appointment_date)
        except FormatError:
            errors.append("Appointment date is invalid")
        else:
            window = booking_window(now, purpose)
            if is_date_in_past(appointment_date, now.date()):
                errors.append("Cannot book appointments for past dates")
            elif not window.contains(appointment_date):
                errors.append(
                    f"Appointment date must be within the booking window "
                    f"({window.min_date.isoformat()} to {window.max_date.isoformat()})"
                )

    start_missing = _blank(draft.start_time)
    end_missing = _blank(draft.end_time)
    if start_missing:
        errors.append("Start time is required")
    if end_missing:
        errors.append("End time is required")

    if not start_missing and not end_missing:
        try:
            duration = duration_hours(draft.start_time, draft.end_time)
        except FormatError:
            if not _is_24h(draft.start_time):
                errors.append("Start time must be in HH:MM format")
            if not _is_24h(draft.end_time):
                errors.append("End time must be in HH:MM format")
        else:
            if duration <= 0:
                errors.append("End time must be after start time")
            if duration > config.MAX_APPOINTMENT_HOURS:
                errors.append(f"Appointment duration cannot exceed {config.MAX_APPOINTMENT_HOURS} hours")

    if _blank(draft.slot_type):
        errors.append("Slot type is required")

    # len() counts code points, not bytes
    if draft.symptoms and len(draft.symptoms) > config.MAX_SYMPTOMS_LENGTH:
        errors.append(f"Symptoms description must be at most {config.MAX_SYMPTOMS_LENGTH} characters")

    return ValidationResult(is_valid=not errors, errors=errors)


def _is_24h(value: str) -> bool:
    try:
        TimeOfDay.from_24h(value)
    except FormatError:
        return False
    return True
