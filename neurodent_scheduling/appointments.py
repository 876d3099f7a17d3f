"""Helpers over the patient's appointment list."""
from datetime import datetime
from typing import Iterable, List, Tuple

from neurodent_scheduling.models import AppointmentRecord, AppointmentStatus
from neurodent_scheduling.time_utils import TimeOfDay

STATUS_COLORS = {
    AppointmentStatus.SCHEDULED: "blue",
    AppointmentStatus.CONFIRMED: "green",
    AppointmentStatus.COMPLETED: "gray",
    AppointmentStatus.CANCELLED: "red",
}

CLOSED_STATUSES = (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)


def status_color(status) -> str:
    """Badge color for an appointment status; unknown statuses are gray."""
    try:
        return STATUS_COLORS[AppointmentStatus(status)]
    except ValueError:
        return "gray"


def starts_at(record: AppointmentRecord) -> datetime:
    """Naive wall-clock start of the appointment."""
    start = TimeOfDay.from_24h(record.start_time)
    return datetime(
        record.appointment_date.year,
        record.appointment_date.month,
        record.appointment_date.day,
        start.hour,
        start.minute,
    )


def partition_appointments(
    records: Iterable[AppointmentRecord],
    now: datetime
) -> Tuple[List[AppointmentRecord], List[AppointmentRecord]]:
    """
    Split appointments into upcoming and past.

    Completed and cancelled appointments are always past. Others are
    upcoming until their start time passes.

    Args:
        records: Appointments from the my-appointments API
        now: Current clinic time (a tz-aware value is compared by wall clock)

    Returns:
        (upcoming soonest first, past most recent first)
    """
    wall_now = now.replace(tzinfo=None)
    upcoming, past = [], []

    for record in records:
        if record.status in CLOSED_STATUSES or starts_at(record) <= wall_now:
            past.append(record)
        else:
            upcoming.append(record)

    upcoming.sort(key=starts_at)
    past.sort(key=starts_at, reverse=True)
    return upcoming, past
