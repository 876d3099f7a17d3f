"""Booking window policy.

One place for the bookable date range. New bookings may start today while
there is still time left (before the cutoff hour); reschedules never land on
the same day. Both stop at the same horizon.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from neurodent_scheduling import config
from neurodent_scheduling.time_utils import DateLike, to_date


class BookingPurpose(str, Enum):
    """Why a date range is being computed."""
    BOOK = "book"
    RESCHEDULE = "reschedule"


@dataclass(frozen=True)
class BookingWindow:
    """Inclusive range of bookable dates."""
    min_date: date
    max_date: date

    def contains(self, value: DateLike) -> bool:
        return is_within_window(value, self.min_date, self.max_date)

    def as_iso(self) -> dict:
        return {
            "minDate": self.min_date.isoformat(),
            "maxDate": self.max_date.isoformat(),
        }


def clinic_now(tz: Optional[str] = None) -> datetime:
    """
    Current wall-clock time at the clinic.

    Args:
        tz: IANA timezone name; defaults to CLINIC_TIMEZONE, then host local time
    """
    tz = tz or config.CLINIC_TIMEZONE
    if tz:
        return datetime.now(ZoneInfo(tz))
    return datetime.now()


def min_bookable_date(
    now: datetime,
    purpose: BookingPurpose = BookingPurpose.BOOK,
    cutoff_hour: Optional[int] = None
) -> date:
    """
    Earliest bookable date.

    Args:
        now: Current clinic time
        purpose: BOOK allows today until the cutoff hour; RESCHEDULE never does
        cutoff_hour: Override for SAME_DAY_CUTOFF_HOUR (default 23)

    Returns:
        Today or tomorrow
    """
    if cutoff_hour is None:
        cutoff_hour = config.SAME_DAY_CUTOFF_HOUR

    today = now.date()
    if purpose == BookingPurpose.BOOK and now.hour < cutoff_hour:
        return today
    return today + timedelta(days=1)


def max_bookable_date(
    now: datetime,
    purpose: BookingPurpose = BookingPurpose.BOOK,
    horizon_days: Optional[int] = None
) -> date:
    """Latest bookable date: today + BOOKING_HORIZON_DAYS for both purposes."""
    if horizon_days is None:
        horizon_days = config.BOOKING_HORIZON_DAYS
    return now.date() + timedelta(days=horizon_days)


def booking_window(
    now: datetime,
    purpose: BookingPurpose = BookingPurpose.BOOK
) -> BookingWindow:
    """Compute the window for the given purpose."""
    min_date = min_bookable_date(now, purpose)
    # A horizon shorter than the same-day buffer still leaves one bookable day
    max_date = max(max_bookable_date(now, purpose), min_date)
    return BookingWindow(min_date=min_date, max_date=max_date)


def is_within_window(value: DateLike, min_date: DateLike, max_date: DateLike) -> bool:
    """Inclusive range check on calendar dates."""
    return to_date(min_date) <= to_date(value) <= to_date(max_date)
