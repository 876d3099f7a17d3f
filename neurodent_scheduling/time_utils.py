"""Time and date normalization.

Converts between the 12-hour display form used on slot cards ("2:30 PM")
and the 24-hour canonical form sent to the API ("14:30"), and formats
calendar dates as ISO strings in wall-clock terms.

All functions are pure: no I/O, no clock access.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

from neurodent_scheduling.errors import FormatError

DateLike = Union[date, datetime, str]

TIME_12H_PATTERN = re.compile(r'^(0?[1-9]|1[0-2]):([0-5][0-9]) (AM|PM)$')
TIME_24H_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):([0-5][0-9])$')
ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall-clock time in 24-hour form (no date, no timezone)."""
    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise FormatError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise FormatError(f"Minute must be between 0 and 59, got {self.minute}")

    @classmethod
    def from_12h(cls, text: str) -> "TimeOfDay":
        """Parse "H:MM AM|PM"."""
        if not isinstance(text, str):
            raise FormatError(f"Expected time string, got {type(text).__name__}")

        match = TIME_12H_PATTERN.match(text.strip())
        if not match:
            raise FormatError(f"Invalid 12-hour time: {text!r} (expected H:MM AM|PM)")

        hour = int(match.group(1))
        minute = int(match.group(2))
        modifier = match.group(3)

        # 12 AM is midnight, 12 PM is noon
        if hour == 12:
            hour = 0
        if modifier == "PM":
            hour += 12

        return cls(hour, minute)

    @classmethod
    def from_24h(cls, text: str) -> "TimeOfDay":
        """Parse "HH:MM" (a single-digit hour is accepted)."""
        if not isinstance(text, str):
            raise FormatError(f"Expected time string, got {type(text).__name__}")

        match = TIME_24H_PATTERN.match(text.strip())
        if not match:
            raise FormatError(f"Invalid 24-hour time: {text!r} (expected HH:MM)")

        return cls(int(match.group(1)), int(match.group(2)))

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    def to_24h(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def to_12h(self) -> str:
        period = "AM" if self.hour < 12 else "PM"
        hour_12 = self.hour % 12 or 12
        return f"{hour_12}:{self.minute:02d} {period}"


def to_24_hour(time12h: str) -> str:
    """
    Convert 12-hour time to 24-hour format.

    Args:
        time12h: Time in 12-hour format (e.g., "2:30 PM")

    Returns:
        Time in 24-hour format (e.g., "14:30")

    Raises:
        FormatError: If the input is not "H:MM AM|PM"

    Example:
        >>> to_24_hour("12:30 AM")
        '00:30'
    """
    return TimeOfDay.from_12h(time12h).to_24h()


def to_12_hour(time24h: str) -> str:
    """
    Convert 24-hour time to 12-hour format.

    Args:
        time24h: Time in 24-hour format (e.g., "14:30")

    Returns:
        Time in 12-hour format (e.g., "2:30 PM")

    Raises:
        FormatError: If the input is not "HH:MM" with hour 0-23
    """
    return TimeOfDay.from_24h(time24h).to_12h()


def duration_hours(start24: str, end24: str) -> float:
    """
    Signed duration between two 24-hour times, in hours.

    Negative when end precedes start; callers check the sign.
    """
    start = TimeOfDay.from_24h(start24)
    end = TimeOfDay.from_24h(end24)
    return (end.minutes_since_midnight - start.minutes_since_midnight) / 60


def parse_iso_date(text: str) -> date:
    """
    Parse a "YYYY-MM-DD" string.

    Raises:
        FormatError: If the string is not a valid calendar date
    """
    if not isinstance(text, str) or not ISO_DATE_PATTERN.match(text.strip()):
        raise FormatError(f"Invalid ISO date: {text!r} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(text.strip())
    except ValueError as e:
        raise FormatError(f"Invalid ISO date: {text!r} ({e})")


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO string to a calendar date."""
    # datetime is a date subclass; keep its own wall-clock day
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise TypeError(f"Expected date, datetime or ISO string, got {type(value).__name__}")


def format_iso_date(value: DateLike) -> str:
    """
    Format a date as "YYYY-MM-DD" in local calendar terms.

    A timezone-aware datetime is never shifted to UTC: 23:30 on the 5th in
    UTC+5:30 formats as the 5th.
    """
    return to_date(value).isoformat()


def format_display_date(value: DateLike) -> str:
    """Format date for display, e.g. "Monday, November 3, 2025"."""
    d = to_date(value)
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def is_date_in_past(value: DateLike, today: date) -> bool:
    """True if the date is strictly before today."""
    return to_date(value) < today
