"""Tests for booking window policy."""
from datetime import date, datetime, timedelta

import pytest

from neurodent_scheduling.booking_window import (
    BookingPurpose,
    booking_window,
    clinic_now,
    is_within_window,
    max_bookable_date,
    min_bookable_date,
)


class TestMinBookableDate:
    """Same-day cutoff for bookings, never same-day for reschedules."""

    def test_today_before_cutoff(self):
        assert min_bookable_date(datetime(2025, 11, 3, 22, 59)) == date(2025, 11, 3)

    def test_tomorrow_at_cutoff(self):
        assert min_bookable_date(datetime(2025, 11, 3, 23, 0)) == date(2025, 11, 4)

    def test_early_morning_is_today(self):
        assert min_bookable_date(datetime(2025, 11, 3, 0, 1)) == date(2025, 11, 3)

    def test_reschedule_never_same_day(self):
        now = datetime(2025, 11, 3, 8, 0)
        assert min_bookable_date(now, BookingPurpose.RESCHEDULE) == date(2025, 11, 4)

    def test_configurable_cutoff(self):
        now = datetime(2025, 11, 3, 20, 0)
        assert min_bookable_date(now, cutoff_hour=20) == date(2025, 11, 4)
        assert min_bookable_date(now, cutoff_hour=21) == date(2025, 11, 3)

    def test_month_rollover(self):
        assert min_bookable_date(datetime(2025, 12, 31, 23, 30)) == date(2026, 1, 1)


class TestMaxBookableDate:
    def test_thirty_days_ahead(self):
        assert max_bookable_date(datetime(2025, 11, 3, 9, 0)) == date(2025, 12, 3)

    def test_same_horizon_for_reschedule(self):
        now = datetime(2025, 11, 3, 9, 0)
        assert max_bookable_date(now, BookingPurpose.RESCHEDULE) == max_bookable_date(now)


class TestBookingWindow:
    def test_min_never_after_max(self):
        """Holds for every hour of a day and both purposes."""
        start = datetime(2025, 11, 3, 0, 0)
        for hours in range(48):
            now = start + timedelta(hours=hours, minutes=59)
            for purpose in BookingPurpose:
                window = booking_window(now, purpose)
                assert window.min_date <= window.max_date
                assert window.min_date >= now.date()

    def test_contains_is_inclusive(self, now):
        window = booking_window(now)
        assert window.contains(window.min_date)
        assert window.contains(window.max_date.isoformat())
        assert not window.contains(window.max_date + timedelta(days=1))

    def test_as_iso(self, now):
        assert booking_window(now).as_iso() == {"minDate": "2025-11-03", "maxDate": "2025-12-03"}


class TestIsWithinWindow:
    @pytest.mark.parametrize("value,expected", [
        ("2025-11-02", False),
        ("2025-11-03", True),
        ("2025-11-20", True),
        ("2025-12-03", True),
        ("2025-12-04", False),
    ])
    def test_bounds(self, value, expected):
        assert is_within_window(value, "2025-11-03", date(2025, 12, 3)) is expected


class TestClinicNow:
    def test_uses_named_timezone(self):
        current = clinic_now("Asia/Kolkata")
        assert current.utcoffset() == timedelta(hours=5, minutes=30)

    def test_local_time_without_timezone(self, monkeypatch):
        monkeypatch.setattr("neurodent_scheduling.config.CLINIC_TIMEZONE", None)
        assert clinic_now().tzinfo is None
