"""Test upcoming/past partitioning and status colors."""
from datetime import date, datetime, timedelta, timezone

import pytest

from neurodent_scheduling.appointments import partition_appointments, status_color
from neurodent_scheduling.models import AppointmentRecord


def make(id, day, start, status="scheduled"):
    return AppointmentRecord(
        id=id,
        appointment_date=day,
        start_time=start,
        end_time="23:59",
        status=status,
    )


class TestPartition:
    @pytest.fixture
    def records(self):
        return [
            make("later-today", date(2025, 11, 3), "14:00"),
            make("earlier-today", date(2025, 11, 3), "09:00"),
            make("tomorrow", date(2025, 11, 4), "09:00"),
            make("last-week", date(2025, 10, 27), "10:00", "completed"),
            make("cancelled-future", date(2025, 11, 10), "10:00", "cancelled"),
        ]

    def test_split(self, records, now):
        upcoming, past = partition_appointments(records, now)

        assert [r.id for r in upcoming] == ["later-today", "tomorrow"]
        assert [r.id for r in past] == ["cancelled-future", "earlier-today", "last-week"]

    def test_aware_now_compared_by_wall_clock(self, records):
        ist = timezone(timedelta(hours=5, minutes=30))
        upcoming, _ = partition_appointments(records, datetime(2025, 11, 3, 15, 0, tzinfo=ist))
        assert [r.id for r in upcoming] == ["tomorrow"]

    def test_empty(self, now):
        assert partition_appointments([], now) == ([], [])


class TestStatusColor:
    @pytest.mark.parametrize("status,color", [
        ("scheduled", "blue"),
        ("confirmed", "green"),
        ("completed", "gray"),
        ("cancelled", "red"),
        ("pending", "gray"),
        (None, "gray"),
    ])
    def test_colors(self, status, color):
        assert status_color(status) == color
