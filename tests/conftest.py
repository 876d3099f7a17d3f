"""Shared test fixtures."""
from datetime import datetime
from unittest.mock import Mock

import pytest

from neurodent_scheduling.appointment_service import AppointmentService
from neurodent_scheduling.circuit_breaker import CircuitBreaker
from neurodent_scheduling.http_client import ApiClient, StaticCredentials


@pytest.fixture
def now() -> datetime:
    """Fixed clinic time: Monday 2025-11-03, 10:15."""
    return datetime(2025, 11, 3, 10, 15)


@pytest.fixture
def slot_payloads():
    """Slots as the backend sends them."""
    return [
        {
            "id": "slot-1",
            "startTime": "9:00 AM",
            "endTime": "9:30 AM",
            "startTime24": "09:00",
            "endTime24": "09:30",
            "type": "Morning Consultations",
            "isAvailable": True,
        },
        {
            "id": "slot-2",
            "startTime": "12:00 PM",
            "endTime": "1:00 PM",
            "startTime24": "12:00",
            "endTime24": "13:00",
            "type": "Surgery",
            "isAvailable": False,
        },
        {
            "id": "slot-3",
            "startTime": "4:30 PM",
            "endTime": "5:00 PM",
            "startTime24": "16:30",
            "endTime24": "17:00",
            "type": "Evening Consultations",
            "isAvailable": True,
        },
    ]


@pytest.fixture
def draft_payload():
    """Valid booking draft for the day after the fixed clock."""
    return {
        "doctorId": "doc-42",
        "appointmentDate": "2025-11-04",
        "startTime": "09:00",
        "endTime": "09:30",
        "slotType": "Morning Consultations",
        "symptoms": "Toothache on lower left molar",
    }


@pytest.fixture
def mock_http_response():
    """Create mock requests.Response."""
    def _create(status_code: int = 200, json_data=None):
        response = Mock()
        response.status_code = status_code
        if json_data is None:
            response.json.side_effect = ValueError("No JSON")
        else:
            response.json.return_value = json_data
        return response
    return _create


@pytest.fixture
def mock_session():
    """Stand-in for requests.Session; tests set get/post/patch return values."""
    return Mock()


@pytest.fixture
def api_client(mock_session):
    """ApiClient over the mock session with a fresh breaker."""
    return ApiClient(
        base_url="http://clinic.test/api",
        credentials=StaticCredentials("token-abc"),
        session=mock_session,
        circuit_breaker=CircuitBreaker(failure_threshold=3, timeout=60),
        timeout=5,
    )


@pytest.fixture
def appointment_service(api_client):
    return AppointmentService(api_client)
