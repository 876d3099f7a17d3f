"""Typed client for the clinic appointments API.

Endpoints (relative to API_BASE_URL):
- GET   /appointments/doctor/{doctorId}/slots/{date}
- POST  /appointments/book
- PATCH /appointments/reschedule/{appointmentId}
- PATCH /appointments/cancel/{appointmentId}
- GET   /appointments/my-appointments?limit=N
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from neurodent_scheduling.errors import FormatError, TransientFailure
from neurodent_scheduling.http_client import ApiClient, ApiResponse
from neurodent_scheduling.logging_config import get_logger
from neurodent_scheduling.models import (
    AppointmentDraft,
    AppointmentRecord,
    PaymentProof,
    Slot,
)
from neurodent_scheduling.time_utils import DateLike, format_iso_date

logger = get_logger(__name__)


@dataclass
class SlotsResult:
    """Slots endpoint response."""
    success: bool
    slots: List[Slot] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class SubmissionResult:
    """Booking, reschedule, cancel or payment-verification response."""
    success: bool
    appointment: Optional[AppointmentRecord] = None
    message: Optional[str] = None
    status_code: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def parse_submission(response: ApiResponse) -> SubmissionResult:
    """Turn a backend envelope into a SubmissionResult."""
    appointment = None
    raw_appointment = response.data.get("appointment")
    if raw_appointment:
        try:
            appointment = AppointmentRecord.model_validate(raw_appointment)
        except PydanticValidationError as e:
            # The write went through; keep the raw payload rather than fail it
            logger.warning("appointment_unparseable", error=str(e))

    return SubmissionResult(
        success=response.success,
        appointment=appointment,
        message=response.message,
        status_code=response.status_code,
        raw=response.data,
    )


class AppointmentService:
    """Appointments API calls. Auth and transport errors propagate from ApiClient."""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or ApiClient()

    def get_doctor_slots(self, doctor_id: str, appointment_date: DateLike) -> SlotsResult:
        """
        Get time slots for a doctor on a specific date.

        Args:
            doctor_id: The doctor's ID
            appointment_date: Date (or YYYY-MM-DD string)

        Returns:
            SlotsResult; success is False when a 2xx reply declined the query

        Raises:
            AuthRequired, TransientFailure: From the HTTP layer
            TransientFailure: Also for 4xx replies other than 401
            FormatError: If the backend sent a malformed slot
        """
        date_str = format_iso_date(appointment_date)
        logger.info("fetch_slots", doctor_id=doctor_id, date=date_str)

        response = self.client.get(
            f"/appointments/doctor/{quote(str(doctor_id), safe='')}/slots/{date_str}"
        )

        if not response.ok:
            raise TransientFailure(
                response.message or f"Slot lookup failed with status {response.status_code}",
                status_code=response.status_code
            )

        if not response.success:
            return SlotsResult(success=False, message=response.message)

        try:
            slots = [Slot.model_validate(s) for s in response.data.get("availableSlots") or []]
        except PydanticValidationError as e:
            raise FormatError(f"Malformed slot data for doctor {doctor_id} on {date_str}: {e}")

        return SlotsResult(success=True, slots=slots, message=response.message)

    def book_appointment(self, draft: AppointmentDraft) -> SubmissionResult:
        """Book an appointment (no payment step)."""
        logger.info("book_appointment", doctor_id=draft.doctor_id, date=draft.appointment_date)
        response = self.client.post("/appointments/book", json=draft.to_payload())
        return parse_submission(response)

    def reschedule_appointment(
        self,
        appointment_id: str,
        draft: AppointmentDraft,
        proof: Optional[PaymentProof] = None
    ) -> SubmissionResult:
        """Move an appointment to the date and slot in draft."""
        payload = draft.to_reschedule_payload()
        if proof is not None:
            payload.update(proof.to_payload())

        logger.info("reschedule_appointment", appointment_id=appointment_id, new_date=draft.appointment_date)
        response = self.client.patch(
            f"/appointments/reschedule/{quote(str(appointment_id), safe='')}",
            json=payload
        )
        return parse_submission(response)

    def cancel_appointment(self, appointment_id: str) -> SubmissionResult:
        """Cancel an appointment (status becomes cancelled; nothing is deleted)."""
        logger.info("cancel_appointment", appointment_id=appointment_id)
        response = self.client.patch(f"/appointments/cancel/{quote(str(appointment_id), safe='')}")
        return parse_submission(response)

    def get_my_appointments(
        self,
        limit: Optional[int] = None,
        status: Optional[str] = None
    ) -> List[AppointmentRecord]:
        """
        Current patient's appointments.

        Raises:
            TransientFailure: If the backend could not list appointments
        """
        params = {}
        if limit is not None:
            params["limit"] = limit
        if status:
            params["status"] = status

        response = self.client.get("/appointments/my-appointments", params=params or None)
        if not response.success:
            raise TransientFailure(
                response.message or "Could not load appointments",
                status_code=response.status_code
            )

        records = []
        for item in response.data.get("appointments") or []:
            try:
                records.append(AppointmentRecord.model_validate(item))
            except PydanticValidationError as e:
                logger.warning("appointment_skipped", error=str(e))
        return records
