"""Tests for API models."""
from datetime import date

import pytest
from pydantic import ValidationError

from neurodent_scheduling.models import (
    DEFAULT_SLOT_ICON,
    AppointmentDraft,
    AppointmentRecord,
    AppointmentStatus,
    PaymentProof,
    Slot,
    icon_for,
)


class TestSlot:
    def test_parses_wire_format(self, slot_payloads):
        slot = Slot.model_validate(slot_payloads[0])
        assert slot.id == "slot-1"
        assert slot.start_time_24 == "09:00"
        assert slot.is_available is True
        assert slot.label == "9:00 AM - 9:30 AM"
        assert slot.icon == "🌅"

    def test_derives_missing_24h_fields(self):
        slot = Slot.model_validate({
            "id": 7,
            "startTime": "2:00 PM",
            "endTime": "3:00 PM",
            "type": "Afternoon Procedures",
            "isAvailable": True,
        })
        assert slot.id == "7"
        assert slot.start_time_24 == "14:00"
        assert slot.end_time_24 == "15:00"

    def test_rejects_inconsistent_representations(self, slot_payloads):
        payload = dict(slot_payloads[0], startTime24="10:00")
        with pytest.raises(ValidationError):
            Slot.model_validate(payload)

    def test_rejects_slot_spanning_midnight(self):
        with pytest.raises(ValidationError):
            Slot.model_validate({
                "id": "late",
                "startTime24": "23:00",
                "endTime24": "01:00",
                "type": "Emergency",
                "isAvailable": True,
            })

    def test_slots_are_read_only(self, slot_payloads):
        slot = Slot.model_validate(slot_payloads[0])
        with pytest.raises(ValidationError):
            slot.is_available = False


class TestIconFor:
    def test_known_type(self):
        assert icon_for("Surgery") == "🏥"

    @pytest.mark.parametrize("slot_type", ["Laser Whitening", "", None])
    def test_unknown_types_share_default(self, slot_type):
        assert icon_for(slot_type) == DEFAULT_SLOT_ICON


class TestAppointmentDraft:
    def test_from_slot(self, slot_payloads):
        slot = Slot.model_validate(slot_payloads[2])
        draft = AppointmentDraft.from_slot("doc-42", date(2025, 11, 4), slot, "  sore gum  ")

        assert draft.to_payload() == {
            "doctorId": "doc-42",
            "appointmentDate": "2025-11-04",
            "startTime": "16:30",
            "endTime": "17:00",
            "slotType": "Evening Consultations",
            "symptoms": "sore gum",
        }

    def test_payload_omits_missing_symptoms(self, slot_payloads):
        slot = Slot.model_validate(slot_payloads[0])
        draft = AppointmentDraft.from_slot("doc-42", "2025-11-04", slot)
        assert "symptoms" not in draft.to_payload()

    def test_reschedule_payload(self, draft_payload):
        draft = AppointmentDraft.model_validate(draft_payload)
        assert draft.to_reschedule_payload() == {
            "newDate": "2025-11-04",
            "newStartTime": "09:00",
            "newEndTime": "09:30",
            "newSlotType": "Morning Consultations",
        }


class TestAppointmentRecord:
    def test_parses_backend_record(self):
        record = AppointmentRecord.model_validate({
            "_id": "apt-1",
            "doctorId": {"_id": "doc-42", "firstName": "Asha"},
            "patientId": "pat-9",
            "appointmentDate": "2025-11-04T00:00:00.000Z",
            "startTime": "09:00",
            "endTime": "09:30",
            "status": "confirmed",
            "slotType": "Morning Consultations",
            "extra": "ignored",
        })
        assert record.id == "apt-1"
        assert record.doctor_id == "doc-42"
        assert record.appointment_date == date(2025, 11, 4)
        assert record.status == AppointmentStatus.CONFIRMED

    def test_accepts_plain_id(self):
        record = AppointmentRecord(
            id="apt-2",
            appointment_date=date(2025, 11, 5),
            start_time="10:00",
            end_time="10:30",
        )
        assert record.id == "apt-2"
        assert record.status == AppointmentStatus.SCHEDULED

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            AppointmentRecord.model_validate({
                "_id": "apt-3",
                "appointmentDate": "2025-11-05",
                "startTime": "10:00",
                "endTime": "10:30",
                "status": "teleported",
            })


def test_payment_proof_payload():
    proof = PaymentProof(
        gateway_order_id="order_1",
        gateway_payment_id="pay_1",
        gateway_signature="sig",
    )
    assert proof.to_payload() == {
        "gatewayOrderId": "order_1",
        "gatewayPaymentId": "pay_1",
        "gatewaySignature": "sig",
    }
