"""Pydantic models for the appointments and payments APIs.

Wire names are camelCase (aliases); attributes are snake_case. Models
accept either form on input.
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from neurodent_scheduling.time_utils import (
    TimeOfDay,
    format_iso_date,
    parse_iso_date,
    to_12_hour,
    to_24_hour,
)

# Slot-type label -> display glyph. Unknown labels use DEFAULT_SLOT_ICON.
SLOT_TYPE_ICONS: Dict[str, str] = {
    "Morning Consultations": "🌅",
    "Afternoon Procedures": "🌞",
    "Evening Consultations": "🌆",
    "Surgery": "🏥",
    "Emergency": "🚨",
    "Full Day Clinic": "📅",
    "Morning Session": "🌄",
    "Extended Afternoon": "☀️",
    "Short Afternoon": "🌤️",
    "Half Day": "⏰",
    "Weekend Morning": "🌻",
}
DEFAULT_SLOT_ICON = "⏱️"


def icon_for(slot_type: Optional[str]) -> str:
    """Display icon for a slot type; never raises for unknown labels."""
    return SLOT_TYPE_ICONS.get(slot_type, DEFAULT_SLOT_ICON) if slot_type else DEFAULT_SLOT_ICON


def _stringify_id(value: Any) -> Any:
    """Backends send numeric or ObjectId-like IDs; keep them opaque strings."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        # Populated reference, e.g. {"_id": "...", "firstName": "..."}
        return value.get("_id") or value.get("id")
    return str(value)


class AppointmentStatus(str, Enum):
    """Server-side appointment lifecycle."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Slot(BaseModel):
    """One bookable unit of a doctor's schedule on a given date."""
    id: str = Field(..., description="Unique within a (doctor, date) pair")
    start_time: str = Field(..., alias="startTime", description="12-hour display time")
    end_time: str = Field(..., alias="endTime", description="12-hour display time")
    start_time_24: str = Field(..., alias="startTime24", description="24-hour canonical time")
    end_time_24: str = Field(..., alias="endTime24", description="24-hour canonical time")
    type: str = Field(..., min_length=1, description="Clinic-defined session label")
    is_available: bool = Field(..., alias="isAvailable")

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "slot-0900",
                "startTime": "9:00 AM",
                "endTime": "9:30 AM",
                "startTime24": "09:00",
                "endTime24": "09:30",
                "type": "Morning Consultations",
                "isAvailable": True
            }
        }
    )

    @model_validator(mode="before")
    @classmethod
    def fill_missing_representation(cls, data: Any) -> Any:
        """Derive whichever of the 12h/24h pair the backend left out."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for display, canonical in (("startTime", "startTime24"), ("endTime", "endTime24")):
            if not data.get(canonical) and data.get(display):
                data[canonical] = to_24_hour(data[display])
            elif not data.get(display) and data.get(canonical):
                data[display] = to_12_hour(data[canonical])
        if "_id" in data and "id" not in data:
            data["id"] = data["_id"]
        return data

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _stringify_id(v)

    @model_validator(mode="after")
    def check_times(self) -> "Slot":
        start = TimeOfDay.from_24h(self.start_time_24)
        end = TimeOfDay.from_24h(self.end_time_24)
        if TimeOfDay.from_12h(self.start_time) != start:
            raise ValueError(f"startTime {self.start_time!r} does not match startTime24 {self.start_time_24!r}")
        if TimeOfDay.from_12h(self.end_time) != end:
            raise ValueError(f"endTime {self.end_time!r} does not match endTime24 {self.end_time_24!r}")
        if not start < end:
            raise ValueError("Slot must end after it starts (slots do not span midnight)")
        return self

    @property
    def icon(self) -> str:
        return icon_for(self.type)

    @property
    def label(self) -> str:
        """e.g. "9:00 AM - 9:30 AM"."""
        return f"{self.start_time} - {self.end_time}"


class AppointmentDraft(BaseModel):
    """
    Appointment request assembled by the UI before submission.

    Every field is optional here so the validator can report all missing
    fields at once; validate_appointment() decides whether it is bookable.
    """
    doctor_id: Optional[str] = Field(None, alias="doctorId")
    appointment_date: Optional[str] = Field(None, alias="appointmentDate", description="YYYY-MM-DD")
    start_time: Optional[str] = Field(None, alias="startTime", description="24-hour HH:MM")
    end_time: Optional[str] = Field(None, alias="endTime", description="24-hour HH:MM")
    slot_type: Optional[str] = Field(None, alias="slotType")
    symptoms: Optional[str] = Field(None)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("doctor_id", mode="before")
    @classmethod
    def coerce_doctor_id(cls, v):
        return _stringify_id(v)

    @field_validator("appointment_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        if isinstance(v, date):
            return format_iso_date(v)
        return v

    @classmethod
    def from_slot(
        cls,
        doctor_id: str,
        appointment_date: Any,
        slot: Slot,
        symptoms: Optional[str] = None
    ) -> "AppointmentDraft":
        """Build a draft from the slot the patient picked."""
        return cls(
            doctor_id=doctor_id,
            appointment_date=appointment_date,
            start_time=slot.start_time_24,
            end_time=slot.end_time_24,
            slot_type=slot.type,
            symptoms=symptoms.strip() if symptoms else None,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Body for POST /appointments/book."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_reschedule_payload(self) -> Dict[str, Any]:
        """Body for PATCH /appointments/reschedule/{id}."""
        return {
            "newDate": self.appointment_date,
            "newStartTime": self.start_time,
            "newEndTime": self.end_time,
            "newSlotType": self.slot_type,
        }


class AppointmentRecord(BaseModel):
    """Server's representation of a confirmed appointment (read-only)."""
    id: str = Field(..., alias="_id")
    doctor_id: Optional[str] = Field(None, alias="doctorId")
    patient_id: Optional[str] = Field(None, alias="patientId")
    appointment_date: date = Field(..., alias="appointmentDate")
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    slot_type: Optional[str] = Field(None, alias="slotType")
    symptoms: Optional[str] = Field(None)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", "doctor_id", "patient_id", mode="before")
    @classmethod
    def coerce_refs(cls, v):
        return _stringify_id(v)

    @field_validator("appointment_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        # Backends often send a full ISO timestamp at midnight
        if isinstance(v, str):
            return parse_iso_date(v[:10])
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v):
        return TimeOfDay.from_24h(v).to_24h()


class PaymentOrder(BaseModel):
    """Order created on the backend before opening the gateway checkout."""
    order_id: str = Field(..., alias="orderId")
    amount: int = Field(..., ge=0, description="Smallest currency unit (e.g. paise)")
    currency: str = Field(..., min_length=3, max_length=3)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PaymentProof(BaseModel):
    """What the gateway checkout hands back on success."""
    gateway_order_id: str = Field(..., alias="gatewayOrderId")
    gateway_payment_id: str = Field(..., alias="gatewayPaymentId")
    gateway_signature: str = Field(..., alias="gatewaySignature")

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)
