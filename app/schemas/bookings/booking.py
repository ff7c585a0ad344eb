# app/schemas/booking.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AwareDatetime, Field, StrictInt, field_validator

from ..common.common import CamelModel


class ServiceType(str, Enum):
    VACCINATION = "vaccination"
    TREATMENT = "treatment"
    SURGERY = "surgery"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookingCreate(CamelModel):
    service: ServiceType
    doctor_id: StrictInt = Field(gt=0)
    date: AwareDatetime  # ISO-8601 with timezone, e.g. 2025-06-01T10:00:00.000Z
    time_slot: str = Field(min_length=1)
    owner_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    pet_type: str = Field(min_length=1)
    breed: Optional[str] = None
    age: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def require_iso_string(cls, value):
        # Lax datetime parsing would also take unix timestamps
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str):
            raise ValueError("Expected an ISO-8601 timestamp string")
        return value.strip()

    @field_validator("breed", "age", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and value == "":
            return None
        return value


class BookingUpdate(CamelModel):
    status: Optional[BookingStatus] = None


class DoctorSummary(CamelModel):
    id: int
    name: str
    specialty: str


class BookingResponse(CamelModel):
    id: str
    booking_id: str
    service: str
    doctor_id: int
    date: datetime
    time_slot: str
    owner_name: str
    phone: str
    pet_type: str
    breed: Optional[str] = None
    age: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    doctor: Optional[DoctorSummary] = None
