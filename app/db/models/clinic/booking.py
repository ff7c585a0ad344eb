# app/db/models/clinic/booking.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, Text
from datetime import datetime

from app.utils import generate_record_id, utc_now

class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    id: str = Field(default_factory=generate_record_id, primary_key=True, max_length=36)
    booking_id: str = Field(max_length=16, unique=True)  # human-facing booking code
    service: str  # vaccination, treatment, surgery
    doctor_id: int = Field(foreign_key="doctors.id", index=True)
    date: datetime = Field(sa_type=DateTime(timezone=True), index=True)
    time_slot: str
    owner_name: str
    phone: str
    pet_type: str
    breed: Optional[str] = None
    age: Optional[str] = None
    notes: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="pending", index=True)  # pending, confirmed, cancelled
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
