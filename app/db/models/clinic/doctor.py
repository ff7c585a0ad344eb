# app/db/models/clinic/doctor.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, Text
from datetime import datetime

from app.utils import utc_now

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    photo: Optional[str] = None
    qualification: str
    experience: int  # Years of experience
    specialty: str
    phone: Optional[str] = None
    timings: str = Field(default="[]", sa_type=Text)  # JSON array of slot labels, ordered
    available_days: str = Field(default="[]", sa_type=Text)  # JSON array of weekday names
    bio: Optional[str] = Field(default=None, sa_type=Text)
    is_external: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
