# app/schemas/doctor.py
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from ..common.common import CamelModel

class DoctorBase(CamelModel):
    name: str
    photo: Optional[str] = None
    qualification: str
    experience: int = Field(ge=0)
    specialty: str
    phone: Optional[str] = None
    timings: List[str] = []
    available_days: List[str] = []
    bio: Optional[str] = None
    is_external: bool = False

class DoctorCreate(DoctorBase):
    pass

class DoctorResponse(DoctorBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
