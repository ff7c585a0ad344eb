from dataclasses import dataclass, field
from typing import List, Optional, Protocol
from datetime import datetime


@dataclass
class DoctorSummaryDto:
    id: int
    name: str
    specialty: str


@dataclass
class DoctorDto:
    id: int
    name: str
    qualification: str
    experience: int
    specialty: str
    photo: Optional[str] = None
    phone: Optional[str] = None
    timings: List[str] = field(default_factory=list)
    available_days: List[str] = field(default_factory=list)
    bio: Optional[str] = None
    is_external: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class NewDoctor:
    name: str
    qualification: str
    experience: int
    specialty: str
    photo: Optional[str] = None
    phone: Optional[str] = None
    timings: List[str] = field(default_factory=list)
    available_days: List[str] = field(default_factory=list)
    bio: Optional[str] = None
    is_external: bool = False


class DoctorsRepository(Protocol):
    def get_by_id(self, doctor_id: int) -> Optional[DoctorDto]:
        ...

    def list_all(self) -> List[DoctorDto]:
        ...

    def create(self, doctor: NewDoctor) -> DoctorDto:
        ...

    def count(self) -> int:
        ...
