from dataclasses import dataclass
from typing import List, Optional, Protocol
from datetime import datetime

from .doctors_repo import DoctorSummaryDto


@dataclass
class BookingDto:
    id: str
    booking_id: str
    service: str
    doctor_id: int
    date: datetime
    time_slot: str
    owner_name: str
    phone: str
    pet_type: str
    breed: Optional[str]
    age: Optional[str]
    notes: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime
    doctor: Optional[DoctorSummaryDto] = None


@dataclass
class NewBooking:
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
    status: str = "pending"


class BookingsRepository(Protocol):
    def get_doctor_summary(self, doctor_id: int) -> Optional[DoctorSummaryDto]:
        ...

    def find_by_id(self, booking_id: str, with_doctor: bool = True) -> Optional[BookingDto]:
        ...

    def find_by_code(self, code: str) -> Optional[BookingDto]:
        ...

    def list(self, status: Optional[str] = None, doctor_id: Optional[int] = None) -> List[BookingDto]:
        ...

    def create(self, booking: NewBooking) -> BookingDto:
        """Persist a booking; raises Conflict when the booking code is taken."""
        ...

    def update_status(self, booking_id: str, status: str) -> Optional[BookingDto]:
        ...
