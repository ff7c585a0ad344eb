import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import Booking, Doctor
from .....application.ports.bookings_repo import (
    BookingsRepository,
    BookingDto,
    NewBooking,
)
from .....application.ports.doctors_repo import DoctorSummaryDto
from .....exceptions import Conflict
from .....utils import ensure_utc, is_storable_id, utc_now
from ..errors import store_errors

logger = logging.getLogger(__name__)


class SqlBookingsRepository(BookingsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _booking_to_dto(self, b: Booking, doctor: Optional[Doctor] = None) -> BookingDto:
        return BookingDto(
            id=b.id,
            booking_id=b.booking_id,
            service=b.service,
            doctor_id=b.doctor_id,
            date=ensure_utc(b.date),
            time_slot=b.time_slot,
            owner_name=b.owner_name,
            phone=b.phone,
            pet_type=b.pet_type,
            breed=b.breed,
            age=b.age,
            notes=b.notes,
            status=b.status,
            created_at=ensure_utc(b.created_at),
            updated_at=ensure_utc(b.updated_at),
            doctor=self._summary(doctor) if doctor else None,
        )

    def _summary(self, d: Doctor) -> DoctorSummaryDto:
        return DoctorSummaryDto(id=d.id, name=d.name, specialty=d.specialty)

    def _joined(self):
        # Outer join so a booking never disappears from reads because of its doctor row
        return select(Booking, Doctor).join(Doctor, Booking.doctor_id == Doctor.id, isouter=True)

    def get_doctor_summary(self, doctor_id: int) -> Optional[DoctorSummaryDto]:
        if not is_storable_id(doctor_id):
            return None
        with store_errors("get doctor summary", self.session):
            d = self.session.exec(select(Doctor).where(Doctor.id == doctor_id)).first()
        return self._summary(d) if d else None

    def find_by_id(self, booking_id: str, with_doctor: bool = True) -> Optional[BookingDto]:
        with store_errors("find booking", self.session):
            if not with_doctor:
                b = self.session.exec(select(Booking).where(Booking.id == booking_id)).first()
                return self._booking_to_dto(b) if b else None
            row = self.session.exec(self._joined().where(Booking.id == booking_id)).first()
        if not row:
            return None
        b, d = row
        return self._booking_to_dto(b, d)

    def find_by_code(self, code: str) -> Optional[BookingDto]:
        with store_errors("find booking by code", self.session):
            b = self.session.exec(select(Booking).where(Booking.booking_id == code)).first()
        return self._booking_to_dto(b) if b else None

    def list(self, status: Optional[str] = None, doctor_id: Optional[int] = None) -> List[BookingDto]:
        if doctor_id is not None and not is_storable_id(doctor_id):
            return []
        query = self._joined()
        if status:
            query = query.where(Booking.status == status)
        if doctor_id is not None:
            query = query.where(Booking.doctor_id == doctor_id)
        with store_errors("list bookings", self.session):
            rows = self.session.exec(query.order_by(Booking.date.desc())).all()
        return [self._booking_to_dto(b, d) for b, d in rows]

    def _code_taken(self, code: str) -> bool:
        # Independent of find_by_code, which callers use for allocation probing
        with store_errors("check booking code", self.session):
            return self.session.exec(select(Booking.id).where(Booking.booking_id == code)).first() is not None

    def create(self, booking: NewBooking) -> BookingDto:
        b = Booking(
            booking_id=booking.booking_id,
            service=booking.service,
            doctor_id=booking.doctor_id,
            date=ensure_utc(booking.date),
            time_slot=booking.time_slot,
            owner_name=booking.owner_name,
            phone=booking.phone,
            pet_type=booking.pet_type,
            breed=booking.breed,
            age=booking.age,
            notes=booking.notes,
            status=booking.status,
        )
        with store_errors("create booking", self.session):
            self.session.add(b)
            try:
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                if self._code_taken(booking.booking_id):
                    logger.warning(f"Booking code {booking.booking_id} taken by a concurrent insert")
                    raise Conflict(f"Booking code {booking.booking_id} already exists")
                raise
            self.session.refresh(b)
        return self._booking_to_dto(b)

    def update_status(self, booking_id: str, status: str) -> Optional[BookingDto]:
        with store_errors("update booking status", self.session):
            b = self.session.exec(select(Booking).where(Booking.id == booking_id)).first()
            if not b:
                return None
            b.status = status
            b.updated_at = utc_now()
            self.session.add(b)
            self.session.commit()
            self.session.refresh(b)
        return self._booking_to_dto(b)
