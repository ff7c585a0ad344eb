from typing import List, Optional
from sqlalchemy import func
from sqlmodel import Session, select

from .....db.models import Doctor
from .....application.ports.doctors_repo import (
    DoctorsRepository,
    DoctorDto,
    NewDoctor,
)
from .....utils import dump_sequence, ensure_utc, is_storable_id, load_sequence
from ..errors import store_errors


def doctor_to_dto(d: Doctor) -> DoctorDto:
    return DoctorDto(
        id=d.id,
        name=d.name,
        photo=d.photo,
        qualification=d.qualification,
        experience=d.experience,
        specialty=d.specialty,
        phone=d.phone,
        timings=load_sequence(d.timings, field=f"doctor {d.id} timings"),
        available_days=load_sequence(d.available_days, field=f"doctor {d.id} availableDays"),
        bio=d.bio,
        is_external=bool(d.is_external),
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
    )


class SqlDoctorsRepository(DoctorsRepository):
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, doctor_id: int) -> Optional[DoctorDto]:
        if not is_storable_id(doctor_id):
            return None
        with store_errors("get doctor", self.session):
            d = self.session.exec(select(Doctor).where(Doctor.id == doctor_id)).first()
        return doctor_to_dto(d) if d else None

    def list_all(self) -> List[DoctorDto]:
        with store_errors("list doctors", self.session):
            rows = self.session.exec(select(Doctor).order_by(Doctor.id.asc())).all()
        return [doctor_to_dto(d) for d in rows]

    def create(self, doctor: NewDoctor) -> DoctorDto:
        d = Doctor(
            name=doctor.name,
            photo=doctor.photo,
            qualification=doctor.qualification,
            experience=doctor.experience,
            specialty=doctor.specialty,
            phone=doctor.phone,
            timings=dump_sequence(doctor.timings),
            available_days=dump_sequence(doctor.available_days),
            bio=doctor.bio,
            is_external=doctor.is_external,
        )
        with store_errors("create doctor", self.session):
            self.session.add(d)
            self.session.commit()
            self.session.refresh(d)
        return doctor_to_dto(d)

    def count(self) -> int:
        with store_errors("count doctors", self.session):
            return self.session.exec(select(func.count()).select_from(Doctor)).one()
