from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..database import get_session
from ..application.ports.doctors_repo import DoctorDto
from ..application.services.doctors_service import DoctorsService
from ..infrastructure.persistence.sqlalchemy.repositories.doctors_repository_sql import SqlDoctorsRepository
from ..schemas.doctors.doctor import DoctorResponse
from ..schemas.common.common import ErrorResponse

router = APIRouter(prefix="/doctors", tags=["Doctors"])


def get_doctors_service(session: Session = Depends(get_session)) -> DoctorsService:
    return DoctorsService(repo=SqlDoctorsRepository(session))


def to_doctor_response(d: DoctorDto) -> DoctorResponse:
    return DoctorResponse(
        id=d.id,
        name=d.name,
        photo=d.photo,
        qualification=d.qualification,
        experience=d.experience,
        specialty=d.specialty,
        phone=d.phone,
        timings=d.timings,
        available_days=d.available_days,
        bio=d.bio,
        is_external=d.is_external,
        created_at=d.created_at,
        updated_at=d.updated_at,
    )


@router.get("", response_model=List[DoctorResponse])
def get_doctors(doctors_service: DoctorsService = Depends(get_doctors_service)):
    return [to_doctor_response(d) for d in doctors_service.list_doctors()]


@router.get(
    "/{doctor_id}",
    response_model=DoctorResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_doctor(doctor_id: str, doctors_service: DoctorsService = Depends(get_doctors_service)):
    return to_doctor_response(doctors_service.get_doctor(doctor_id))
