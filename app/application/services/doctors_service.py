from dataclasses import dataclass
from typing import List, Union

from ..ports.doctors_repo import DoctorsRepository, DoctorDto, NewDoctor
from ...exceptions import NotFound, ValidationError
from ...schemas.doctors.doctor import DoctorCreate


@dataclass
class DoctorsService:
    repo: DoctorsRepository

    def list_doctors(self) -> List[DoctorDto]:
        return self.repo.list_all()

    def get_doctor(self, doctor_id: Union[int, str]) -> DoctorDto:
        parsed = parse_doctor_id(doctor_id)
        doctor = self.repo.get_by_id(parsed)
        if not doctor:
            raise NotFound("Doctor not found")
        return doctor

    def create_doctor(self, data: DoctorCreate) -> DoctorDto:
        return self.repo.create(NewDoctor(**data.model_dump()))


def parse_doctor_id(value: Union[int, str]) -> int:
    """Doctor ids are positive integers; anything else is rejected."""
    if isinstance(value, bool):
        raise ValidationError("Invalid doctor ID")
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            raise ValidationError("Invalid doctor ID")
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise ValidationError("Invalid doctor ID")
    return value
