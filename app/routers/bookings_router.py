from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlmodel import Session

from ..database import get_session
from ..application.ports.bookings_repo import BookingDto
from ..application.services.booking_service import BookingService
from ..infrastructure.persistence.sqlalchemy.repositories.bookings_repository_sql import SqlBookingsRepository
from ..schemas.bookings.booking import BookingCreate, BookingUpdate, BookingResponse, DoctorSummary
from ..schemas.common.common import ErrorResponse

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(request: Request, session: Session = Depends(get_session)) -> BookingService:
    config = request.app.state.settings
    return BookingService(
        repo=SqlBookingsRepository(session),
        code_prefix=config.BOOKING_CODE_PREFIX,
        max_code_attempts=config.BOOKING_CODE_MAX_ATTEMPTS,
    )


def to_booking_response(b: BookingDto) -> BookingResponse:
    return BookingResponse(
        id=b.id,
        booking_id=b.booking_id,
        service=b.service,
        doctor_id=b.doctor_id,
        date=b.date,
        time_slot=b.time_slot,
        owner_name=b.owner_name,
        phone=b.phone,
        pet_type=b.pet_type,
        breed=b.breed,
        age=b.age,
        notes=b.notes,
        status=b.status,
        created_at=b.created_at,
        updated_at=b.updated_at,
        doctor=DoctorSummary(id=b.doctor.id, name=b.doctor.name, specialty=b.doctor.specialty) if b.doctor else None,
    )


@router.post(
    "",
    response_model=BookingResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def create_booking(
    booking_data: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service),
):
    """Book an appointment; the response carries the allocated booking code."""
    return to_booking_response(booking_service.create_booking(booking_data))


@router.get("", response_model=List[BookingResponse], responses={400: {"model": ErrorResponse}})
def list_bookings(
    status: Optional[str] = Query(None),
    doctor_id: Optional[int] = Query(None, alias="doctorId"),
    booking_service: BookingService = Depends(get_booking_service),
):
    bookings = booking_service.list_bookings(status=status, doctor_id=doctor_id)
    return [to_booking_response(b) for b in bookings]


@router.get("/{booking_id}", response_model=BookingResponse, responses={404: {"model": ErrorResponse}})
def get_booking(
    booking_id: str,
    booking_service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(booking_service.get_booking(booking_id))


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_booking(
    booking_id: str,
    update_data: BookingUpdate,
    booking_service: BookingService = Depends(get_booking_service),
):
    """Change the status of a booking; any status may follow any other."""
    return to_booking_response(booking_service.update_booking(booking_id, update_data))
