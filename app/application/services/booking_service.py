import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError as SchemaValidationError

from ..ports.bookings_repo import BookingsRepository, BookingDto, NewBooking
from ...exceptions import NotFound, ResourceExhausted, ValidationError, format_validation_errors
from ...schemas.bookings.booking import BookingCreate, BookingStatus, BookingUpdate
from ...utils import generate_booking_code

logger = logging.getLogger(__name__)


@dataclass
class BookingService:
    """Validates, allocates a booking code for, persists and enriches bookings.

    The time slot and date are not checked against the doctor's declared
    timings/availableDays; the booking wizard only offers valid combinations.
    """

    repo: BookingsRepository
    code_prefix: str = "BK"
    max_code_attempts: int = 50
    code_generator: Callable[[str], str] = field(default=generate_booking_code)

    def create_booking(self, data: Union[BookingCreate, Mapping[str, Any]]) -> BookingDto:
        request = self._validate(BookingCreate, data)

        doctor = self.repo.get_doctor_summary(request.doctor_id)
        if not doctor:
            raise NotFound("Doctor not found")

        code = self.allocate_code()
        created = self.repo.create(
            NewBooking(
                booking_id=code,
                service=request.service.value,
                doctor_id=request.doctor_id,
                date=request.date,
                time_slot=request.time_slot,
                owner_name=request.owner_name,
                phone=request.phone,
                pet_type=request.pet_type,
                breed=request.breed,
                age=request.age,
                notes=request.notes,
                status=BookingStatus.PENDING.value,
            )
        )
        logger.info(f"Created booking {created.booking_id} ({created.id}) with doctor {created.doctor_id}")
        return self._enrich_created(created)

    def allocate_code(self) -> str:
        """Probe for a free booking code; the UNIQUE constraint still has the final say."""
        for attempt in range(1, self.max_code_attempts + 1):
            code = self.code_generator(self.code_prefix)
            if not self.repo.find_by_code(code):
                return code
            logger.info(f"Booking code {code} already in use (attempt {attempt}/{self.max_code_attempts})")
        logger.error(f"No free booking code after {self.max_code_attempts} attempts")
        raise ResourceExhausted("Could not allocate a booking code, please retry")

    def _enrich_created(self, created: BookingDto) -> BookingDto:
        # Once persisted the booking is always returned, with or without its doctor
        try:
            booking = self.repo.find_by_id(created.id, with_doctor=True)
            if booking:
                return booking
            logger.error(f"Failed to re-fetch created booking {created.id}")
        except Exception as e:
            logger.warning(f"Error fetching booking {created.id} with doctor: {e}")

        try:
            created.doctor = self.repo.get_doctor_summary(created.doctor_id)
        except Exception as e:
            logger.warning(f"Returning booking {created.id} without doctor details: {e}")
        return created

    def get_booking(self, booking_id: str) -> BookingDto:
        booking = self.repo.find_by_id(booking_id, with_doctor=True)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def list_bookings(self, status: Optional[Union[str, BookingStatus]] = None, doctor_id: Optional[int] = None) -> List[BookingDto]:
        if status is not None:
            status = self._parse_status(status)
        return self.repo.list(status=status, doctor_id=doctor_id)

    def update_booking(self, booking_id: str, data: Union[BookingUpdate, Mapping[str, Any]]) -> BookingDto:
        update = self._validate(BookingUpdate, data)
        if update.status is None:
            return self.get_booking(booking_id)

        updated = self.repo.update_status(booking_id, update.status.value)
        if not updated:
            raise NotFound("Booking not found")
        logger.info(f"Booking {updated.booking_id} status set to {updated.status}")
        return self.repo.find_by_id(booking_id, with_doctor=True) or updated

    def _parse_status(self, status: Union[str, BookingStatus]) -> str:
        try:
            return BookingStatus(status).value
        except ValueError:
            allowed = [s.value for s in BookingStatus]
            raise ValidationError(
                "Validation error",
                details=[{
                    "field": "status",
                    "message": f"Input should be one of: {', '.join(allowed)}",
                    "type": "enum",
                }],
            )

    def _validate(self, schema, data):
        if isinstance(data, schema):
            return data
        try:
            return schema.model_validate(data)
        except SchemaValidationError as e:
            raise ValidationError("Validation error", details=format_validation_errors(e.errors()))
