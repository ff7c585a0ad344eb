#!/usr/bin/env python3
"""
Create the tables and seed the clinic's doctors.

    python -m app.db.seed            # seed only when the doctors table is empty
    python -m app.db.seed --reset    # wipe bookings and doctors first
"""
import argparse
import logging
import sys
from typing import List

from sqlmodel import Session, delete

from ..application.services.doctors_service import DoctorsService
from ..config import settings
from ..database import Database
from ..infrastructure.persistence.sqlalchemy.repositories.doctors_repository_sql import SqlDoctorsRepository
from ..schemas.doctors.doctor import DoctorCreate
from .models import Booking, Doctor

logger = logging.getLogger(__name__)

CLINIC_DOCTORS: List[DoctorCreate] = [
    DoctorCreate(
        name="Dr. Ashok Kumar",
        photo="/doctors/doctor1.jpg",
        qualification="BVSc & AH, MVSc (Medicine)",
        experience=34,
        specialty="Internal Medicine & Vaccination",
        phone="+919876543210",
        timings=["10:00 AM", "10:30 AM", "11:00 AM", "11:30 AM", "2:00 PM", "2:30 PM", "3:00 PM"],
        available_days=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
        bio="Specializes in preventive care and complex medical cases with over a decade of experience.",
    ),
    DoctorCreate(
        name="Dr. Rajesh Kumar",
        photo="/doctors/doctor2.jpg",
        qualification="BVSc & AH, PhD (Veterinary Surgery)",
        experience=15,
        specialty="Orthopedic & Soft Tissue Surgery",
        phone="+919876543211",
        timings=["9:00 AM", "9:30 AM", "10:00 AM", "10:30 AM", "4:00 PM", "4:30 PM", "5:00 PM"],
        available_days=["Monday", "Wednesday", "Friday", "Saturday"],
        bio="Expert in surgical procedures with a gentle approach to patient care.",
    ),
    DoctorCreate(
        name="Dr. Priya Mehta",
        photo="/doctors/doctor3.jpg",
        qualification="BVSc & AH, MVSc (Dermatology)",
        experience=8,
        specialty="Dermatology & General Practice",
        phone="+919876543212",
        timings=["11:00 AM", "11:30 AM", "12:00 PM", "3:00 PM", "3:30 PM", "4:00 PM", "4:30 PM"],
        available_days=["Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
        bio="Focused on skin conditions and allergies with compassionate pet handling.",
    ),
    DoctorCreate(
        name="External Specialist",
        photo="/doctors/specialist.jpg",
        qualification="Visiting Surgeon",
        experience=20,
        specialty="Advanced Surgical Procedures",
        phone="+919876543213",
        timings=["On-Call"],
        available_days=["By Appointment"],
        bio="Available for complex surgeries and specialized procedures upon request.",
        is_external=True,
    ),
]


def reset_tables(session: Session) -> None:
    # Bookings first, they reference doctors
    session.exec(delete(Booking))
    session.exec(delete(Doctor))
    session.commit()


def seed_doctors(session: Session, reset: bool = False) -> int:
    """Insert the clinic doctors; returns how many were created."""
    if reset:
        reset_tables(session)

    repo = SqlDoctorsRepository(session)
    if repo.count() > 0:
        logger.info("Doctors already present, skipping seed")
        return 0

    service = DoctorsService(repo)
    for doctor in CLINIC_DOCTORS:
        service.create_doctor(doctor)
    logger.info(f"Seeded {len(CLINIC_DOCTORS)} doctors")
    return len(CLINIC_DOCTORS)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create tables and seed clinic doctors")
    parser.add_argument("--reset", action="store_true", help="delete existing bookings and doctors first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL), format=settings.LOG_FORMAT)
    db = Database(settings)
    try:
        db.create_db_and_tables()
        with db.session() as session:
            created = seed_doctors(session, reset=args.reset)
        print(f"Seeded {created} doctors")
        return 0
    except Exception as e:
        logger.exception(f"Error seeding database: {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
