import pytest

from app.application.ports.doctors_repo import NewDoctor
from app.application.services.doctors_service import DoctorsService, parse_doctor_id
from app.exceptions import NotFound, ValidationError
from app.schemas.doctors.doctor import DoctorCreate
from app.utils import dump_sequence, load_sequence

from fakes import FakeDoctorsRepo


def make_service():
    repo = FakeDoctorsRepo()
    repo.create(NewDoctor(name="Dr. Ashok Kumar", qualification="MVSc", experience=34, specialty="Medicine",
                          timings=["10:00 AM", "3:00 PM"], available_days=["Monday"]))
    repo.create(NewDoctor(name="External Specialist", qualification="Visiting Surgeon", experience=20,
                          specialty="Surgery", timings=["On-Call"], is_external=True))
    return DoctorsService(repo=repo)


def test_list_doctors_in_id_order():
    doctors = make_service().list_doctors()
    assert [d.id for d in doctors] == [1, 2]
    assert doctors[1].is_external is True


@pytest.mark.parametrize("raw", [1, "1", " 2 "])
def test_get_doctor_accepts_positive_ids(raw):
    assert make_service().get_doctor(raw).id == int(str(raw).strip())


@pytest.mark.parametrize("raw", ["abc", "0", "-1", "1.5", "", 0, -4, True])
def test_get_doctor_rejects_invalid_ids(raw):
    with pytest.raises(ValidationError) as exc:
        make_service().get_doctor(raw)
    assert exc.value.message == "Invalid doctor ID"


def test_get_doctor_not_found():
    with pytest.raises(NotFound):
        make_service().get_doctor(99)


def test_parse_doctor_id():
    assert parse_doctor_id("12") == 12


def test_create_doctor_keeps_schedule_order():
    svc = DoctorsService(repo=FakeDoctorsRepo())
    out = svc.create_doctor(DoctorCreate(
        name="Dr. Priya Mehta", qualification="MVSc", experience=8, specialty="Dermatology",
        timings=["4:30 PM", "11:00 AM"], available_days=["Friday", "Tuesday"],
    ))
    assert out.timings == ["4:30 PM", "11:00 AM"]
    assert out.available_days == ["Friday", "Tuesday"]


def test_schedule_sequence_round_trip():
    slots = ["9:00 AM", "9:30 AM", "5:00 PM"]
    assert load_sequence(dump_sequence(slots)) == slots


@pytest.mark.parametrize("raw", ["not json", '{"monday": []}', '"10:00 AM"', None, ""])
def test_malformed_schedule_fails_closed(raw):
    assert load_sequence(raw) == []
