import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import Database
from app.db.seed import seed_doctors
from app.main import create_app


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", SEED_ON_STARTUP=False, API_PREFIX="")


@pytest.fixture
def database(settings):
    db = Database(settings)
    db.create_db_and_tables()
    yield db
    db.close()


@pytest.fixture
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture
def seeded_database(database):
    with database.session() as s:
        seed_doctors(s)
    return database


@pytest.fixture
def client(settings, seeded_database):
    app = create_app(settings, seeded_database)
    with TestClient(app) as c:
        yield c
