"""
Shared fixtures: a freshly seeded in-memory store per test, principals for
each role, and an HTTP client running the full application lifespan.
"""
import pytest
from fastapi.testclient import TestClient

from app.clinical_store.authorization import Principal
from app.clinical_store.seed import seed_demo_data
from app.clinical_store.store import ClinicalStore
from app.database.connection import create_db_engine
from config.appconfig import Settings


@pytest.fixture
def store():
    engine = create_db_engine("sqlite://")
    clinic = ClinicalStore(engine)
    seed_demo_data(clinic)
    yield clinic
    engine.dispose()


@pytest.fixture
def receptionist():
    return Principal.receptionist(name="Mary Johnson")


@pytest.fixture
def doctor():
    # Dr. Sarah Smith, seeded as doctor 1
    return Principal.doctor(1, name="Dr. Sarah Smith")


@pytest.fixture
def other_doctor():
    return Principal.doctor(2, name="Dr. Michael Brown")


@pytest.fixture
def patient():
    # John Doe, seeded as patient 1
    return Principal.patient(1, name="John Doe")


@pytest.fixture
def booking():
    return {
        "patient_id": 1,
        "doctor_id": 1,
        "date": "2025-09-01",
        "time": "09:00",
        "reason": "Chest pain follow-up",
    }


@pytest.fixture
def app_settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SNAPSHOT_PATH=None,
        SEED_DEMO_DATA=True,
        SECRET_KEY="test-secret-key",
    )


@pytest.fixture
def client(app_settings):
    from app.main import create_app

    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


def login(client, email, password="password123"):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@pytest.fixture
def patient_headers(client):
    return login(client, "patient@hospital.com")


@pytest.fixture
def doctor_headers(client):
    return login(client, "doctor@hospital.com")


@pytest.fixture
def receptionist_headers(client):
    return login(client, "receptionist@hospital.com")
