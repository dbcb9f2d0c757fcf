"""
test_snapshot.py
----------------
Snapshot export/reload, on its own and across an application restart.
"""
import json

from fastapi.testclient import TestClient

from app.clinical_store.store import ClinicalStore
from app.database.connection import create_db_engine
from config.appconfig import Settings
from tests.conftest import login


def fresh_store():
    return ClinicalStore(create_db_engine("sqlite://"))


def test_snapshot_round_trip_keeps_ids(store, receptionist, doctor, booking):
    booked = store.add_appointment(receptionist, booking)
    store.confirm_appointment(doctor, booked.id)

    copy = fresh_store()
    copy.load_snapshot(store.export_snapshot())

    assert copy.counts() == store.counts()
    assert copy.get_appointment(booked.id).status == "confirmed"
    assert copy.get_prescription(1).medicines[0].medicine_name == "Aspirin"


def test_loading_replaces_existing_content(store, receptionist):
    store.add_patient(receptionist, {"name": "Jane Roe"})
    empty = fresh_store().export_snapshot()

    store.load_snapshot(empty)

    assert store.counts() == {
        "doctors": 0,
        "patients": 0,
        "appointments": 0,
        "medicines": 0,
        "prescriptions": 0,
    }


def test_snapshot_file_uses_camel_case(store, tmp_path):
    path = store.save_snapshot(tmp_path / "nested" / "clinic.json")

    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["version"] == 1
    assert document["appointments"][0]["patientId"] == 1
    assert document["doctors"][0]["availableSlots"][0] == "09:00"

    copy = fresh_store()
    copy.load_snapshot_file(path)
    assert copy.get_patient(1).name == "John Doe"


def test_service_restart_restores_state(tmp_path):
    app_settings = Settings(
        DATABASE_URL="sqlite://",
        SNAPSHOT_PATH=str(tmp_path / "clinic.json"),
        SEED_DEMO_DATA=True,
        SECRET_KEY="test-secret-key",
    )
    from app.main import create_app

    with TestClient(create_app(app_settings)) as client:
        headers = login(client, "receptionist@hospital.com")
        resp = client.post(
            "/api/clinic/appointments",
            json={"patientId": 1, "doctorId": 2, "date": "2025-09-02", "time": "13:00"},
            headers=headers,
        )
        assert resp.status_code == 201
        booked_id = resp.json()["id"]

    assert (tmp_path / "clinic.json").exists()

    with TestClient(create_app(app_settings)) as client:
        headers = login(client, "receptionist@hospital.com")
        resp = client.get(f"/api/clinic/appointments/{booked_id}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["doctorId"] == 2
        assert resp.json()["status"] == "scheduled"
