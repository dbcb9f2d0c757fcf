"""
test_store.py
-------------
Clinical Store: booking, transitions, reschedule, queries and composite views.
"""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.clinical_store.authorization import Principal
from app.clinical_store.exceptions import (
    InvalidTransitionError,
    PermissionDeniedError,
    ReferenceNotFoundError,
)
from app.clinical_store.lifecycle import STATUS_VALUES, AppointmentStatus
from app.system_models.appointment_model.appointment_model import Appointment


# ── Seeded catalog ────────────────────────────────────────────────────────────

def test_demo_data_is_loaded(store):
    assert store.counts() == {
        "doctors": 3,
        "patients": 1,
        "appointments": 2,
        "medicines": 3,
        "prescriptions": 1,
    }
    assert [d.name for d in store.list_doctors()] == [
        "Dr. Sarah Smith",
        "Dr. Michael Brown",
        "Dr. Emily Davis",
    ]
    assert store.get_medicine(1).name == "Aspirin"


def test_unknown_records_return_none(store):
    assert store.get_doctor(99) is None
    assert store.get_patient(99) is None
    assert store.get_appointment(99) is None
    assert store.get_prescription(99) is None


# ── Patients ──────────────────────────────────────────────────────────────────

def test_receptionist_registers_patient(store, receptionist):
    created = store.add_patient(receptionist, {"name": "Jane Roe", "phone": "", "email": "jane@hospital.com"})

    assert created.id == 2
    assert created.phone is None
    assert store.get_patient(2).name == "Jane Roe"


def test_doctor_cannot_register_patient(store, doctor):
    with pytest.raises(PermissionDeniedError):
        store.add_patient(doctor, {"name": "Jane Roe"})
    assert store.counts()["patients"] == 1


# ── Booking ───────────────────────────────────────────────────────────────────

def test_booking_starts_scheduled_with_fresh_id(store, patient, booking):
    appointment = store.add_appointment(patient, {**booking, "status": "completed"})

    assert appointment.id == 3
    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.date == date(2025, 9, 1)
    assert appointment.created_at is not None


def test_patient_cannot_book_for_someone_else(store, receptionist, booking):
    other = store.add_patient(receptionist, {"name": "Jane Roe"})
    with pytest.raises(PermissionDeniedError):
        store.add_appointment(Principal.patient(other.id), booking)


def test_doctor_cannot_book(store, doctor, booking):
    with pytest.raises(PermissionDeniedError):
        store.add_appointment(doctor, booking)


@pytest.mark.parametrize("field, value", [("patient_id", 42), ("doctor_id", 42)])
def test_booking_requires_existing_references(store, receptionist, booking, field, value):
    with pytest.raises(ReferenceNotFoundError):
        store.add_appointment(receptionist, {**booking, field: value})
    assert store.counts()["appointments"] == 2


def test_ids_are_never_reused(store, receptionist, booking):
    first = store.add_appointment(receptionist, booking)
    snapshot = store.export_snapshot()
    snapshot.appointments = [a for a in snapshot.appointments if a.id != first.id]
    store.load_snapshot(snapshot)

    second = store.add_appointment(receptionist, booking)
    assert second.id > first.id


# ── Transitions ───────────────────────────────────────────────────────────────

def test_doctor_confirms_own_appointment(store, doctor):
    confirmed = store.confirm_appointment(doctor, 1)
    assert confirmed.status == AppointmentStatus.CONFIRMED
    assert store.get_appointment(1).status == AppointmentStatus.CONFIRMED


def test_doctor_cannot_confirm_another_doctors_appointment(store, other_doctor):
    with pytest.raises(PermissionDeniedError):
        store.confirm_appointment(other_doctor, 1)
    assert store.get_appointment(1).status == AppointmentStatus.SCHEDULED


def test_patient_cannot_confirm(store, patient):
    with pytest.raises(PermissionDeniedError):
        store.confirm_appointment(patient, 1)


def test_patient_cancels_own_appointment(store, patient):
    cancelled = store.cancel_appointment(patient, 1)
    assert cancelled.status == AppointmentStatus.CANCELLED


def test_cancel_twice_is_a_no_op(store, receptionist):
    store.cancel_appointment(receptionist, 1)
    again = store.cancel_appointment(receptionist, 1)
    assert again.status == AppointmentStatus.CANCELLED


def test_cancelled_appointment_cannot_be_confirmed(store, receptionist):
    store.cancel_appointment(receptionist, 1)
    with pytest.raises(InvalidTransitionError):
        store.confirm_appointment(receptionist, 1)
    assert store.get_appointment(1).status == AppointmentStatus.CANCELLED


def test_completed_appointment_cannot_be_cancelled(store, receptionist):
    # appointment 2 is the completed visit from the demo history
    with pytest.raises(InvalidTransitionError):
        store.cancel_appointment(receptionist, 2)


def test_unknown_appointment_is_a_no_op(store, receptionist):
    assert store.confirm_appointment(receptionist, 99) is None
    assert store.cancel_appointment(receptionist, 99) is None
    assert store.reschedule_appointment(receptionist, 99, {"time": "11:00"}) is None
    assert store.counts()["appointments"] == 2


# ── Reschedule ────────────────────────────────────────────────────────────────

def test_receptionist_reschedules_and_keeps_status(store, receptionist):
    store.confirm_appointment(receptionist, 1)
    moved = store.reschedule_appointment(
        receptionist, 1, {"date": "2025-08-12", "time": "14:00", "doctor_id": 2}
    )

    assert moved.status == AppointmentStatus.CONFIRMED
    assert moved.date == date(2025, 8, 12)
    assert moved.time == "14:00"
    assert moved.doctor_id == 2
    assert moved.reason == "Regular checkup"


def test_reschedule_cannot_set_status(store, receptionist):
    with pytest.raises(ValueError):
        store.reschedule_appointment(receptionist, 1, {"status": "completed"})
    assert store.get_appointment(1).status == AppointmentStatus.SCHEDULED


def test_reschedule_is_receptionist_only(store, doctor):
    with pytest.raises(PermissionDeniedError):
        store.reschedule_appointment(doctor, 1, {"time": "11:00"})


def test_reschedule_rejects_terminal_appointments(store, receptionist):
    with pytest.raises(InvalidTransitionError):
        store.reschedule_appointment(receptionist, 2, {"time": "11:00"})


def test_reschedule_to_unknown_doctor_fails(store, receptionist):
    with pytest.raises(ReferenceNotFoundError):
        store.reschedule_appointment(receptionist, 1, {"doctor_id": 42})
    assert store.get_appointment(1).doctor_id == 1


# ── Queries ───────────────────────────────────────────────────────────────────

def test_filters_preserve_booking_order(store, receptionist, booking):
    third = store.add_appointment(receptionist, booking)
    fourth = store.add_appointment(receptionist, {**booking, "doctor_id": 2, "time": "10:00"})

    assert [a.id for a in store.get_appointments_by_patient(1)] == [1, 2, third.id, fourth.id]
    assert [a.id for a in store.get_appointments_by_doctor(2)] == [fourth.id]
    assert [a.id for a in store.get_appointments_by_date(date(2025, 9, 1))] == [third.id, fourth.id]
    assert [a.id for a in store.get_appointments_by_status("completed")] == [2]
    assert store.get_appointments_by_doctor(3) == []


def test_upcoming_excludes_terminal_appointments(store, receptionist):
    assert [a.id for a in store.get_upcoming_appointments_for_patient(1)] == [1]
    store.cancel_appointment(receptionist, 1)
    assert store.get_upcoming_appointments_for_patient(1) == []


def test_patient_record(store):
    record = store.get_patient_record(1)

    assert record.patient.name == "John Doe"
    assert [a.id for a in record.appointments] == [1, 2]
    assert [p.id for p in record.prescriptions] == [1]
    assert store.get_patient_record(99) is None


def test_doctor_schedule_groups_by_status(store):
    schedule = store.get_doctor_schedule(1)

    assert [a.id for a in schedule.appointments["scheduled"]] == [1]
    assert [a.id for a in schedule.appointments["completed"]] == [2]
    assert schedule.appointments["confirmed"] == []
    assert store.get_doctor_schedule(99) is None


def test_open_slots_skip_active_bookings(store, receptionist, booking):
    store.add_appointment(receptionist, booking)
    cancelled = store.add_appointment(receptionist, {**booking, "time": "11:00"})
    store.cancel_appointment(receptionist, cancelled.id)

    slots = store.get_open_slots(1, date(2025, 9, 1))

    assert slots.booked_slots == ["09:00"]
    assert "09:00" not in slots.available_slots
    assert "11:00" in slots.available_slots
    assert store.get_open_slots(99, date(2025, 9, 1)) is None


def test_double_booking_is_allowed(store, receptionist, booking):
    first = store.add_appointment(receptionist, booking)
    second = store.add_appointment(receptionist, booking)
    assert first.id != second.id


# ── Status column ─────────────────────────────────────────────────────────────

def test_database_rejects_unknown_status(store):
    with Session(store.engine) as session:
        appointment = session.get(Appointment, 1)
        appointment.status = "pending"
        with pytest.raises(IntegrityError):
            session.commit()
    assert store.get_appointment(1).status == AppointmentStatus.SCHEDULED


def test_snapshot_with_unknown_status_is_rejected(store):
    snapshot = store.export_snapshot().model_dump()
    snapshot["appointments"][0]["status"] = "pending"

    with pytest.raises(ValueError):
        store.load_snapshot(snapshot)
    assert store.counts()["appointments"] == 2


def test_every_stored_status_is_known(store, receptionist, doctor, booking):
    store.add_appointment(receptionist, booking)
    store.confirm_appointment(doctor, 1)
    store.cancel_appointment(receptionist, 3)

    assert {a.status.value for a in store.list_appointments()} <= set(STATUS_VALUES)
