# app/system_services/system_routes.py
"""
Clinic API
Thin HTTP layer over the Clinical Store. Every endpoint needs a bearer token;
the store itself decides whether the principal may perform a mutation.
List endpoints are scoped here so patients only ever see their own records.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.clinical_store.authorization import Principal, Role
from app.clinical_store.lifecycle import AppointmentStatus
from app.clinical_store.store import ClinicalStore
from app.system_models.appointment_model.appointment_schemas import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from app.system_models.doctor_model.doctor_schemas import DoctorResponse, DoctorSchedule, OpenSlots
from app.system_models.medicine_model.medicine_schemas import MedicineResponse
from app.system_models.patient_model.patient_schemas import PatientCreate, PatientRecord, PatientResponse
from app.system_models.prescription_model.prescription_schemas import (
    PrescriptionCreate,
    PrescriptionDraft,
    PrescriptionIssued,
    PrescriptionResponse,
)
from app.users.auth_dependencies import get_current_principal, get_store, require_roles

router = APIRouter()

staff_only = require_roles(Role.DOCTOR, Role.RECEPTIONIST)


def _found(record, label: str):
    if record is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def _check_patient_scope(principal: Principal, patient_id: int) -> None:
    if principal.role == Role.PATIENT and principal.subject_id != patient_id:
        raise HTTPException(status_code=403, detail="Patients may only view their own records")


# ============================================================
# ✅ DOCTORS & MEDICINES (reference catalog)
# ============================================================
@router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors(
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return store.list_doctors()


@router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
def get_doctor(
    doctor_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return _found(store.get_doctor(doctor_id), "Doctor")


@router.get("/doctors/{doctor_id}/open-slots", response_model=OpenSlots)
def get_open_slots(
    doctor_id: int,
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """
    Catalog slots not yet taken on the given day.
    Informational only: booking does not require a free slot.
    """
    return _found(store.get_open_slots(doctor_id, day), "Doctor")


@router.get("/doctors/{doctor_id}/schedule", response_model=DoctorSchedule)
def get_doctor_schedule(
    doctor_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(staff_only),
):
    """Appointments for a doctor grouped by status (scheduled, confirmed, completed, cancelled)."""
    return _found(store.get_doctor_schedule(doctor_id), "Doctor")


@router.get("/medicines", response_model=List[MedicineResponse])
def list_medicines(
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return store.list_medicines()


# ============================================================
# ✅ PATIENTS
# ============================================================
@router.get("/patients", response_model=List[PatientResponse])
def list_patients(
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(staff_only),
):
    return store.list_patients()


@router.post("/patients", response_model=PatientResponse, status_code=201)
def create_patient(
    patient: PatientCreate,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """Receptionist intake of a new patient."""
    return store.add_patient(principal, patient)


@router.get("/patients/{patient_id}", response_model=PatientResponse)
def get_patient(
    patient_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    _check_patient_scope(principal, patient_id)
    return _found(store.get_patient(patient_id), "Patient")


@router.get("/patients/{patient_id}/record", response_model=PatientRecord)
def get_patient_record(
    patient_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """Patient details with full appointment and prescription history."""
    _check_patient_scope(principal, patient_id)
    return _found(store.get_patient_record(patient_id), "Patient")


# ============================================================
# ✅ APPOINTMENTS
# ============================================================
@router.get("/appointments", response_model=List[AppointmentResponse])
def list_appointments(
    patient_id: Optional[int] = Query(None),
    doctor_id: Optional[int] = Query(None),
    day: Optional[date] = Query(None, alias="date"),
    status_filter: Optional[List[AppointmentStatus]] = Query(None, alias="status"),
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """
    Appointments in booking order. Patients always get only their own.

    Example: GET /api/clinic/appointments?doctor_id=1&status=scheduled&status=confirmed
    """
    if principal.role == Role.PATIENT:
        if principal.subject_id is None:
            return []
        patient_id = principal.subject_id
    if patient_id is None and doctor_id is None and day is None and not status_filter:
        return store.list_appointments()
    return store.find_appointments(
        patient_id=patient_id,
        doctor_id=doctor_id,
        day=day,
        statuses=status_filter,
    )


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
def book_appointment(
    appointment: AppointmentCreate,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return store.add_appointment(principal, appointment)


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    appointment = _found(store.get_appointment(appointment_id), "Appointment")
    _check_patient_scope(principal, appointment.patient_id)
    return appointment


@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
def reschedule_appointment(
    appointment_id: int,
    changes: AppointmentReschedule,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return _found(store.reschedule_appointment(principal, appointment_id, changes), "Appointment")


@router.post("/appointments/{appointment_id}/confirm", response_model=AppointmentResponse)
def confirm_appointment(
    appointment_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return _found(store.confirm_appointment(principal, appointment_id), "Appointment")


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    return _found(store.cancel_appointment(principal, appointment_id), "Appointment")


@router.post("/appointments/{appointment_id}/complete", response_model=PrescriptionIssued)
def complete_appointment(
    appointment_id: int,
    prescription: PrescriptionDraft,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """Complete a confirmed appointment by issuing its prescription."""
    return _found(store.complete_appointment(principal, appointment_id, prescription), "Appointment")


# ============================================================
# ✅ PRESCRIPTIONS
# ============================================================
@router.get("/prescriptions", response_model=List[PrescriptionResponse])
def list_prescriptions(
    patient_id: Optional[int] = Query(None),
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    if principal.role == Role.PATIENT:
        if principal.subject_id is None:
            return []
        patient_id = principal.subject_id
    if patient_id is None:
        return store.list_prescriptions()
    return store.get_prescriptions_by_patient(patient_id)


@router.get("/prescriptions/{prescription_id}", response_model=PrescriptionResponse)
def get_prescription(
    prescription_id: int,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    prescription = _found(store.get_prescription(prescription_id), "Prescription")
    _check_patient_scope(principal, prescription.patient_id)
    return prescription


@router.post("/prescriptions", response_model=PrescriptionIssued, status_code=201)
def issue_prescription(
    prescription: PrescriptionCreate,
    store: ClinicalStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    """Issue a prescription; its appointment is completed in the same step."""
    return _found(store.add_prescription(principal, prescription), "Appointment")
