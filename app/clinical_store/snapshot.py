# app/clinical_store/snapshot.py
"""
Clinic snapshots.

A snapshot is the full content of the five clinical collections as one
JSON document. It is how the in-memory store survives a restart: write on
shutdown, reload on startup. Record ids are preserved on reload.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.helpers.time import utcnow
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.appointment_model.appointment_schemas import AppointmentSeed
from app.system_models.base_schemas import ClinicSchema
from app.system_models.doctor_model.doctor_model import Doctor
from app.system_models.doctor_model.doctor_schemas import DoctorSeed
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.medicine_model.medicine_schemas import MedicineSeed
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import PatientSeed
from app.system_models.prescription_model.prescription_model import Prescription, PrescriptionMedicine
from app.system_models.prescription_model.prescription_schemas import PrescriptionSeed

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class ClinicSnapshot(ClinicSchema):
    version: int = SNAPSHOT_VERSION
    exported_at: Optional[datetime] = None
    doctors: List[DoctorSeed] = []
    patients: List[PatientSeed] = []
    medicines: List[MedicineSeed] = []
    appointments: List[AppointmentSeed] = []
    prescriptions: List[PrescriptionSeed] = []


def export_collections(session: Session) -> ClinicSnapshot:
    def rows(model, schema):
        return [schema.model_validate(r) for r in session.scalars(select(model).order_by(model.id)).all()]

    return ClinicSnapshot(
        exported_at=utcnow(),
        doctors=rows(Doctor, DoctorSeed),
        patients=rows(Patient, PatientSeed),
        medicines=rows(Medicine, MedicineSeed),
        appointments=rows(Appointment, AppointmentSeed),
        prescriptions=rows(Prescription, PrescriptionSeed),
    )


def replace_collections(session: Session, snapshot: ClinicSnapshot) -> None:
    """Delete every clinical row, then insert the snapshot's records."""
    if snapshot.version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version: {snapshot.version}")

    # Children first so foreign keys never dangle
    for model in (PrescriptionMedicine, Prescription, Appointment, Patient, Doctor, Medicine):
        session.execute(delete(model))

    now = utcnow()
    for doctor in snapshot.doctors:
        session.add(Doctor(**doctor.model_dump(exclude_none=True)))
    for patient in snapshot.patients:
        session.add(Patient(**patient.model_dump(exclude={"created_at"}), created_at=patient.created_at or now))
    for medicine in snapshot.medicines:
        session.add(Medicine(**medicine.model_dump(exclude_none=True)))
    session.flush()

    for appointment in snapshot.appointments:
        session.add(
            Appointment(
                **appointment.model_dump(exclude={"status", "created_at"}),
                status=appointment.status.value,
                created_at=appointment.created_at or now,
            )
        )
    session.flush()

    for prescription in snapshot.prescriptions:
        session.add(
            Prescription(
                **prescription.model_dump(exclude={"medicines", "created_at"}),
                created_at=prescription.created_at or now,
                medicines=[
                    PrescriptionMedicine(position=position, **line.model_dump())
                    for position, line in enumerate(prescription.medicines)
                ],
            )
        )
    session.flush()


def write_snapshot_file(snapshot: ClinicSnapshot, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info(f"💾 Snapshot written to {path}")
    return path


def read_snapshot_file(path: Union[str, Path]) -> ClinicSnapshot:
    path = Path(path)
    logger.info(f"📄 Reading snapshot from {path}")
    return ClinicSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
