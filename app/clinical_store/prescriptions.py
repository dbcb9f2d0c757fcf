# app/clinical_store/prescriptions.py
"""
Prescription Issuance

Creates a prescription for a confirmed appointment and completes that
appointment inside the caller's transaction, so either both happen or
neither does.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.clinical_store.authorization import Action, Principal, authorize
from app.clinical_store.exceptions import (
    InvalidTransitionError,
    PrescriptionValidationError,
    ReferenceNotFoundError,
)
from app.clinical_store.lifecycle import AppointmentStatus, LifecycleAction, next_status
from app.helpers.time import utcnow
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.appointment_model.appointment_schemas import AppointmentResponse
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.prescription_model.prescription_model import Prescription, PrescriptionMedicine
from app.system_models.prescription_model.prescription_schemas import (
    MedicineLineInput,
    PrescriptionCreate,
    PrescriptionIssued,
    PrescriptionResponse,
)

logger = logging.getLogger(__name__)


def select_medicine_lines(lines: List[MedicineLineInput]) -> List[MedicineLineInput]:
    """
    Drop rows with no medicine selected, then require dosage and frequency
    on every remaining row.

    Raises:
        PrescriptionValidationError: a kept row is incomplete, or no row is left.
    """
    kept = [line for line in lines if line.medicine_id is not None]

    for index, line in enumerate(kept, start=1):
        missing = [name for name in ("dosage", "frequency") if not getattr(line, name).strip()]
        if missing:
            raise PrescriptionValidationError(
                f"Medicine line {index} is missing: {', '.join(missing)}"
            )

    if not kept:
        raise PrescriptionValidationError("A prescription needs at least one medicine")
    return kept


def build_medicine_rows(session: Session, lines: List[MedicineLineInput]) -> List[PrescriptionMedicine]:
    """Resolve each line against the medicine catalog, capturing the name."""
    rows = []
    for position, line in enumerate(lines):
        medicine = session.get(Medicine, line.medicine_id)
        if medicine is None:
            raise ReferenceNotFoundError(f"Medicine {line.medicine_id} not found")
        rows.append(
            PrescriptionMedicine(
                position=position,
                medicine_id=medicine.id,
                medicine_name=medicine.name,
                dosage=line.dosage.strip(),
                frequency=line.frequency.strip(),
                duration=line.duration.strip(),
                instructions=line.instructions.strip(),
            )
        )
    return rows


def issue_prescription(
    session: Session,
    actor: Principal,
    request: PrescriptionCreate,
) -> Optional[PrescriptionIssued]:
    """
    Issue a prescription and complete its appointment.

    Returns None when the appointment does not exist.

    Raises:
        PermissionDeniedError: actor is not the appointment's doctor.
        InvalidTransitionError: the appointment is not confirmed.
        PrescriptionValidationError: no usable medicine lines.
        ReferenceNotFoundError: a medicine id is not in the catalog.
    """
    appointment = session.get(Appointment, request.appointment_id)
    if appointment is None:
        logger.warning(f"Prescription for unknown appointment {request.appointment_id} ignored")
        return None

    authorize(
        actor,
        Action.ISSUE_PRESCRIPTION,
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
    )

    # Only a confirmed appointment can be closed with a prescription
    if appointment.status != AppointmentStatus.CONFIRMED.value:
        raise InvalidTransitionError(
            f"Cannot prescribe for an appointment that is {appointment.status}"
        )

    lines = select_medicine_lines(request.medicines)
    rows = build_medicine_rows(session, lines)

    prescription = Prescription(
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
        appointment_id=appointment.id,
        notes=request.notes or "",
        created_at=utcnow(),
        medicines=rows,
    )
    session.add(prescription)

    appointment.status = next_status(appointment.status, LifecycleAction.COMPLETE).value
    session.flush()

    logger.info(
        f"✅ Prescription {prescription.id} issued for appointment {appointment.id} "
        f"({len(rows)} medicine(s)); appointment completed"
    )
    return PrescriptionIssued(
        appointment=AppointmentResponse.model_validate(appointment),
        prescription=PrescriptionResponse.model_validate(prescription),
    )
