# app/system_models/prescription_model/prescription_schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from app.system_models.base_schemas import ClinicSchema, blank_to_none
from app.system_models.appointment_model.appointment_schemas import AppointmentResponse


class MedicineLineInput(ClinicSchema):
    """One row of the prescription form. Rows without a medicine are dropped."""
    medicine_id: Optional[int] = None
    dosage: str = ""
    frequency: str = ""
    duration: str = ""
    instructions: str = ""

    @field_validator("medicine_id", mode="before")
    def unselected_medicine(cls, v):
        return blank_to_none(v)

    @field_validator("dosage", "frequency", "duration", "instructions", mode="before")
    def none_as_empty(cls, v):
        return "" if v is None else v


class PrescriptionDraft(ClinicSchema):
    """Prescription content submitted when completing an appointment."""
    medicines: List[MedicineLineInput]
    notes: str = ""


class PrescriptionCreate(PrescriptionDraft):
    appointment_id: int


class MedicineLineResponse(ClinicSchema):
    medicine_id: int
    medicine_name: str
    dosage: str
    frequency: str
    duration: str = ""
    instructions: str = ""


class PrescriptionResponse(ClinicSchema):
    id: int
    patient_id: int
    doctor_id: int
    appointment_id: int
    medicines: List[MedicineLineResponse]
    notes: str = ""
    created_at: datetime


class PrescriptionSeed(ClinicSchema):
    """Prescription as stored in a snapshot."""
    id: Optional[int] = None
    patient_id: int
    doctor_id: int
    appointment_id: int
    medicines: List[MedicineLineResponse]
    notes: str = ""
    created_at: Optional[datetime] = None


class PrescriptionIssued(ClinicSchema):
    """Result of issuing a prescription: the new record and the completed appointment."""
    appointment: AppointmentResponse
    prescription: PrescriptionResponse
