# app/system_models/patient_model/patient_schemas.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import field_validator

from app.system_models.base_schemas import ClinicSchema, blank_to_none
from app.system_models.appointment_model.appointment_schemas import AppointmentResponse
from app.system_models.prescription_model.prescription_schemas import PrescriptionResponse


class PatientBase(ClinicSchema):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None

    @field_validator("email", "phone", "date_of_birth", "gender", "address", mode="before")
    def empty_as_missing(cls, v):
        return blank_to_none(v)


class PatientCreate(PatientBase):
    pass


class PatientResponse(PatientBase):
    id: int


class PatientSeed(PatientBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None


class PatientRecord(ClinicSchema):
    """Everything a doctor sees when opening a patient's records."""
    patient: PatientResponse
    appointments: List[AppointmentResponse]
    prescriptions: List[PrescriptionResponse]
