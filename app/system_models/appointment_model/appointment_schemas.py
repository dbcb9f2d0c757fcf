# app/system_models/appointment_model/appointment_schemas.py
import datetime as dt
from typing import Optional

from pydantic import ConfigDict, field_validator

from app.clinical_store.lifecycle import AppointmentStatus
from app.system_models.base_schemas import ClinicSchema, blank_to_none


class AppointmentBase(ClinicSchema):
    patient_id: int
    doctor_id: int
    date: dt.date
    time: str
    reason: str = ""

    @field_validator("reason", mode="before")
    def reason_defaults_to_empty(cls, v):
        return "" if v is None else v


class AppointmentCreate(AppointmentBase):
    """Booking payload. Any status sent by the client is ignored."""
    pass


class AppointmentReschedule(ClinicSchema):
    """
    Receptionist edit of an appointment.
    Only scheduling fields can change; status is never part of an edit.
    """
    model_config = ConfigDict(extra="forbid")

    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("patient_id", "doctor_id", "date", "time", mode="before")
    def empty_as_unchanged(cls, v):
        return blank_to_none(v)


class AppointmentResponse(AppointmentBase):
    id: int
    status: AppointmentStatus
    created_at: dt.datetime


class AppointmentSeed(AppointmentBase):
    """Appointment as stored in a snapshot, including its lifecycle state."""
    id: Optional[int] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    created_at: Optional[dt.datetime] = None
