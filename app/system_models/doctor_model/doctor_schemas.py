# app/system_models/doctor_model/doctor_schemas.py
from typing import Dict, List, Optional

from app.system_models.base_schemas import ClinicSchema
from app.system_models.appointment_model.appointment_schemas import AppointmentResponse


class DoctorBase(ClinicSchema):
    name: str
    specialization: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    available_slots: List[str] = []


class DoctorSeed(DoctorBase):
    """Catalog entry as loaded from seed data or a snapshot."""
    id: Optional[int] = None


class DoctorResponse(DoctorBase):
    id: int


class DoctorSchedule(ClinicSchema):
    """A doctor's appointments bucketed by lifecycle status."""
    doctor: DoctorResponse
    appointments: Dict[str, List[AppointmentResponse]]


class OpenSlots(ClinicSchema):
    doctor_id: int
    date: str
    available_slots: List[str]
    booked_slots: List[str]
