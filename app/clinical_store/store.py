# app/clinical_store/store.py
"""
Clinical Store
Single source of truth for doctors, patients, appointments, medicines and
prescriptions.

One ClinicalStore is created per process (see app/main.py) and handed to
consumers explicitly. Mutations take the acting Principal, are authorized,
run the lifecycle rules and commit in one transaction. Queries are pure and
return records in insertion order.

Unknown appointment ids make mutations a no-op returning None.
"""
import logging
import threading
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.clinical_store import snapshot as snapshot_io
from app.clinical_store.authorization import Action, Principal, authorize
from app.clinical_store.exceptions import ReferenceNotFoundError
from app.clinical_store.lifecycle import (
    ACTIVE_STATUSES,
    INITIAL_STATUS,
    AppointmentStatus,
    LifecycleAction,
    next_status,
)
from app.clinical_store.prescriptions import issue_prescription
from app.clinical_store.snapshot import ClinicSnapshot
from app.database.connection import create_session_factory
from app.helpers.time import utcnow
from app.system_models.appointment_model.appointment_model import Appointment
from app.system_models.appointment_model.appointment_schemas import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from app.system_models.doctor_model.doctor_model import Doctor
from app.system_models.doctor_model.doctor_schemas import DoctorResponse, DoctorSchedule, OpenSlots
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.medicine_model.medicine_schemas import MedicineResponse
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import PatientCreate, PatientRecord, PatientResponse
from app.system_models.prescription_model.prescription_model import Prescription
from app.system_models.prescription_model.prescription_schemas import (
    PrescriptionCreate,
    PrescriptionDraft,
    PrescriptionIssued,
    PrescriptionResponse,
)

logger = logging.getLogger(__name__)

StatusFilter = Union[AppointmentStatus, str]


class ClinicalStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        # Serializes every operation: at most one status transition is
        # observed at a time, even under a threaded server
        self._lock = threading.RLock()

    # ========================================================================
    # SESSION HANDLING
    # ========================================================================
    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._lock, self._session_factory() as session:
            with session.begin():
                yield session

    @contextmanager
    def _reading(self) -> Iterator[Session]:
        with self._lock, self._session_factory() as session:
            yield session

    @staticmethod
    def _require(session: Session, model, record_id: int, label: str):
        record = session.get(model, record_id)
        if record is None:
            raise ReferenceNotFoundError(f"{label} {record_id} not found")
        return record

    # ========================================================================
    # PATIENTS
    # ========================================================================
    def add_patient(
        self,
        actor: Principal,
        data: Union[PatientCreate, dict],
        on_created: Optional[Callable[[Session, PatientResponse], None]] = None,
    ) -> PatientResponse:
        """
        Register a patient (receptionist intake or self-registration).

        `on_created` runs inside the same transaction once the patient has an
        id; if it raises, the patient is not created either.
        """
        data = PatientCreate.model_validate(data)
        authorize(actor, Action.REGISTER_PATIENT)

        with self._transaction() as session:
            patient = Patient(**data.model_dump(), created_at=utcnow())
            session.add(patient)
            session.flush()
            result = PatientResponse.model_validate(patient)
            if on_created is not None:
                on_created(session, result)

        logger.info(f"Patient {result.id} registered by {actor.role.value}")
        return result

    # ========================================================================
    # APPOINTMENTS
    # ========================================================================
    def add_appointment(self, actor: Principal, data: Union[AppointmentCreate, dict]) -> AppointmentResponse:
        """
        Book an appointment. Status always starts as scheduled.

        No slot or double-booking checks are made; the doctor's slot list is
        a display catalog only.
        """
        data = AppointmentCreate.model_validate(data)
        authorize(actor, Action.BOOK_APPOINTMENT, patient_id=data.patient_id, doctor_id=data.doctor_id)

        with self._transaction() as session:
            self._require(session, Patient, data.patient_id, "Patient")
            self._require(session, Doctor, data.doctor_id, "Doctor")

            appointment = Appointment(
                **data.model_dump(),
                status=INITIAL_STATUS.value,
                created_at=utcnow(),
            )
            session.add(appointment)
            session.flush()
            result = AppointmentResponse.model_validate(appointment)

        logger.info(
            f"Appointment {result.id} booked: patient={result.patient_id} "
            f"doctor={result.doctor_id} {result.date} {result.time}"
        )
        return result

    def _transition(
        self,
        actor: Principal,
        appointment_id: int,
        action: LifecycleAction,
        permission: Action,
    ) -> Optional[AppointmentResponse]:
        with self._transaction() as session:
            appointment = session.get(Appointment, appointment_id)
            if appointment is None:
                logger.warning(f"{action.value} on unknown appointment {appointment_id} ignored")
                return None

            authorize(actor, permission, patient_id=appointment.patient_id, doctor_id=appointment.doctor_id)

            previous = appointment.status
            appointment.status = next_status(previous, action).value
            session.flush()
            result = AppointmentResponse.model_validate(appointment)

        if previous != result.status.value:
            logger.info(f"Appointment {appointment_id}: {previous} -> {result.status.value} by {actor.role.value}")
        return result

    def confirm_appointment(self, actor: Principal, appointment_id: int) -> Optional[AppointmentResponse]:
        return self._transition(actor, appointment_id, LifecycleAction.CONFIRM, Action.CONFIRM_APPOINTMENT)

    def cancel_appointment(self, actor: Principal, appointment_id: int) -> Optional[AppointmentResponse]:
        return self._transition(actor, appointment_id, LifecycleAction.CANCEL, Action.CANCEL_APPOINTMENT)

    def complete_appointment(
        self,
        actor: Principal,
        appointment_id: int,
        prescription: Union[PrescriptionDraft, dict],
    ) -> Optional[PrescriptionIssued]:
        """Complete a confirmed appointment by issuing its prescription."""
        draft = PrescriptionDraft.model_validate(prescription)
        request = PrescriptionCreate(
            appointment_id=appointment_id,
            medicines=draft.medicines,
            notes=draft.notes,
        )
        return self.add_prescription(actor, request)

    def reschedule_appointment(
        self,
        actor: Principal,
        appointment_id: int,
        changes: Union[AppointmentReschedule, dict],
    ) -> Optional[AppointmentResponse]:
        """Receptionist edit of patient, doctor, date, time or reason."""
        changes = AppointmentReschedule.model_validate(changes)
        updates = changes.model_dump(exclude_unset=True, exclude_none=True)

        with self._transaction() as session:
            appointment = session.get(Appointment, appointment_id)
            if appointment is None:
                logger.warning(f"reschedule on unknown appointment {appointment_id} ignored")
                return None

            authorize(
                actor,
                Action.RESCHEDULE_APPOINTMENT,
                patient_id=appointment.patient_id,
                doctor_id=appointment.doctor_id,
            )
            next_status(appointment.status, LifecycleAction.RESCHEDULE)

            if "patient_id" in updates:
                self._require(session, Patient, updates["patient_id"], "Patient")
            if "doctor_id" in updates:
                self._require(session, Doctor, updates["doctor_id"], "Doctor")

            for field_name, value in updates.items():
                setattr(appointment, field_name, value)
            session.flush()
            result = AppointmentResponse.model_validate(appointment)

        logger.info(f"Appointment {appointment_id} rescheduled: {sorted(updates)}")
        return result

    # ========================================================================
    # PRESCRIPTIONS
    # ========================================================================
    def add_prescription(
        self,
        actor: Principal,
        data: Union[PrescriptionCreate, dict],
    ) -> Optional[PrescriptionIssued]:
        """Issue a prescription; the linked appointment is completed atomically."""
        request = PrescriptionCreate.model_validate(data)
        with self._transaction() as session:
            return issue_prescription(session, actor, request)

    # ========================================================================
    # LOOKUPS
    # ========================================================================
    def _get(self, model, schema, record_id):
        with self._reading() as session:
            record = session.get(model, record_id)
            return schema.model_validate(record) if record is not None else None

    def get_doctor(self, doctor_id: int) -> Optional[DoctorResponse]:
        return self._get(Doctor, DoctorResponse, doctor_id)

    def get_patient(self, patient_id: int) -> Optional[PatientResponse]:
        return self._get(Patient, PatientResponse, patient_id)

    def get_appointment(self, appointment_id: int) -> Optional[AppointmentResponse]:
        return self._get(Appointment, AppointmentResponse, appointment_id)

    def get_medicine(self, medicine_id: int) -> Optional[MedicineResponse]:
        return self._get(Medicine, MedicineResponse, medicine_id)

    def get_prescription(self, prescription_id: int) -> Optional[PrescriptionResponse]:
        return self._get(Prescription, PrescriptionResponse, prescription_id)

    # ========================================================================
    # LISTS & FILTERS (insertion order)
    # ========================================================================
    def _list(self, schema, statement) -> list:
        with self._reading() as session:
            return [schema.model_validate(row) for row in session.scalars(statement).all()]

    def list_doctors(self) -> List[DoctorResponse]:
        return self._list(DoctorResponse, select(Doctor).order_by(Doctor.id))

    def list_patients(self) -> List[PatientResponse]:
        return self._list(PatientResponse, select(Patient).order_by(Patient.id))

    def list_medicines(self) -> List[MedicineResponse]:
        return self._list(MedicineResponse, select(Medicine).order_by(Medicine.id))

    def list_appointments(self) -> List[AppointmentResponse]:
        return self.find_appointments()

    def list_prescriptions(self) -> List[PrescriptionResponse]:
        return self._list(PrescriptionResponse, select(Prescription).order_by(Prescription.id))

    def find_appointments(
        self,
        *,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
        day: Optional[date] = None,
        statuses: Optional[Iterable[StatusFilter]] = None,
    ) -> List[AppointmentResponse]:
        statement = select(Appointment)
        if patient_id is not None:
            statement = statement.where(Appointment.patient_id == patient_id)
        if doctor_id is not None:
            statement = statement.where(Appointment.doctor_id == doctor_id)
        if day is not None:
            statement = statement.where(Appointment.date == day)
        if statuses is not None:
            values = [AppointmentStatus(s).value for s in statuses]
            statement = statement.where(Appointment.status.in_(values))
        return self._list(AppointmentResponse, statement.order_by(Appointment.id))

    def get_appointments_by_patient(self, patient_id: int) -> List[AppointmentResponse]:
        return self.find_appointments(patient_id=patient_id)

    def get_appointments_by_doctor(self, doctor_id: int) -> List[AppointmentResponse]:
        return self.find_appointments(doctor_id=doctor_id)

    def get_appointments_by_date(self, day: date, doctor_id: Optional[int] = None) -> List[AppointmentResponse]:
        return self.find_appointments(day=day, doctor_id=doctor_id)

    def get_appointments_by_status(self, *statuses: StatusFilter, doctor_id: Optional[int] = None) -> List[AppointmentResponse]:
        return self.find_appointments(statuses=statuses, doctor_id=doctor_id)

    def get_upcoming_appointments_for_patient(self, patient_id: int) -> List[AppointmentResponse]:
        return self.find_appointments(patient_id=patient_id, statuses=ACTIVE_STATUSES)

    def get_prescriptions_by_patient(self, patient_id: int) -> List[PrescriptionResponse]:
        statement = select(Prescription).where(Prescription.patient_id == patient_id).order_by(Prescription.id)
        return self._list(PrescriptionResponse, statement)

    def get_prescription_for_appointment(self, appointment_id: int) -> Optional[PrescriptionResponse]:
        with self._reading() as session:
            record = session.scalars(
                select(Prescription).where(Prescription.appointment_id == appointment_id)
            ).first()
            return PrescriptionResponse.model_validate(record) if record is not None else None

    # ========================================================================
    # COMPOSITE VIEWS
    # ========================================================================
    def get_patient_record(self, patient_id: int) -> Optional[PatientRecord]:
        with self._lock:
            patient = self.get_patient(patient_id)
            if patient is None:
                return None
            return PatientRecord(
                patient=patient,
                appointments=self.get_appointments_by_patient(patient_id),
                prescriptions=self.get_prescriptions_by_patient(patient_id),
            )

    def get_doctor_schedule(self, doctor_id: int) -> Optional[DoctorSchedule]:
        with self._lock:
            doctor = self.get_doctor(doctor_id)
            if doctor is None:
                return None
            buckets: Dict[str, List[AppointmentResponse]] = {s.value: [] for s in AppointmentStatus}
            for appointment in self.get_appointments_by_doctor(doctor_id):
                buckets[appointment.status.value].append(appointment)
            return DoctorSchedule(doctor=doctor, appointments=buckets)

    def get_open_slots(self, doctor_id: int, day: date) -> Optional[OpenSlots]:
        """
        The doctor's catalog slots not taken by a scheduled or confirmed
        appointment on `day`. Informational: booking does not consult it.
        """
        with self._lock:
            doctor = self.get_doctor(doctor_id)
            if doctor is None:
                return None
            booked = {
                a.time for a in self.find_appointments(doctor_id=doctor_id, day=day, statuses=ACTIVE_STATUSES)
            }
            return OpenSlots(
                doctor_id=doctor_id,
                date=day.isoformat(),
                available_slots=[slot for slot in doctor.available_slots if slot not in booked],
                booked_slots=[slot for slot in doctor.available_slots if slot in booked],
            )

    def counts(self) -> Dict[str, int]:
        models = {
            "doctors": Doctor,
            "patients": Patient,
            "appointments": Appointment,
            "medicines": Medicine,
            "prescriptions": Prescription,
        }
        with self._reading() as session:
            return {name: session.scalar(select(func.count()).select_from(model)) for name, model in models.items()}

    # ========================================================================
    # SNAPSHOTS
    # ========================================================================
    def export_snapshot(self) -> ClinicSnapshot:
        with self._reading() as session:
            return snapshot_io.export_collections(session)

    def load_snapshot(self, snapshot: Union[ClinicSnapshot, dict]) -> None:
        """Replace every collection with the snapshot's content, keeping ids."""
        snapshot = ClinicSnapshot.model_validate(snapshot)
        with self._transaction() as session:
            snapshot_io.replace_collections(session, snapshot)
        logger.info(f"Snapshot loaded: {self.counts()}")

    def save_snapshot(self, path: Union[str, Path]) -> Path:
        return snapshot_io.write_snapshot_file(self.export_snapshot(), path)

    def load_snapshot_file(self, path: Union[str, Path]) -> None:
        self.load_snapshot(snapshot_io.read_snapshot_file(path))
