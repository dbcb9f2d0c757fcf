# app/clinical_store/authorization.py
"""
Store-level authorization.

Every Clinical Store mutation is checked against the acting principal's role
and, for patients and doctors, against ownership of the records involved.
Read queries are not role-checked here; the HTTP layer scopes them.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from app.clinical_store.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"


class Action(str, Enum):
    BOOK_APPOINTMENT = "book_appointment"
    CONFIRM_APPOINTMENT = "confirm_appointment"
    CANCEL_APPOINTMENT = "cancel_appointment"
    RESCHEDULE_APPOINTMENT = "reschedule_appointment"
    REGISTER_PATIENT = "register_patient"
    ISSUE_PRESCRIPTION = "issue_prescription"


PERMISSIONS: Dict[Action, FrozenSet[Role]] = {
    Action.BOOK_APPOINTMENT: frozenset({Role.PATIENT, Role.RECEPTIONIST}),
    Action.CONFIRM_APPOINTMENT: frozenset({Role.DOCTOR, Role.RECEPTIONIST}),
    Action.CANCEL_APPOINTMENT: frozenset({Role.PATIENT, Role.DOCTOR, Role.RECEPTIONIST}),
    Action.RESCHEDULE_APPOINTMENT: frozenset({Role.RECEPTIONIST}),
    Action.REGISTER_PATIENT: frozenset({Role.PATIENT, Role.RECEPTIONIST}),
    Action.ISSUE_PRESCRIPTION: frozenset({Role.DOCTOR}),
}


@dataclass(frozen=True)
class Principal:
    """
    The authenticated actor.

    subject_id is the patient or doctor record the principal acts as
    (None for receptionists, and for a patient who has not registered yet).
    """
    role: Role
    subject_id: Optional[int] = None
    account_id: Optional[int] = None
    name: str = ""
    profile: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def patient(cls, patient_id: Optional[int], **kwargs) -> "Principal":
        return cls(role=Role.PATIENT, subject_id=patient_id, **kwargs)

    @classmethod
    def doctor(cls, doctor_id: int, **kwargs) -> "Principal":
        return cls(role=Role.DOCTOR, subject_id=doctor_id, **kwargs)

    @classmethod
    def receptionist(cls, **kwargs) -> "Principal":
        return cls(role=Role.RECEPTIONIST, **kwargs)

    @classmethod
    def self_registration(cls) -> "Principal":
        """A prospective patient creating their own record."""
        return cls(role=Role.PATIENT, subject_id=None, name="self-registration")


def _deny(principal: Principal, action: Action, reason: str):
    logger.warning(f"Denied {action.value} for {principal.role.value} #{principal.subject_id}: {reason}")
    raise PermissionDeniedError(reason)


def authorize(
    principal: Principal,
    action: Action,
    *,
    patient_id: Optional[int] = None,
    doctor_id: Optional[int] = None,
) -> None:
    """
    Check that `principal` may perform `action` on a record owned by
    `patient_id` / `doctor_id`.

    Raises:
        PermissionDeniedError
    """
    allowed = PERMISSIONS.get(action, frozenset())
    if principal.role not in allowed:
        _deny(principal, action, f"Role '{principal.role.value}' may not {action.value.replace('_', ' ')}")

    if principal.role == Role.RECEPTIONIST:
        return

    if principal.role == Role.PATIENT:
        if action == Action.REGISTER_PATIENT:
            if principal.subject_id is not None:
                _deny(principal, action, "Patient is already registered")
            return
        if principal.subject_id is None or patient_id != principal.subject_id:
            _deny(principal, action, "Patients may only act on their own appointments")
        return

    if principal.role == Role.DOCTOR:
        if principal.subject_id is None or doctor_id != principal.subject_id:
            _deny(principal, action, "Doctors may only act on their own appointments")
