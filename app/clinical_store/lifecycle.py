# app/clinical_store/lifecycle.py
"""
Appointment Lifecycle Engine
State machine for appointment status transitions.

    scheduled ──confirm──▶ confirmed ──complete──▶ completed
        │                      │
        └───────cancel─────────┴──────────────────▶ cancelled

completed and cancelled are terminal. Repeating cancel on a cancelled
appointment (or confirm on a confirmed one) is a no-op rather than an error.
"""
import logging
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from app.clinical_store.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LifecycleAction(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    COMPLETE = "complete"
    RESCHEDULE = "reschedule"


STATUS_VALUES: Tuple[str, ...] = tuple(s.value for s in AppointmentStatus)
INITIAL_STATUS = AppointmentStatus.SCHEDULED
ACTIVE_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED}
)

# (from, action) -> to
TRANSITIONS: Dict[Tuple[AppointmentStatus, LifecycleAction], AppointmentStatus] = {
    (AppointmentStatus.SCHEDULED, LifecycleAction.CONFIRM): AppointmentStatus.CONFIRMED,
    (AppointmentStatus.SCHEDULED, LifecycleAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.CONFIRMED, LifecycleAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.CONFIRMED, LifecycleAction.COMPLETE): AppointmentStatus.COMPLETED,
    # Rescheduling edits fields but keeps the status
    (AppointmentStatus.SCHEDULED, LifecycleAction.RESCHEDULE): AppointmentStatus.SCHEDULED,
    (AppointmentStatus.CONFIRMED, LifecycleAction.RESCHEDULE): AppointmentStatus.CONFIRMED,
}

# Actions that may be repeated on their own target state without error
IDEMPOTENT: Dict[LifecycleAction, AppointmentStatus] = {
    LifecycleAction.CANCEL: AppointmentStatus.CANCELLED,
    LifecycleAction.CONFIRM: AppointmentStatus.CONFIRMED,
}


def next_status(current: str, action: LifecycleAction) -> AppointmentStatus:
    """
    Resolve the status an appointment moves to when `action` is applied.

    Raises:
        InvalidTransitionError: the action is not permitted from `current`.
    """
    current_status = AppointmentStatus(current)
    if IDEMPOTENT.get(action) == current_status:
        return current_status

    target = TRANSITIONS.get((current_status, action))
    if target is None:
        logger.warning(f"Rejected transition: {action.value} from {current_status.value}")
        raise InvalidTransitionError(
            f"Cannot {action.value} an appointment that is {current_status.value}"
        )
    return target
