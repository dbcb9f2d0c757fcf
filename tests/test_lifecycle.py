"""
test_lifecycle.py
-----------------
Appointment status transitions, independent of storage.
"""
import pytest

from app.clinical_store.exceptions import InvalidTransitionError
from app.clinical_store.lifecycle import (
    AppointmentStatus,
    LifecycleAction,
    next_status,
)


# ── Permitted transitions ─────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "current, action, expected",
    [
        ("scheduled", LifecycleAction.CONFIRM, AppointmentStatus.CONFIRMED),
        ("scheduled", LifecycleAction.CANCEL, AppointmentStatus.CANCELLED),
        ("confirmed", LifecycleAction.CANCEL, AppointmentStatus.CANCELLED),
        ("confirmed", LifecycleAction.COMPLETE, AppointmentStatus.COMPLETED),
    ],
)
def test_transition_table(current, action, expected):
    assert next_status(current, action) == expected


def test_reschedule_keeps_status():
    assert next_status("scheduled", LifecycleAction.RESCHEDULE) == AppointmentStatus.SCHEDULED
    assert next_status("confirmed", LifecycleAction.RESCHEDULE) == AppointmentStatus.CONFIRMED


def test_repeated_cancel_and_confirm_are_no_ops():
    assert next_status("cancelled", LifecycleAction.CANCEL) == AppointmentStatus.CANCELLED
    assert next_status("confirmed", LifecycleAction.CONFIRM) == AppointmentStatus.CONFIRMED


# ── Rejected transitions ──────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "current, action",
    [
        ("scheduled", LifecycleAction.COMPLETE),
        ("cancelled", LifecycleAction.CONFIRM),
        ("cancelled", LifecycleAction.COMPLETE),
        ("cancelled", LifecycleAction.RESCHEDULE),
        ("completed", LifecycleAction.CONFIRM),
        ("completed", LifecycleAction.CANCEL),
        ("completed", LifecycleAction.COMPLETE),
        ("completed", LifecycleAction.RESCHEDULE),
    ],
)
def test_invalid_transitions_raise(current, action):
    with pytest.raises(InvalidTransitionError):
        next_status(current, action)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        next_status("checked_in", LifecycleAction.CONFIRM)


def test_terminal_states_only_repeat_cancel():
    assert next_status("cancelled", LifecycleAction.CANCEL) == AppointmentStatus.CANCELLED
    for action in (LifecycleAction.CONFIRM, LifecycleAction.COMPLETE, LifecycleAction.RESCHEDULE):
        with pytest.raises(InvalidTransitionError):
            next_status("cancelled", action)
    for action in LifecycleAction:
        with pytest.raises(InvalidTransitionError):
            next_status("completed", action)
