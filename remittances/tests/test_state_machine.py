import pytest

from core.exceptions import InvalidStateTransition
from remittances.state_machine import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    RemittanceState,
    can_transition,
    check_transition,
)

LEGAL = {
    ("REQUEST", "PENDING"),
    ("REQUEST", "CANCELLED"),
    ("PENDING", "IN_PROGRESS"),
    ("PENDING", "CANCELLED"),
    ("IN_PROGRESS", "DELIVERED"),
    ("IN_PROGRESS", "PENDING"),
    ("IN_PROGRESS", "CANCELLED"),
    ("DELIVERED", "INVOICED"),
}


def test_every_state_has_an_entry():
    assert set(ALLOWED_TRANSITIONS) == set(RemittanceState)


@pytest.mark.parametrize("current", list(RemittanceState))
@pytest.mark.parametrize("target", list(RemittanceState))
def test_transition_table(current, target):
    assert can_transition(current, target) == ((current.value, target.value) in LEGAL)


@pytest.mark.parametrize("state", TERMINAL_STATES)
def test_terminal_states_have_no_exit(state):
    assert ALLOWED_TRANSITIONS[state] == []


def test_illegal_transition_payload():
    with pytest.raises(InvalidStateTransition) as exc:
        check_transition(RemittanceState.DELIVERED, RemittanceState.DELIVERED, tracking_code="REM-ABC123")

    assert exc.value.status_code == 409
    assert exc.value.detail["current_state"] == "DELIVERED"
    assert exc.value.detail["target_state"] == "DELIVERED"
    assert exc.value.detail["tracking_code"] == "REM-ABC123"
