"""Request status values and the approve/reject transition table."""

from __future__ import annotations

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

_DECISION_STATUS = {
    "approve": APPROVED,
    "reject": REJECTED,
}

_ALLOWED_TRANSITIONS = {
    PENDING: {APPROVED, REJECTED},
    APPROVED: set(),
    REJECTED: set(),
}


def status_for_action(action: str) -> str:
    try:
        return _DECISION_STATUS[action]
    except KeyError:
        raise ValueError(f"Unknown decision action '{action}'") from None


def is_allowed_transition(current: str, new_status: str) -> bool:
    """Return True when *current* may move to *new_status*.

    Decisions are still applied when this is False; callers only log it.
    """

    return new_status in _ALLOWED_TRANSITIONS.get(current, set())
