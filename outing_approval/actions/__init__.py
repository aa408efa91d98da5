"""Utilities for handling LINE postback payloads."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode

APPROVE_ACTION = "approve"
REJECT_ACTION = "reject"
DECISION_ACTIONS = (APPROVE_ACTION, REJECT_ACTION)


@dataclass(frozen=True)
class DecisionContext:
    """Parsed context describing an approver's button press."""

    action: str
    request_id: str


def encode_postback_data(action: str, request_id: str) -> str:
    """Return the opaque query string the approval buttons carry."""

    return urlencode({"action": action, "id": request_id})


def parse_postback_data(raw_value: str) -> DecisionContext:
    """Parse ``action=<approve|reject>&id=<id>`` into a structured context."""

    if not isinstance(raw_value, str) or not raw_value.strip():
        raise ValueError("Invalid postback payload.")

    params = parse_qs(raw_value, keep_blank_values=True)
    action = (params.get("action") or [""])[0].strip()
    request_id = (params.get("id") or [""])[0].strip()

    if action not in DECISION_ACTIONS:
        raise ValueError("Invalid postback payload.")
    if not request_id:
        raise ValueError("Invalid postback payload.")

    return DecisionContext(action=action, request_id=request_id)
