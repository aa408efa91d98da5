"""LINE message builders for outing requests."""

from __future__ import annotations

from typing import Any, Dict, List

from outing_approval.actions import APPROVE_ACTION, REJECT_ACTION, encode_postback_data

from .models import OutingSubmission

ALT_TEXT = "A new outing request is waiting for approval"
CARD_TITLE = "Outing request"
REJECT_BUTTON_COLOR = "#FF5555"

_MISSING_VALUE = "-"


def _format_field(label: str, value: Any) -> str:
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return f"{label}: {_MISSING_VALUE}"
    return f"{label}: {value}"


def _text(text: str, **extra: Any) -> Dict[str, Any]:
    return {"type": "text", "text": text, "wrap": True, **extra}


def _decision_button(*, action: str, label: str, prompt: str, request_id: str) -> Dict[str, Any]:
    return {
        "type": "button",
        "action": {
            "type": "postback",
            "label": label,
            "data": encode_postback_data(action, request_id),
            "displayText": prompt,
        },
    }


def build_approval_card(request_id: str, submission: OutingSubmission) -> Dict[str, Any]:
    """Build the flex bubble the approver acts on."""

    body: List[Dict[str, Any]] = [
        _text(CARD_TITLE, weight="bold", size="xl"),
        _text(_format_field("Requester", submission.name)),
        _text(_format_field("Title", submission.title)),
        _text(_format_field("Date", submission.date)),
        _text(_format_field("Time", submission.time)),
        _text(_format_field("Place", submission.place)),
        _decision_button(
            action=APPROVE_ACTION,
            label="Approve",
            prompt="Please enter an approval comment",
            request_id=request_id,
        ),
    ]
    reject = _decision_button(
        action=REJECT_ACTION,
        label="Send back",
        prompt="Please enter the reason for sending this back",
        request_id=request_id,
    )
    reject["color"] = REJECT_BUTTON_COLOR
    body.append(reject)

    return {
        "type": "flex",
        "altText": ALT_TEXT,
        "contents": {
            "type": "bubble",
            "body": {"type": "box", "layout": "vertical", "contents": body},
        },
    }


def build_outcome_message(request_id: str, status: str, comment: str) -> Dict[str, Any]:
    """Plain text summary of a decision."""

    text = f"Request ID: {request_id}\nResult: {status}\nComment: {comment}"
    return {"type": "text", "text": text}
