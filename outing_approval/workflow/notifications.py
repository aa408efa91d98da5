"""Push approval cards and decision outcomes to the configured approver."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import structlog

from outing_approval.line_client import LineApiError, LineClient

from .messages import build_approval_card, build_outcome_message
from .models import OutingSubmission


def _push(
    *,
    client: LineClient,
    recipient_id: str,
    messages: Sequence[Mapping[str, Any]],
    operation: str,
    request_id: str,
) -> bool:
    log = structlog.get_logger().bind(request_id=request_id, operation=operation)
    try:
        client.push_message(to=recipient_id, messages=messages)
    except LineApiError as exc:
        log.error(
            "push_failed",
            error=str(exc),
            status_code=exc.status_code,
            response=exc.body[:500],
        )
        return False

    log.info("push_sent")
    return True


def send_approval_request(
    *,
    client: LineClient,
    recipient_id: str,
    request_id: str,
    submission: OutingSubmission,
) -> bool:
    """Send the interactive approval card. Failures are logged, never raised."""

    if not recipient_id:
        structlog.get_logger().warning(
            "approval_request_skipped",
            request_id=request_id,
            reason="recipient_not_configured",
        )
        return False

    return _push(
        client=client,
        recipient_id=recipient_id,
        messages=[build_approval_card(request_id, submission)],
        operation="send_approval_request",
        request_id=request_id,
    )


def send_outcome(
    *,
    client: LineClient,
    recipient_id: str,
    request_id: str,
    status: str,
    comment: str,
) -> bool:
    """Relay the decision as plain text; a missing recipient is a silent no-op."""

    if not recipient_id:
        return False

    return _push(
        client=client,
        recipient_id=recipient_id,
        messages=[build_outcome_message(request_id, status, comment)],
        operation="send_outcome",
        request_id=request_id,
    )
