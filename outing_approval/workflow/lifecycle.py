"""Submission and decision handling for outing requests.

A request is appended to the store as ``pending`` and announced to the
approver. A later postback moves it to ``approved`` or ``rejected`` and the
outcome is relayed. Every step is awaited in order; nothing is kept in
memory between invocations.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Callable, Mapping
from uuid import uuid4

import structlog
from pydantic import ValidationError

from outing_approval.actions import parse_postback_data
from outing_approval.line_client import LineClient

from .models import OutingSubmission, RequestRecord, WebhookEnvelope
from .notifications import send_approval_request, send_outcome
from .state import PENDING, is_allowed_transition, status_for_action
from .storage import RowStore


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_request_id() -> str:
    return str(uuid4())


class RequestLifecycle:
    def __init__(
        self,
        *,
        store: RowStore,
        line_client: LineClient,
        recipient_id: str,
        id_factory: Callable[[], str] = new_request_id,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.store = store
        self.line_client = line_client
        self.recipient_id = recipient_id
        self._id_factory = id_factory
        self._clock = clock

    def submit(
        self,
        submission: OutingSubmission,
        *,
        client_ip: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        """Persist a new pending request, notify the approver and return its id."""

        request_id = self._id_factory()
        record = RequestRecord.from_submission(
            request_id,
            submission,
            client_ip=client_ip,
            user_agent=submission.ua or user_agent,
            submitted_at=self._clock(),
        )
        log = structlog.get_logger().bind(request_id=request_id)

        self.store.append(record)
        log.info("request_submitted", status=PENDING, client_ip=record.client_ip)

        send_approval_request(
            client=self.line_client,
            recipient_id=self.recipient_id,
            request_id=request_id,
            submission=submission,
        )
        return request_id

    def decide(self, payload: Mapping[str, Any] | None) -> bool:
        """Apply an approver's decision carried by a LINE webhook payload.

        Returns False when the payload holds nothing actionable; no store or
        messaging call is made in that case.
        """

        log = structlog.get_logger()
        try:
            envelope = WebhookEnvelope.model_validate(payload or {})
        except ValidationError:
            log.info("decision_ignored", reason="unrecognised_envelope")
            return False

        event = envelope.events[0] if envelope.events else None
        if event is None or event.postback is None:
            log.info("decision_ignored", reason="no_postback")
            return False

        try:
            context = parse_postback_data(event.postback.data)
        except ValueError:
            log.warning("decision_ignored", reason="invalid_postback_data")
            return False

        status = status_for_action(context.action)
        comment = ""
        if event.postback.params is not None and event.postback.params.comment is not None:
            comment = event.postback.params.comment

        log = log.bind(request_id=context.request_id, status=status)
        previous = self.store.update_status(context.request_id, status, comment)
        if previous is None:
            log.warning("store_lookup_miss")
        elif not is_allowed_transition(previous.status, status):
            log.warning("decision_overrides_status", previous_status=previous.status)
        log.info("decision_recorded", found=previous is not None)

        send_outcome(
            client=self.line_client,
            recipient_id=self.recipient_id,
            request_id=context.request_id,
            status=status,
            comment=comment,
        )
        return True
