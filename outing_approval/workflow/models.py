"""Models for outing submissions, stored records and LINE webhook envelopes."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, List, Sequence

from pydantic import BaseModel, ConfigDict, field_validator

from .state import PENDING

UNKNOWN = "unknown"

# Column order of the request sheet (A..O).
RECORD_COLUMNS = (
    "request_id",
    "name",
    "title",
    "reason",
    "place",
    "date",
    "activity",
    "detail",
    "time",
    "line_id",
    "status",
    "comment",
    "client_ip",
    "user_agent",
    "submitted_at",
)
STATUS_COLUMN = "K"
COMMENT_COLUMN = "L"
LAST_COLUMN = "O"


class OutingSubmission(BaseModel):
    """Body of ``POST /apply``. Contents are not validated, only coerced to text."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    title: str | None = None
    reason: str | None = None
    place: str | None = None
    date: str | None = None
    activity: str | None = None
    detail: str | None = None
    time: str | None = None
    lineid: str | None = None
    ua: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return json.dumps(value, ensure_ascii=False, default=str)


@dataclass(frozen=True)
class RequestRecord:
    request_id: str
    name: str
    title: str
    reason: str
    place: str
    date: str
    activity: str
    detail: str
    time: str
    line_id: str
    status: str
    comment: str
    client_ip: str
    user_agent: str
    submitted_at: str

    @classmethod
    def from_submission(
        cls,
        request_id: str,
        submission: OutingSubmission,
        *,
        client_ip: str | None,
        user_agent: str | None,
        submitted_at: str,
    ) -> "RequestRecord":
        return cls(
            request_id=request_id,
            name=submission.name or "",
            title=submission.title or "",
            reason=submission.reason or "",
            place=submission.place or "",
            date=submission.date or "",
            activity=submission.activity or "",
            detail=submission.detail or "",
            time=submission.time or "",
            line_id=submission.lineid or "",
            status=PENDING,
            comment="",
            client_ip=client_ip or UNKNOWN,
            user_agent=user_agent or UNKNOWN,
            submitted_at=submitted_at,
        )

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "RequestRecord":
        """Build a record from a sheet row; the API trims trailing empty cells."""

        cells = [("" if cell is None else str(cell)) for cell in row]
        cells.extend([""] * (len(RECORD_COLUMNS) - len(cells)))
        return cls(**dict(zip(RECORD_COLUMNS, cells[: len(RECORD_COLUMNS)])))

    def to_row(self) -> List[str]:
        return [getattr(self, column) for column in RECORD_COLUMNS]

    def with_decision(self, status: str, comment: str) -> "RequestRecord":
        return replace(self, status=status, comment=comment)


@dataclass(frozen=True)
class StoredRecord:
    """A record together with its 1-based position in the store."""

    row_number: int
    record: RequestRecord


class PostbackParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    comment: str | None = None


class Postback(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: str
    params: PostbackParams | None = None


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    postback: Postback | None = None


class WebhookEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    destination: str | None = None
    events: List[WebhookEvent] = []
