"""Shared fakes for the row store and the LINE client."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:  # pragma: no cover - import-time guard
    sys.path.insert(0, str(ROOT))

from outing_approval import config  # noqa: E402
from outing_approval.line_client import LineApiError  # noqa: E402
from outing_approval.workflow.models import RequestRecord, StoredRecord  # noqa: E402


class InMemoryRowStore:
    """Ordered list of records; row 1 is the header like the real sheet."""

    def __init__(self) -> None:
        self.rows: list[RequestRecord] = []
        self.calls: list[tuple[str, str]] = []

    def append(self, record: RequestRecord) -> None:
        self.calls.append(("append", record.request_id))
        self.rows.append(record)

    def find_by_id(self, request_id: str) -> StoredRecord | None:
        for index, record in enumerate(self.rows):
            if record.request_id == request_id:
                return StoredRecord(row_number=index + 2, record=record)
        return None

    def update_status(self, request_id: str, status: str, comment: str) -> RequestRecord | None:
        self.calls.append(("update_status", request_id))
        for index, record in enumerate(self.rows):
            if record.request_id == request_id:
                self.rows[index] = record.with_decision(status, comment)
                return record
        return None


class RecordingLineClient:
    def __init__(self, *, fail: bool = False) -> None:
        self.pushes: list[dict] = []
        self.fail = fail

    def push_message(self, *, to, messages):
        self.pushes.append({"to": to, "messages": list(messages)})
        if self.fail:
            raise LineApiError("LINE push was rejected", status_code=400, body='{"message":"bad"}')
        return {}


def seed_env(monkeypatch, **overrides):
    values = {
        "LINE_TOKEN": "line-token",
        "LINE_ADMIN_USERID": "Uadmin",
        "SHEET_ID": "sheet-123",
        "GOOGLE_CLIENT_EMAIL": "bridge@example.iam.gserviceaccount.com",
    }
    values.update(overrides)
    for name in (
        "LINE_CHANNEL_SECRET",
        "STORE_BACKEND",
        "DATABASE_URL",
        "GOOGLE_PRIVATE_KEY",
        "GOOGLE_TOKEN_EXCHANGE",
        "CLIENT_IP_HEADER",
        "HTTP_TIMEOUT",
        "SHEET_NAME",
    ):
        if name not in values:
            monkeypatch.delenv(name, raising=False)
    for name, value in values.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)
    config.get_settings.cache_clear()


@pytest.fixture
def row_store():
    return InMemoryRowStore()


@pytest.fixture
def line_client():
    return RecordingLineClient()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
