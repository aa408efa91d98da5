"""Row store backends holding one record per outing request.

The store is the only source of truth. Records are located by scanning for
their id on every update; row positions are never cached.
"""

from __future__ import annotations

from typing import Protocol

import structlog
from sqlalchemy import select, update

from outing_approval.config import AppSettings
from outing_approval.credentials import ServiceAccountCredentials
from outing_approval.db import session_scope
from outing_approval.models import OutingRequestRow
from outing_approval.sheets_client import SheetsClient

from .models import (
    COMMENT_COLUMN,
    LAST_COLUMN,
    RECORD_COLUMNS,
    STATUS_COLUMN,
    RequestRecord,
    StoredRecord,
)


class RowStore(Protocol):
    def append(self, record: RequestRecord) -> None: ...

    def find_by_id(self, request_id: str) -> StoredRecord | None: ...

    def update_status(self, request_id: str, status: str, comment: str) -> RequestRecord | None: ...


class SheetsRowStore:
    """Google Sheets backend: one row per request in columns A..O of *sheet_name*."""

    def __init__(self, client: SheetsClient, sheet_name: str) -> None:
        self._client = client
        self.sheet_name = sheet_name

    @property
    def full_range(self) -> str:
        return f"{self.sheet_name}!A:{LAST_COLUMN}"

    def append(self, record: RequestRecord) -> None:
        self._client.append_row(self.full_range, record.to_row())

    def find_by_id(self, request_id: str) -> StoredRecord | None:
        rows = self._client.get_values(self.full_range)
        for index, row in enumerate(rows):
            if row and row[0] == request_id:
                # Values start at A1, so the list offset is the row number minus one.
                return StoredRecord(row_number=index + 1, record=RequestRecord.from_row(row))
        return None

    def update_status(self, request_id: str, status: str, comment: str) -> RequestRecord | None:
        """Write *status* and *comment* into the first row whose id matches.

        Returns the record as it was before the write, or None when the id is
        not present (nothing is written in that case).
        """

        stored = self.find_by_id(request_id)
        if stored is None:
            return None

        row = stored.row_number
        target = f"{self.sheet_name}!{STATUS_COLUMN}{row}:{COMMENT_COLUMN}{row}"
        self._client.update_values(target, [[status, comment]])
        return stored.record


def _row_to_record(row: OutingRequestRow) -> RequestRecord:
    return RequestRecord(**{column: getattr(row, column) for column in RECORD_COLUMNS})


class DatabaseRowStore:
    """SQLAlchemy backend with the same column layout as the sheet."""

    def append(self, record: RequestRecord) -> None:
        with session_scope() as session:
            session.add(OutingRequestRow(**{column: getattr(record, column) for column in RECORD_COLUMNS}))

    def find_by_id(self, request_id: str) -> StoredRecord | None:
        with session_scope() as session:
            row = session.execute(
                select(OutingRequestRow).where(OutingRequestRow.request_id == request_id)
            ).scalar_one_or_none()
            if row is None:
                return None
            return StoredRecord(row_number=row.position, record=_row_to_record(row))

    def update_status(self, request_id: str, status: str, comment: str) -> RequestRecord | None:
        with session_scope() as session:
            row = session.execute(
                select(OutingRequestRow).where(OutingRequestRow.request_id == request_id)
            ).scalar_one_or_none()
            if row is None:
                return None
            previous = _row_to_record(row)
            session.execute(
                update(OutingRequestRow)
                .where(OutingRequestRow.position == row.position)
                .values(status=status, comment=comment)
            )
            return previous


def build_row_store(settings: AppSettings) -> RowStore:
    """Instantiate the configured backend."""

    log = structlog.get_logger().bind(store_backend=settings.store_backend)
    if settings.store_backend == "database":
        log.info("row_store_selected")
        return DatabaseRowStore()

    credentials = ServiceAccountCredentials(
        client_email=settings.google_client_email,
        private_key=settings.google_private_key,
        exchange=settings.google_token_exchange,
        timeout=settings.http_timeout,
    )
    client = SheetsClient(
        spreadsheet_id=settings.sheet_id,
        credentials=credentials,
        timeout=settings.http_timeout,
    )
    log.info("row_store_selected", sheet_name=settings.sheet_name)
    return SheetsRowStore(client, settings.sheet_name)
