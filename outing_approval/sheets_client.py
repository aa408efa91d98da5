"""Thin wrapper around the Google Sheets values API."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, List, Protocol, Sequence

import httplib2
import structlog
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError


class TokenSource(Protocol):
    def bearer_token(self) -> str: ...


def build_sheets_service(bearer: str, *, timeout: float = 10.0, http: Any = None):
    """Build a Sheets v4 service that authenticates with a ready-made *bearer* token."""

    # The bearer is minted per call, so a 401 is reported rather than refreshed.
    authorized = AuthorizedHttp(
        Credentials(token=bearer),
        http=http if http is not None else httplib2.Http(timeout=timeout),
        refresh_status_codes=(),
    )
    return build("sheets", "v4", http=authorized, cache_discovery=False)


class SheetsClient:
    """Issue append/read/write calls against one spreadsheet.

    API error responses are logged and otherwise ignored; transport errors
    propagate to the caller.
    """

    def __init__(
        self,
        *,
        spreadsheet_id: str,
        credentials: TokenSource,
        timeout: float = 10.0,
        service_factory: Callable[[str], Any] | None = None,
    ) -> None:
        if not spreadsheet_id:
            raise ValueError("A spreadsheet id is required.")

        self.spreadsheet_id = spreadsheet_id
        self._credentials = credentials
        self._service_factory = service_factory or partial(build_sheets_service, timeout=timeout)

    def _values(self):
        # A new credential per call; nothing is cached between store operations.
        service = self._service_factory(self._credentials.bearer_token())
        return service.spreadsheets().values()

    def _execute(self, request, operation: str, a1_range: str) -> dict | None:
        try:
            return request.execute()
        except HttpError as exc:
            content = exc.content or b""
            if isinstance(content, bytes):
                content = content.decode("utf-8", errors="replace")
            structlog.get_logger().bind(operation=operation, range=a1_range).warning(
                "store_call_failed",
                status_code=exc.resp.status,
                body=content[:500],
            )
            return None

    def append_row(self, a1_range: str, row: Sequence[Any]) -> bool:
        """Append *row* after the last populated row of *a1_range*."""

        request = self._values().append(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range,
            valueInputOption="RAW",
            body={"values": [list(row)]},
        )
        return self._execute(request, "append_row", a1_range) is not None

    def get_values(self, a1_range: str) -> List[List[str]]:
        """Return every row of *a1_range*; an unreadable range yields no rows."""

        request = self._values().get(spreadsheetId=self.spreadsheet_id, range=a1_range)
        result = self._execute(request, "get_values", a1_range)
        if result is None:
            return []
        return result.get("values", []) or []

    def update_values(self, a1_range: str, rows: Sequence[Sequence[Any]]) -> bool:
        """Overwrite the cells of *a1_range* with *rows*."""

        request = self._values().update(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range,
            valueInputOption="RAW",
            body={"values": [list(row) for row in rows]},
        )
        return self._execute(request, "update_values", a1_range) is not None
