"""Thin wrapper around the LINE Messaging API push endpoint."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import requests

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"


class LineApiError(Exception):
    """Raised when a push request fails in transport or is rejected by LINE."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LineClient:
    """Encapsulate LINE push calls for easier testing."""

    def __init__(
        self,
        *,
        token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not token:
            raise ValueError("A LINE channel access token must be provided.")

        self._token = token
        self._session = session or requests.Session()
        self._timeout = timeout

    def push_message(self, *, to: str, messages: Sequence[Mapping[str, Any]]) -> Mapping[str, Any]:
        """Push *messages* to the user, group or room identified by *to*."""

        try:
            response = self._session.post(
                LINE_PUSH_URL,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self._token}",
                },
                json={"to": to, "messages": list(messages)},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise LineApiError(f"LINE push request failed: {exc}") from exc

        if not response.ok:
            raise LineApiError(
                "LINE push was rejected",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError:
            return {}
