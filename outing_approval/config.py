"""Pydantic-based configuration for the outing approval bridge."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Iterable, List, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

DEFAULT_SHEET_NAME = "申請"


class MissingSettingError(ValueError):
    """Raised from validators when a backend-specific variable is absent."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = list(names)
        super().__init__(", ".join(self.names))


class AppSettings(BaseModel):
    """Settings required by the row store, the LINE client and the web layer."""

    line_token: str = Field(..., alias="LINE_TOKEN")
    line_admin_user_id: str = Field("", alias="LINE_ADMIN_USERID")
    line_channel_secret: str = Field("", alias="LINE_CHANNEL_SECRET")

    store_backend: Literal["sheets", "database"] = Field("sheets", alias="STORE_BACKEND")
    sheet_id: str = Field("", alias="SHEET_ID")
    sheet_name: str = Field(DEFAULT_SHEET_NAME, alias="SHEET_NAME")
    google_client_email: str = Field("", alias="GOOGLE_CLIENT_EMAIL")
    google_private_key: str = Field("", alias="GOOGLE_PRIVATE_KEY")
    google_token_exchange: bool = Field(True, alias="GOOGLE_TOKEN_EXCHANGE")
    database_url: str = Field("", alias="DATABASE_URL")

    client_ip_header: str = Field("CF-Connecting-IP", alias="CLIENT_IP_HEADER")
    http_timeout: float = Field(10.0, alias="HTTP_TIMEOUT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("store_backend", mode="before")
    @classmethod
    def _normalise_backend(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("line_admin_user_id", "sheet_id", "sheet_name", "google_client_email")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("http_timeout")
    @classmethod
    def _ensure_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HTTP timeout must be greater than zero")
        return value

    @model_validator(mode="after")
    def _require_backend_settings(self):
        missing: List[str] = []
        if self.store_backend == "sheets" and not self.sheet_id:
            missing.append("SHEET_ID")
        if self.store_backend == "database" and not self.database_url:
            missing.append("DATABASE_URL")
        if missing:
            raise MissingSettingError(missing)
        return self


def _format_missing(fields: Iterable[str]) -> str:
    """Return a human-friendly comma-separated list of missing env vars."""

    unique: List[str] = []
    for field in fields:
        if field not in unique:
            unique.append(field)
    return ", ".join(unique)


def _missing_names(exc: ValidationError) -> List[str]:
    names: List[str] = []
    for error in exc.errors():
        if error["type"] == "missing":
            names.append(str(error["loc"][0]))
            continue
        cause = (error.get("ctx") or {}).get("error")
        if isinstance(cause, MissingSettingError):
            names.extend(cause.names)
    return names


@lru_cache()
def get_settings() -> AppSettings:
    """Fetch and cache settings from environment variables."""

    try:
        return AppSettings.model_validate(os.environ)
    except ValidationError as exc:
        missing = _missing_names(exc)
        if not missing:
            raise RuntimeError(f"Invalid configuration: {exc}") from exc
        message = (
            "Missing required environment variables: "
            f"{_format_missing(missing)}"
        )
        raise RuntimeError(message) from exc
