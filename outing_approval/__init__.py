"""Outing approval bridge package initialisation."""

from .config import AppSettings, get_settings  # noqa: F401
from .credentials import CredentialError, ServiceAccountCredentials, sign_assertion  # noqa: F401
from .db import Base, get_engine, session_scope  # noqa: F401
from .line_client import LineApiError, LineClient  # noqa: F401
from .logging_config import configure_logging  # noqa: F401
from .models import OutingRequestRow  # noqa: F401

__all__ = [
    "AppSettings",
    "get_settings",
    "CredentialError",
    "ServiceAccountCredentials",
    "sign_assertion",
    "Base",
    "get_engine",
    "session_scope",
    "LineApiError",
    "LineClient",
    "configure_logging",
    "OutingRequestRow",
]
