"""Request records, row stores, LINE messages and the approval lifecycle."""

from .lifecycle import RequestLifecycle
from .messages import build_approval_card, build_outcome_message
from .models import OutingSubmission, RequestRecord, StoredRecord, WebhookEnvelope
from .state import APPROVED, PENDING, REJECTED
from .storage import DatabaseRowStore, RowStore, SheetsRowStore, build_row_store

__all__ = [
    "RequestLifecycle",
    "build_approval_card",
    "build_outcome_message",
    "OutingSubmission",
    "RequestRecord",
    "StoredRecord",
    "WebhookEnvelope",
    "APPROVED",
    "PENDING",
    "REJECTED",
    "DatabaseRowStore",
    "RowStore",
    "SheetsRowStore",
    "build_row_store",
]
