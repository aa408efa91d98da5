"""Utilities for validating LINE webhook signatures."""

from __future__ import annotations

import base64
import hmac
from hashlib import sha256


LINE_SIGNATURE_HEADER = "X-Line-Signature"


def compute_signature(channel_secret: str, body: str) -> str:
    """Return the LINE-compatible signature for the raw request body."""

    digest = hmac.new(channel_secret.encode("utf-8"), body.encode("utf-8"), sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def is_valid_line_request(*, channel_secret: str, body: str, signature: str) -> bool:
    """Validate the webhook signature against the channel secret."""

    if not signature:
        return False

    expected = compute_signature(channel_secret, body)
    return hmac.compare_digest(expected, signature)
