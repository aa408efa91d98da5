"""Tests for LINE webhook signature validation."""

import base64
import hashlib
import hmac

from outing_approval import security


def test_compute_signature_matches_line_scheme():
    body = '{"events":[]}'
    expected = base64.b64encode(hmac.new(b"channel-secret", body.encode(), hashlib.sha256).digest()).decode()

    assert security.compute_signature("channel-secret", body) == expected


def test_valid_signature_accepted():
    body = '{"events":[]}'
    signature = security.compute_signature("channel-secret", body)

    assert security.is_valid_line_request(channel_secret="channel-secret", body=body, signature=signature)


def test_tampered_body_rejected():
    signature = security.compute_signature("channel-secret", '{"events":[]}')

    assert not security.is_valid_line_request(
        channel_secret="channel-secret", body='{"events":[{}]}', signature=signature
    )


def test_missing_signature_rejected():
    assert not security.is_valid_line_request(channel_secret="channel-secret", body="{}", signature="")
