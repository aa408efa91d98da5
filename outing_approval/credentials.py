"""Service-account credentials for the Google Sheets API.

A JWT assertion is signed with the service account's RSA key (RS256) and is
valid for one hour. Depending on configuration the assertion is either
exchanged at the OAuth2 token endpoint for an access token or used directly
as the bearer credential.
"""

from __future__ import annotations

import base64
import binascii
import re
import time

import jwt
import requests
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
TOKEN_URI = "https://oauth2.googleapis.com/token"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME = 3600  # seconds

_PEM_BOUNDARY = re.compile(r"-----[^-]*-----")
_WHITESPACE = re.compile(r"\s+")


class CredentialError(Exception):
    """Raised when a store credential cannot be produced."""


def load_private_key(pem: str) -> RSAPrivateKey:
    """Decode a PKCS8 PEM (header, footer and whitespace tolerated) into an RSA key."""

    if not pem or not pem.strip():
        raise CredentialError("Service account private key is not configured.")

    body = _PEM_BOUNDARY.sub("", pem.replace("\\n", "\n"))
    body = _WHITESPACE.sub("", body)
    try:
        der = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CredentialError("Service account private key is not valid base64.") from exc

    try:
        key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise CredentialError("Service account private key could not be loaded.") from exc

    if not isinstance(key, RSAPrivateKey):
        raise CredentialError("Service account private key must be an RSA key.")
    return key


def build_claims(client_email: str, issued_at: int) -> dict[str, object]:
    return {
        "iss": client_email,
        "scope": SHEETS_SCOPE,
        "aud": TOKEN_URI,
        "exp": issued_at + ASSERTION_LIFETIME,
        "iat": issued_at,
    }


def sign_assertion(client_email: str, private_key_pem: str, *, issued_at: int | None = None) -> str:
    """Return a compact RS256 JWT assertion for *client_email*."""

    key = load_private_key(private_key_pem)
    now = int(time.time()) if issued_at is None else int(issued_at)
    return jwt.encode(
        build_claims(client_email, now),
        key,
        algorithm="RS256",
        headers={"typ": "JWT"},
    )


def exchange_assertion(
    assertion: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 10.0,
) -> str:
    """Trade a signed assertion for an OAuth2 access token."""

    post = session.post if session is not None else requests.post
    try:
        response = post(
            TOKEN_URI,
            data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise CredentialError(f"Token exchange request failed: {exc}") from exc

    if not response.ok:
        raise CredentialError(f"Token exchange rejected with status {response.status_code}.")

    try:
        access_token = response.json().get("access_token")
    except ValueError as exc:
        raise CredentialError("Token exchange returned a non-JSON body.") from exc

    if not access_token:
        raise CredentialError("Token exchange response did not include an access token.")
    return access_token


class ServiceAccountCredentials:
    """Mint a fresh bearer credential for every store call."""

    def __init__(
        self,
        *,
        client_email: str,
        private_key: str,
        exchange: bool = True,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.client_email = client_email
        self._private_key = private_key
        self.exchange = exchange
        self._session = session
        self._timeout = timeout

    def bearer_token(self) -> str:
        assertion = sign_assertion(self.client_email, self._private_key)
        if not self.exchange:
            return assertion
        return exchange_assertion(assertion, session=self._session, timeout=self._timeout)
