from __future__ import annotations

import base64
import hashlib
import hmac

from lockerlink.core.entities.credentials import IntegrationCredentials

SIGNATURE_HEADER = "X-LockerLink-Signature"


class MissingSignatureError(Exception):
    """Raise to map to HTTP 401."""
    code = "missing_signature"


class NotConfiguredError(Exception):
    """Raise to map to HTTP 500 (server misconfiguration, not a client error)."""
    code = "not_configured"


class InvalidSignatureError(Exception):
    """Raise to map to HTTP 401."""
    code = "invalid_signature"


def compute_signature(body: bytes, secret: str) -> str:
    """base64(HMAC-SHA256(body, secret)), the value carried in the signature header."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def signature_matches(body: bytes, signature: str, secret: str) -> bool:
    expected = compute_signature(body, secret)
    # compare_digest only accepts ASCII str; non-ASCII input can never match
    try:
        return hmac.compare_digest(expected, signature)
    except TypeError:
        return False


class VerifySignatureUseCase:
    """
    Authenticates an inbound callback against the shared api_key.

    Must be given the raw request body exactly as received. Re-encoding a
    parsed payload changes key order and whitespace and breaks valid signatures.
    """

    def __init__(self, *, credentials: IntegrationCredentials) -> None:
        self._credentials = credentials

    def execute(self, *, body: bytes, signature: str | None) -> None:
        if not signature:
            raise MissingSignatureError(f"Missing {SIGNATURE_HEADER.lower()} header.")

        if not self._credentials.api_key:
            raise NotConfiguredError("LockerLink is not configured.")

        if not signature_matches(body, signature, self._credentials.api_key):
            raise InvalidSignatureError("Invalid signature.")
