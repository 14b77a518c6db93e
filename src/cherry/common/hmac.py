"""HMAC-SHA256 signing utilities for Todoist webhook payloads."""

from __future__ import annotations

import hashlib
import hmac


def _key(secret: str | bytes) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else secret


def sign(payload: bytes, secret: str | bytes) -> str:
    """Create a lowercase hex-encoded HMAC-SHA256 signature."""
    return hmac.new(_key(secret), payload, hashlib.sha256).hexdigest()


def verify(payload: bytes, signature: str, secret: str | bytes) -> bool:
    """
    Verify a webhook signature in constant time.

    The provided signature is compared to the computed hex digest as a
    string, not decoded to bytes first. Upper-case or malformed hex never
    matches and never raises.

    Args:
        payload: Raw request body
        signature: Hex digest supplied by the caller
        secret: Shared client secret

    Returns:
        True only if the signature equals the computed digest exactly
    """
    expected = sign(payload, secret)
    provided = signature.encode("utf-8", "surrogatepass")
    return hmac.compare_digest(expected.encode("utf-8"), provided)
