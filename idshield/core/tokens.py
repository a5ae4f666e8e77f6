"""Bearer token extraction (RFC 6750) from the Authorization header.

Signature and expiry checks happen upstream; this only parses the header.
"""
from __future__ import annotations

import hashlib
from typing import Optional

BEARER_PREFIX = "Bearer "


class TokenMissing(Exception):
    """Authorization header absent, empty, or not using the Bearer scheme."""
    pass


def extract_bearer_token(header: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header.

    The scheme match is case-sensitive.

    Raises:
        TokenMissing: If the header is missing, empty, uses another scheme,
            or carries an empty token
    """
    if not header:
        raise TokenMissing("Authorization header missing")

    if not header.startswith(BEARER_PREFIX):
        raise TokenMissing("Authorization header must use the Bearer scheme")

    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise TokenMissing("Bearer token is empty")

    return token


def token_fingerprint(token: str) -> str:
    """SHA256 of the token truncated to 12 chars, safe to log."""
    return hashlib.sha256(token.encode()).hexdigest()[:12]
