"""Opaque identifier generation for OAuth sessions."""

from __future__ import annotations

import hmac
import secrets

SESSION_ID_BYTES = 16
STATE_BYTES = 8


def generate_token(nbytes: int) -> str:
    """Return ``nbytes`` of CSPRNG output as a lowercase hex string."""
    if nbytes <= 0:
        raise ValueError("nbytes must be positive")
    return secrets.token_hex(nbytes)


def new_session_id() -> str:
    return generate_token(SESSION_ID_BYTES)


def new_state() -> str:
    return generate_token(STATE_BYTES)


def tokens_match(expected: str, provided: str | None) -> bool:
    """Exact, constant-time comparison of two opaque tokens."""
    if provided is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))


__all__ = [
    "SESSION_ID_BYTES",
    "STATE_BYTES",
    "generate_token",
    "new_session_id",
    "new_state",
    "tokens_match",
]
