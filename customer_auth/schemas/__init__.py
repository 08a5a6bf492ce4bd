"""Public schema exports."""

from .auth import AuthResultResponse, HealthResponse

__all__ = [
    "AuthResultResponse",
    "HealthResponse",
]
