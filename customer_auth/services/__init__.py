"""Service layer exports."""

from .customer_auth import (
    ConfigurationError,
    CustomerAuthService,
    InvalidSessionError,
    RedirectNotAllowedError,
    SessionConsumedError,
)
from .session_store import (
    AuthSession,
    SessionExistsError,
    SessionStatus,
    SessionStore,
    SessionStoreFullError,
)

__all__ = [
    "AuthSession",
    "ConfigurationError",
    "CustomerAuthService",
    "InvalidSessionError",
    "RedirectNotAllowedError",
    "SessionConsumedError",
    "SessionExistsError",
    "SessionStatus",
    "SessionStore",
    "SessionStoreFullError",
]
