"""
Orchestration of the customer "login with store" authorization-code flow.

The flow spans three independent HTTP round trips:

1. :meth:`CustomerAuthService.start` creates a pending session and returns
   the provider authorization URL. The session id travels inside the callback
   URL given to the provider.
2. :meth:`CustomerAuthService.handle_callback` validates session and state,
   exchanges the code exactly once and returns the client deep link.
3. :meth:`CustomerAuthService.result` lets the client poll for the token.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from customer_auth.clients.shopify_auth import ShopifyCustomerAuthClient
from customer_auth.core.config import AppSettings
from customer_auth.core.logging import mask_sensitive
from customer_auth.services.session_store import (
    AuthSession,
    SessionStatus,
    SessionStore,
)
from customer_auth.utils.ids import new_session_id, new_state, tokens_match

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/customer-auth/callback"


class ConfigurationError(Exception):
    """Raised when a request cannot proceed because values are missing."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing {', '.join(missing)}")
        self.missing = missing


class RedirectNotAllowedError(Exception):
    """Raised when redirect_uri falls outside the configured allow-list."""


class InvalidSessionError(Exception):
    """Raised when a callback does not match a session this server issued."""


class SessionConsumedError(Exception):
    """Raised when a session already went through a token exchange."""


def append_session_param(redirect_uri: str, session_id: str) -> str:
    separator = "&" if "?" in redirect_uri else "?"
    return f"{redirect_uri}{separator}session={session_id}"


class CustomerAuthService:
    """Application service behind the /customer-auth endpoints."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        store: SessionStore,
        oauth_client: ShopifyCustomerAuthClient,
    ) -> None:
        self._settings = settings
        self._store = store
        self._oauth = oauth_client

    def callback_url(self, session_id: str) -> str:
        return f"{self._settings.backend_base}{CALLBACK_PATH}?session={session_id}"

    def _check_redirect(self, redirect_uri: str) -> None:
        security = self._settings.security
        if not security.redirect_allow_list_enabled:
            return
        parts = urlsplit(redirect_uri)
        scheme = parts.scheme.lower()
        host = (parts.hostname or "").lower()
        if security.allowed_redirect_schemes and scheme not in security.allowed_redirect_schemes:
            raise RedirectNotAllowedError(f"redirect_uri scheme '{scheme}' is not allowed")
        if security.allowed_redirect_hosts and host not in security.allowed_redirect_hosts:
            raise RedirectNotAllowedError(f"redirect_uri host '{host}' is not allowed")

    def start(self, *, store: Optional[str], redirect_uri: Optional[str]) -> str:
        """Create a pending session and return the provider authorization URL."""
        tenant = (store or "").strip() or (self._settings.shopify.store or "")
        target = (redirect_uri or "").strip()

        missing: list[str] = []
        if not tenant:
            missing.append("store")
        if not target:
            missing.append("redirect_uri")
        missing.extend(self._settings.missing_oauth_settings())
        if missing:
            raise ConfigurationError(missing)

        self._check_redirect(target)

        session = AuthSession(
            session_id=new_session_id(),
            state=new_state(),
            redirect_uri=target,
            store=tenant,
            created_at=self._store.now(),
        )
        self._store.create(session)

        url = self._oauth.build_authorization_url(
            store=tenant,
            state=session.state,
            callback_url=self.callback_url(session.session_id),
        )
        logger.info(
            "Started customer auth session=%s store=%s",
            mask_sensitive(session.session_id, 6),
            tenant,
        )
        return url

    def _claim(self, session: AuthSession) -> AuthSession:
        if session.status is not SessionStatus.PENDING:
            raise SessionConsumedError("session already completed")
        return session.claim()

    async def handle_callback(
        self,
        *,
        code: Optional[str],
        state: Optional[str],
        session_id: Optional[str],
    ) -> str:
        """Validate the provider callback, exchange the code and return the client URL."""
        session = self._store.get(session_id) if session_id else None
        if session is None:
            raise InvalidSessionError("unknown or expired session")
        if not tokens_match(session.state, state):
            logger.warning(
                "State mismatch for session=%s", mask_sensitive(session.session_id, 6)
            )
            raise InvalidSessionError("state mismatch")
        if not code:
            raise InvalidSessionError("missing authorization code")

        claimed = self._store.update(session.session_id, self._claim)
        if claimed is None:
            raise InvalidSessionError("session expired during callback")

        try:
            token = await self._oauth.exchange_authorization_code(
                code, callback_url=self.callback_url(session.session_id)
            )
        except BaseException:
            # Cancellation included: the claim must not outlive the attempt.
            self._store.update(session.session_id, AuthSession.release)
            raise

        now = self._store.now()
        completed = self._store.update(
            session.session_id, lambda current: current.complete(token, now=now)
        )
        if completed is None:
            raise InvalidSessionError("session expired during token exchange")

        logger.info(
            "Completed customer auth session=%s store=%s",
            mask_sensitive(session.session_id, 6),
            session.store,
        )
        return append_session_param(completed.redirect_uri, completed.session_id)

    def result(self, session_id: Optional[str]) -> Dict[str, Any]:
        """Return the polling payload for ``session_id``."""
        session = self._store.get(session_id) if session_id else None
        if session is None or not session.is_completed:
            return {"status": "pending"}
        return {"status": "ok", "token": session.token}


__all__ = [
    "CALLBACK_PATH",
    "ConfigurationError",
    "CustomerAuthService",
    "InvalidSessionError",
    "RedirectNotAllowedError",
    "SessionConsumedError",
    "append_session_param",
]
