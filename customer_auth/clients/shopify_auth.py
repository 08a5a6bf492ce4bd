"""
Shopify Customer Account OAuth utilities.

Builds the provider authorization URL and exchanges authorization codes for
access tokens.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from customer_auth.core.config import ShopifySettings

logger = logging.getLogger(__name__)


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint cannot produce an access token."""


class ShopifyCustomerAuthClient:
    """Build authorization URLs and exchange authorization codes."""

    SCOPES = ("openid", "email")

    def __init__(
        self,
        shopify_settings: ShopifySettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._shopify = shopify_settings
        self._transport = transport

    def build_authorization_url(self, *, store: str, state: str, callback_url: str) -> str:
        """Construct the provider consent URL for ``store``."""
        params = {
            "client_id": self._shopify.client_id or "",
            "scope": " ".join(self.SCOPES),
            "response_type": "code",
            "state": state,
            "store": store,
            "redirect_uri": callback_url,
        }
        return f"{self._shopify.authorize_url}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str, *, callback_url: str) -> str:
        """
        Exchange an authorization code for an access token.

        ``callback_url`` must be byte-identical to the one sent in the
        authorization request. Exactly one attempt is made.
        """
        payload = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self._shopify.client_id,
            "client_secret": self._shopify.client_secret,
            "redirect_uri": callback_url,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._shopify.token_exchange_timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._shopify.token_url, json=payload)
        except httpx.TimeoutException as exc:
            raise OAuthTokenExchangeError(
                f"Token endpoint timed out after {self._shopify.token_exchange_timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise OAuthTokenExchangeError(f"Token request failed: {exc}") from exc

        if not response.is_success:
            raise OAuthTokenExchangeError(
                f"Token endpoint returned {response.status_code}: {response.text[:500]}"
            )

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise OAuthTokenExchangeError("Token endpoint returned invalid JSON.") from exc

        access_token = (
            token_payload.get("access_token") if isinstance(token_payload, dict) else None
        )
        if not access_token or not isinstance(access_token, str):
            raise OAuthTokenExchangeError("Token response missing access_token.")

        return access_token


__all__ = ["OAuthTokenExchangeError", "ShopifyCustomerAuthClient"]
