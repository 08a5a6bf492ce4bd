"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from customer_auth.core.config import AppSettings, SecuritySettings, ShopifySettings


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def app_settings() -> AppSettings:
    """Fully configured settings independent of the process environment."""
    return AppSettings(
        BACKEND_BASE="https://auth.example.com/",
        shopify=ShopifySettings(
            SHOPIFY_STORE="default-store.example",
            SHOPIFY_CLIENT_ID="client-123",
            SHOPIFY_CLIENT_SECRET="secret-456",
            SHOPIFY_AUTHORIZE_URL="https://accounts.example.com/oauth/authorize",
            SHOPIFY_TOKEN_URL="https://accounts.example.com/oauth/token",
        ),
        security=SecuritySettings(
            CUSTOMER_AUTH_ALLOWED_REDIRECT_SCHEMES="",
            CUSTOMER_AUTH_ALLOWED_REDIRECT_HOSTS="",
        ),
    )
