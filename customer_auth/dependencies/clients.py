"""
Factory functions to provide the shared store, client and flow service.
"""

from functools import lru_cache

from fastapi import Depends

from customer_auth.clients import ShopifyCustomerAuthClient
from customer_auth.core.config import AppSettings, get_settings
from customer_auth.dependencies.config import SettingsDependency
from customer_auth.services import CustomerAuthService, SessionStore


@lru_cache()
def get_session_store() -> SessionStore:
    """Provide the process-wide session store.

    The store outlives any single request, so its TTL and capacity policy is
    read once from the process settings at first use and stays fixed.
    """
    policy = get_settings().sessions
    return SessionStore(
        pending_ttl_seconds=policy.pending_ttl_seconds,
        completed_ttl_seconds=policy.completed_ttl_seconds,
        max_entries=policy.max_entries,
    )


def get_shopify_auth_client(
    settings: AppSettings = SettingsDependency,
) -> ShopifyCustomerAuthClient:
    """Customer Account OAuth client bound to the request's settings."""
    return ShopifyCustomerAuthClient(settings.shopify)


def get_customer_auth_service(
    settings: AppSettings = SettingsDependency,
    oauth_client: ShopifyCustomerAuthClient = Depends(get_shopify_auth_client),
) -> CustomerAuthService:
    """Build the flow service over the shared store and the request's client."""
    return CustomerAuthService(
        settings=settings,
        store=get_session_store(),
        oauth_client=oauth_client,
    )


__all__ = [
    "get_customer_auth_service",
    "get_session_store",
    "get_shopify_auth_client",
]
