"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_customer_auth_service,
    get_session_store,
    get_shopify_auth_client,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_customer_auth_service",
    "get_session_store",
    "get_shopify_auth_client",
]
