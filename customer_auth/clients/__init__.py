"""Expose constructed client wrappers."""

from .shopify_auth import OAuthTokenExchangeError, ShopifyCustomerAuthClient

__all__ = [
    "OAuthTokenExchangeError",
    "ShopifyCustomerAuthClient",
]
