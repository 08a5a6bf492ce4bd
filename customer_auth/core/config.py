"""
Application configuration models and helpers.

Settings are read from the environment once and handed to request handlers
through FastAPI dependencies, so tests can build their own instances instead
of mutating the process environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


def _split_csv(value: str | tuple[str, ...] | list[str] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (tuple, list)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    return tuple(item.strip() for item in value.split(",") if item.strip())


class ShopifySettings(BaseSettings):
    """Customer Account API OAuth client configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    store: Optional[str] = Field(
        None,
        validation_alias="SHOPIFY_STORE",
        description="Default tenant used when the caller omits ?store=.",
    )
    client_id: Optional[str] = Field(None, validation_alias="SHOPIFY_CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="SHOPIFY_CLIENT_SECRET")
    authorize_url: str = Field(
        "https://accounts.shopify.com/oauth/authorize",
        validation_alias="SHOPIFY_AUTHORIZE_URL",
    )
    token_url: str = Field(
        "https://accounts.shopify.com/oauth/token",
        validation_alias="SHOPIFY_TOKEN_URL",
    )
    token_exchange_timeout: float = Field(
        10.0,
        validation_alias="TOKEN_EXCHANGE_TIMEOUT",
        description="Deadline in seconds for the server-to-server code exchange.",
    )

    @field_validator("store", "client_id", "client_secret", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class SessionSettings(BaseSettings):
    """Lifecycle policy for the in-memory session store."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    pending_ttl_seconds: int = Field(600, validation_alias="SESSION_PENDING_TTL")
    completed_ttl_seconds: int = Field(3600, validation_alias="SESSION_COMPLETED_TTL")
    max_entries: int = Field(10_000, validation_alias="SESSION_MAX_ENTRIES")
    sweep_interval_seconds: float = Field(
        60.0,
        validation_alias="SESSION_SWEEP_INTERVAL",
        description="Background sweep period; 0 disables the periodic sweep.",
    )


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    allowed_redirect_schemes: Annotated[tuple[str, ...], NoDecode] = Field(
        (),
        validation_alias="CUSTOMER_AUTH_ALLOWED_REDIRECT_SCHEMES",
        description="Accepted redirect_uri schemes; empty accepts any.",
    )
    allowed_redirect_hosts: Annotated[tuple[str, ...], NoDecode] = Field(
        (),
        validation_alias="CUSTOMER_AUTH_ALLOWED_REDIRECT_HOSTS",
        description="Accepted redirect_uri hosts; empty accepts any.",
    )
    cors_allow_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        ("*",),
        validation_alias="CORS_ALLOW_ORIGINS",
    )

    @field_validator(
        "allowed_redirect_schemes",
        "allowed_redirect_hosts",
        "cors_allow_origins",
        mode="before",
    )
    @classmethod
    def _split_lists(
        cls, value: str | tuple[str, ...] | list[str] | None
    ) -> tuple[str, ...]:
        """Support providing lists as a comma-separated string."""
        return tuple(item.lower() if item != "*" else item for item in _split_csv(value))

    @property
    def redirect_allow_list_enabled(self) -> bool:
        return bool(self.allowed_redirect_schemes or self.allowed_redirect_hosts)


class AppSettings(BaseSettings):
    """Root settings object for the authentication service."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    backend_base: Optional[str] = Field(
        None,
        validation_alias="BACKEND_BASE",
        description="Publicly reachable base URL used to build the callback address.",
    )
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(5000, validation_alias="PORT")
    shopify: ShopifySettings = Field(default_factory=ShopifySettings)
    sessions: SessionSettings = Field(default_factory=SessionSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("backend_base", mode="before")
    @classmethod
    def _normalize_base(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            value = value.strip().rstrip("/")
            return value or None
        return value

    def missing_oauth_settings(self) -> list[str]:
        """Names of the environment variables the OAuth flow still needs."""
        missing = []
        if not self.shopify.client_id:
            missing.append("SHOPIFY_CLIENT_ID")
        if not self.shopify.client_secret:
            missing.append("SHOPIFY_CLIENT_SECRET")
        if not self.backend_base:
            missing.append("BACKEND_BASE")
        return missing


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "SecuritySettings",
    "SessionSettings",
    "ShopifySettings",
    "get_settings",
]
