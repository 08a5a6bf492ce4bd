from __future__ import annotations

import pytest

from customer_auth.core.config import (
    AppSettings,
    SecuritySettings,
    SessionSettings,
    ShopifySettings,
    _load_env_file,
)
from customer_auth.core.logging import mask_sensitive


def test_security_lists_accept_comma_separated_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CUSTOMER_AUTH_ALLOWED_REDIRECT_SCHEMES", "MyApp, https ,")
    monkeypatch.setenv("CUSTOMER_AUTH_ALLOWED_REDIRECT_HOSTS", "done,App.Example.com")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    security = SecuritySettings()

    assert security.allowed_redirect_schemes == ("myapp", "https")
    assert security.allowed_redirect_hosts == ("done", "app.example.com")
    assert security.cors_allow_origins == ("*",)
    assert security.redirect_allow_list_enabled


def test_security_allow_list_is_disabled_when_empty() -> None:
    security = SecuritySettings(
        CUSTOMER_AUTH_ALLOWED_REDIRECT_SCHEMES="",
        CUSTOMER_AUTH_ALLOWED_REDIRECT_HOSTS="",
    )

    assert security.allowed_redirect_schemes == ()
    assert not security.redirect_allow_list_enabled


def test_blank_credentials_are_treated_as_missing() -> None:
    settings = AppSettings(
        BACKEND_BASE="   ",
        shopify=ShopifySettings(
            SHOPIFY_STORE=" ", SHOPIFY_CLIENT_ID="client", SHOPIFY_CLIENT_SECRET=""
        ),
    )

    assert settings.shopify.store is None
    assert settings.shopify.client_secret is None
    assert settings.backend_base is None
    assert settings.missing_oauth_settings() == ["SHOPIFY_CLIENT_SECRET", "BACKEND_BASE"]


def test_backend_base_drops_trailing_slash(app_settings: AppSettings) -> None:
    assert app_settings.backend_base == "https://auth.example.com"
    assert app_settings.missing_oauth_settings() == []


def test_session_policy_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_PENDING_TTL", "120")
    monkeypatch.setenv("SESSION_MAX_ENTRIES", "5")

    sessions = SessionSettings()

    assert sessions.pending_ttl_seconds == 120
    assert sessions.completed_ttl_seconds == 3600
    assert sessions.max_entries == 5


def test_mask_sensitive_keeps_only_a_prefix() -> None:
    assert mask_sensitive("0123456789abcdef") == "0123****"
    assert mask_sensitive("abc") == "****"
    assert mask_sensitive(None) == "-"


def test_env_file_fills_missing_values_without_overriding(
    tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local overrides\nSHOPIFY_STORE=from-file.example\nSESSION_MAX_ENTRIES='7'\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SHOPIFY_STORE", "from-env.example")
    monkeypatch.setenv("SESSION_MAX_ENTRIES", "")
    monkeypatch.delenv("SESSION_MAX_ENTRIES")

    _load_env_file(str(env_file))
    settings = AppSettings()

    assert settings.shopify.store == "from-env.example"
    assert settings.sessions.max_entries == 7
