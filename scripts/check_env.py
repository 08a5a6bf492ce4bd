"""Pre-flight check for the customer auth bridge configuration.

Loads ``AppSettings`` from the given ``.env`` file and reports everything
that would make ``/customer-auth/start`` reject requests: missing client
credentials, a missing or non-http ``BACKEND_BASE``, or a non-positive
pending TTL. On success it prints the effective configuration with the
client credentials masked.

Example usage::

    python -m scripts.check_env --env-file /opt/customer-auth/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import ValidationError

from customer_auth.core.config import AppSettings, _load_env_file
from customer_auth.core.logging import mask_sensitive
from customer_auth.services.customer_auth import CALLBACK_PATH

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5


class SettingsProblemError(Exception):
    """Raised when settings load but the OAuth flow could not run with them."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


def _validate_settings(env_file: Path) -> AppSettings:
    """Load settings from ``env_file`` and collect everything that blocks the flow."""
    if not env_file.exists():
        raise FileNotFoundError(f"Environment file {env_file} does not exist.")
    _load_env_file(str(env_file))
    settings = AppSettings()  # type: ignore[call-arg]

    problems = [f"{name} is not set" for name in settings.missing_oauth_settings()]
    if settings.backend_base:
        scheme = urlsplit(settings.backend_base).scheme
        if scheme not in ("http", "https"):
            problems.append("BACKEND_BASE must be an http(s) URL")
    if settings.sessions.pending_ttl_seconds <= 0:
        problems.append("SESSION_PENDING_TTL must be positive")
    if problems:
        raise SettingsProblemError(problems)
    return settings


def _print_summary(settings: AppSettings) -> None:
    security = settings.security
    print(f"Callback URL:    {settings.backend_base}{CALLBACK_PATH}?session=<id>")
    print(f"Default store:   {settings.shopify.store or '- (callers must pass ?store=)'}")
    print(f"Client ID:       {mask_sensitive(settings.shopify.client_id)}")
    print(f"Client secret:   {mask_sensitive(settings.shopify.client_secret, keep=0)}")
    if security.redirect_allow_list_enabled:
        print(
            "Redirect allow:  schemes="
            f"{','.join(security.allowed_redirect_schemes) or '*'} "
            f"hosts={','.join(security.allowed_redirect_hosts) or '*'}"
        )
    else:
        print("Redirect allow:  any (no allow-list configured)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the customer auth bridge settings before deploying."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the repo root).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = _validate_settings(args.env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Malformed values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except SettingsProblemError as exc:
        print("The OAuth flow cannot run with these settings:", file=sys.stderr)
        for problem in exc.problems:
            print(f"  - {problem}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    _print_summary(settings)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
