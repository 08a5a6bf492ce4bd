"""
Logging utilities for the authentication service.

Provides a consistent logging format and a masking helper so secrets only
ever reach the logs as a short prefix.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return ``value`` truncated to ``keep`` characters followed by ``****``."""
    if not value:
        return "-"
    if len(value) <= keep:
        return "****"
    return f"{value[:keep]}****"


__all__ = ["configure_logging", "mask_sensitive"]
