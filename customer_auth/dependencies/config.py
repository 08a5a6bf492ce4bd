"""
Settings dependency shared by the route handlers and client factories.
"""

from fastapi import Depends

from customer_auth.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning the process settings.

    Override this in ``app.dependency_overrides`` to run the flow against a
    hand-built ``AppSettings`` without touching the environment.
    """
    return get_settings()


SettingsDependency = Depends(get_app_settings)

__all__ = ["SettingsDependency", "get_app_settings"]
