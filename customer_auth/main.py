"""
FastAPI application entrypoint for the customer account authentication service.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from customer_auth import __version__
from customer_auth.api.middleware import CORRELATION_HEADER, RequestLoggingMiddleware
from customer_auth.api.routes import router as api_router
from customer_auth.core.config import AppSettings, get_settings
from customer_auth.core.logging import configure_logging
from customer_auth.dependencies import get_session_store
from customer_auth.services import SessionStore

logger = logging.getLogger(__name__)


def _warn_on_missing_config(settings: AppSettings) -> None:
    missing = settings.missing_oauth_settings()
    if missing:
        logger.warning(
            "Missing %s; /customer-auth/start will reject requests until set.",
            ", ".join(missing),
        )
    if not settings.shopify.store:
        logger.info("SHOPIFY_STORE not set; callers must pass ?store= explicitly.")
    if not settings.security.redirect_allow_list_enabled:
        logger.warning(
            "No redirect_uri allow-list configured; any redirect target is accepted."
        )


async def _sweep_periodically(store: SessionStore, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        removed = store.sweep()
        if removed:
            logger.debug("Periodic sweep evicted %s expired sessions", removed)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    interval = settings.sessions.sweep_interval_seconds
    task: asyncio.Task | None = None
    if interval > 0:
        task = asyncio.create_task(_sweep_periodically(get_session_store(), interval))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)
    _warn_on_missing_config(settings)

    app = FastAPI(
        title="Customer Account Auth Bridge",
        version=__version__,
        description="OAuth authorization-code bridge for Customer Account API clients.",
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.security.cors_allow_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover - script entry point
    run()


__all__ = ["app", "create_app", "run"]
