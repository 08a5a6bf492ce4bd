"""
FastAPI routes for the customer account authentication service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import PlainTextResponse, RedirectResponse

from customer_auth.clients.shopify_auth import OAuthTokenExchangeError
from customer_auth.dependencies import get_customer_auth_service
from customer_auth.schemas import AuthResultResponse, HealthResponse
from customer_auth.services import (
    ConfigurationError,
    InvalidSessionError,
    RedirectNotAllowedError,
    SessionConsumedError,
    SessionExistsError,
    SessionStoreFullError,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _plain(message: str, status_code: HTTPStatus) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code)


@router.get("/health", response_model=HealthResponse, status_code=HTTPStatus.OK)
async def healthcheck() -> HealthResponse:
    """Simple health endpoint for monitoring."""
    return HealthResponse(ok=True)


@router.get("/customer-auth/start")
async def start_customer_auth(
    service: Annotated[Any, Depends(get_customer_auth_service)],
    store: str | None = Query(
        default=None, description="Store domain; falls back to SHOPIFY_STORE."
    ),
    redirect_uri: str | None = Query(
        default=None, description="Deep link the user-agent returns to afterwards."
    ),
) -> Response:
    """Create a pending session and redirect the user-agent to the provider."""
    try:
        authorization_url = service.start(store=store, redirect_uri=redirect_uri)
    except ConfigurationError as exc:
        logger.warning("Refusing customer auth start: %s", exc)
        return _plain(f"{exc}", HTTPStatus.BAD_REQUEST)
    except RedirectNotAllowedError as exc:
        logger.warning("Refusing customer auth start: %s", exc)
        return _plain("redirect_uri is not allowed", HTTPStatus.BAD_REQUEST)
    except SessionStoreFullError:
        logger.error("Session store is full; refusing new customer auth session")
        return _plain("Too many pending sessions", HTTPStatus.SERVICE_UNAVAILABLE)
    except SessionExistsError:
        logger.error("Generated session identifier collided with a live session")
        return _plain("Could not create session", HTTPStatus.SERVICE_UNAVAILABLE)

    return RedirectResponse(url=authorization_url, status_code=HTTPStatus.FOUND)


@router.get("/customer-auth/callback")
async def customer_auth_callback(
    service: Annotated[Any, Depends(get_customer_auth_service)],
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    session: str | None = Query(default=None),
    error: str | None = Query(default=None),
    error_description: str | None = Query(default=None),
) -> Response:
    """Complete the code exchange and send the user-agent back into the client."""
    if error:
        logger.warning(
            "Provider reported authorization error=%s description=%s",
            error,
            error_description or "-",
        )
        return _plain("Authorization was not granted", HTTPStatus.BAD_REQUEST)

    try:
        app_redirect = await service.handle_callback(
            code=code, state=state, session_id=session
        )
    except InvalidSessionError as exc:
        logger.info("Rejected customer auth callback: %s", exc)
        return _plain("Invalid session/state", HTTPStatus.BAD_REQUEST)
    except SessionConsumedError:
        return _plain("Session already completed", HTTPStatus.CONFLICT)
    except OAuthTokenExchangeError as exc:
        logger.error("Token exchange failed: %s", exc)
        return _plain("Token exchange failed", HTTPStatus.BAD_REQUEST)
    except Exception:  # broad: mapped to a generic failure for the user-agent
        logger.exception("Unexpected error while handling customer auth callback")
        return _plain("Callback error", HTTPStatus.INTERNAL_SERVER_ERROR)

    return RedirectResponse(url=app_redirect, status_code=HTTPStatus.FOUND)


@router.get(
    "/customer-auth/result",
    response_model=AuthResultResponse,
    response_model_exclude_none=True,
)
async def customer_auth_result(
    service: Annotated[Any, Depends(get_customer_auth_service)],
    session: str | None = Query(default=None),
) -> AuthResultResponse:
    """Polling endpoint; unknown sessions are reported as pending."""
    return AuthResultResponse(**service.result(session))


__all__ = ["router"]
