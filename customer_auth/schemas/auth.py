"""Schemas related to the customer OAuth flow."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    ok: bool = True


class AuthResultResponse(BaseModel):
    """Payload returned to a client polling for flow completion."""

    status: Literal["pending", "ok"] = Field(
        ..., description="'ok' once the token exchange succeeded, otherwise 'pending'."
    )
    token: Optional[str] = Field(
        None, description="Customer Account API access token, present when status is 'ok'."
    )


__all__ = ["AuthResultResponse", "HealthResponse"]
