"""Pydantic schemas for the rate limit admin endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RateLimitStatusResponse(BaseModel):
    """Quota snapshot for one client in the current window."""

    client_id: str = Field(..., description="Client identifier (IP address).")
    limit: int = Field(..., ge=1, description="Max requests per window.")
    remaining: int = Field(
        ..., ge=0, description="Requests left in the current window."
    )
    reset_after_seconds: int = Field(
        ...,
        ge=0,
        description=(
            "Seconds until the current window's counter expires; the full window "
            "length when the client has not made a request in this window."
        ),
    )
    window_seconds: int = Field(..., ge=1, description="Window length in seconds.")
