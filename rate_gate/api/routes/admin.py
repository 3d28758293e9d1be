from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from rate_gate.adapters.rate_limit.base import AbstractRateLimiter
from rate_gate.core.auth import verify_admin_key
from rate_gate.core.rate_limit import get_rate_limiter
from rate_gate.schemas.rate_limit import RateLimitStatusResponse

router = APIRouter(
    prefix="/admin/rate-limit",
    tags=["Admin"],
    dependencies=[Depends(verify_admin_key)],
)

LimiterDep = Annotated[AbstractRateLimiter, Depends(get_rate_limiter)]


@router.get("/{client_id}", response_model=RateLimitStatusResponse)
async def get_rate_limit_status(client_id: str, limiter: LimiterDep) -> RateLimitStatusResponse:
    """Report a client's remaining quota and time to reset.

    Read-only: the client's counter is neither incremented nor refreshed.
    """
    remaining = await limiter.get_remaining_requests(client_id)
    reset_after = await limiter.get_time_to_reset(client_id)
    return RateLimitStatusResponse(
        client_id=client_id,
        limit=limiter.limit,
        remaining=remaining,
        reset_after_seconds=reset_after,
        window_seconds=limiter.window_duration_seconds,
    )


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def reset_rate_limit(client_id: str, limiter: LimiterDep) -> Response:
    """Restore a client's full quota for the current window."""
    await limiter.reset_limit_for_ip(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
