"""Rate limiting dependency for FastAPI routes.

This module wires the fixed-window limiter into the HTTP layer:

- Client identity: first ``X-Forwarded-For`` entry (when trusted), else the
  socket peer address, else ``127.0.0.1``.
- Allowed requests get ``X-RateLimit-Limit/Remaining/Reset`` headers.
- Denied requests get HTTP 429 with the same headers plus ``Retry-After``.
- A counter store outage raises ``StoreUnavailableError``, rendered as 503 by
  the global exception handlers, so it is never reported as a 429.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from rate_gate.adapters.counter_store.factory import create_counter_store
from rate_gate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from rate_gate.adapters.rate_limit.fixed_window import FixedWindowRateLimiter
from rate_gate.core.config import settings
from rate_gate.core.logging import hash_client_id

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_ID = "127.0.0.1"

_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple | None = None


def _current_config() -> tuple:
    return (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_length,
        settings.app.rate_limit_window_unit,
        settings.store.backend,
        settings.store.redis_url,
        settings.store.key_prefix,
    )


async def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide rate limiter instance.

    The limiter and its store handle are created once and shared by every
    request. If configuration changes (primarily in tests), the limiter is
    rebuilt and the replaced limiter's store is closed.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = _current_config()
    if _limiter is None or _limiter_config != config:
        stale = _limiter
        _limiter = FixedWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_length=settings.app.rate_limit_window_length,
            window_unit=settings.app.rate_limit_window_unit,
            store=create_counter_store(settings.store),
            key_prefix=settings.store.key_prefix,
        )
        _limiter_config = config
        limiter = _limiter
        if stale is not None:
            await stale.close()
        return limiter

    return _limiter


async def close_rate_limiter() -> None:
    """Release the shared limiter's store connection (process shutdown)."""

    global _limiter, _limiter_config

    if _limiter is None:
        return
    limiter, _limiter, _limiter_config = _limiter, None, None
    await limiter.close()


def get_client_id(request: Request) -> str:
    """Identify the client behind a request.

    Args:
        request: FastAPI request.

    Returns:
        str: Client IP address (never empty).
    """

    if settings.app.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return DEFAULT_CLIENT_ID


def build_rate_limit_headers(decision: RateLimitDecision, *, now: float | None = None) -> dict[str, str]:
    """Render quota metadata as response headers.

    ``X-RateLimit-Reset`` is an absolute UNIX timestamp (seconds).
    """

    if now is None:
        now = time.time()
    reset_at = math.ceil(now) + decision.reset_after_seconds
    return {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(reset_at),
    }


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
) -> None:
    """FastAPI dependency enforcing the per-client rate limit.

    When enabled, counts the request against the client's current window.
    If the client is over its limit, raises HTTP 429.

    Args:
        request: FastAPI request.
        response: Response whose headers receive the quota metadata.
        limiter: Shared limiter (overridable through dependency_overrides).

    Raises:
        HTTPException: 429 Too Many Requests when rate limit is exceeded.
        StoreUnavailableError: When the counter store cannot be reached.
    """

    if not settings.app.rate_limit_enabled:
        return

    client_id = get_client_id(request)
    client_hash = hash_client_id(client_id)

    decision = await limiter.evaluate(client_id)
    if decision.error is not None:
        raise decision.error

    headers = build_rate_limit_headers(decision) if settings.app.rate_limit_include_headers else {}

    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "client_hash": client_hash,
                "limit": decision.limit,
                "remaining": decision.remaining,
            },
        )
        response.headers.update(headers)
        return

    retry_after = decision.reset_after_seconds
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": client_hash,
            "limit": decision.limit,
            "count": decision.count,
            "retry_after_s": retry_after,
        },
    )

    if headers:
        headers["Retry-After"] = str(retry_after)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Rate limit exceeded. Try again in {retry_after} seconds.",
        headers=headers or None,
    )
