"""Admin key authentication for the quota management endpoints.

Keys come from a comma-separated environment variable
(``APP_ADMIN_API_KEYS``) and are checked by a FastAPI dependency. Checking
can be switched off with ``APP_ADMIN_KEY_REQUIRED=false`` for local work.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header, HTTPException, status

from rate_gate.core.config import settings
from rate_gate.core.errors import AuthenticationAppError
from rate_gate.core.logging import hash_client_id

logger = logging.getLogger(__name__)


def parse_admin_keys(keys_string: str | None) -> set[str]:
    """Split a comma-separated key list into a set of trimmed, non-empty keys.

    Examples:
        >>> sorted(parse_admin_keys("k1, k2 ,k1"))
        ['k1', 'k2']
        >>> parse_admin_keys(None)
        set()
    """
    if not keys_string:
        return set()
    return {key.strip() for key in keys_string.split(",") if key.strip()}


def validate_admin_key(provided_key: str) -> None:
    """Check a provided admin key against the configured ones.

    Raises:
        AuthenticationAppError: If no keys are configured while checking is
            enabled, or the key does not match.
    """
    if not settings.app.admin_key_required:
        return

    valid_keys = parse_admin_keys(settings.app.admin_api_keys)
    if not valid_keys:
        logger.error(
            "admin_key_validation_failed",
            extra={"reason": "admin_keys_not_configured"},
        )
        raise AuthenticationAppError(
            code="admin_keys_not_configured",
            message="Admin authentication is enabled but no admin keys are configured",
            details={"hint": "Set APP_ADMIN_API_KEYS or disable with APP_ADMIN_KEY_REQUIRED=false"},
        )

    provided = provided_key.encode()
    if not any(hmac.compare_digest(provided, key.encode()) for key in valid_keys):
        logger.warning(
            "admin_key_validation_failed",
            extra={
                "reason": "invalid_admin_key",
                "admin_key_hash": hash_client_id(provided_key),
            },
        )
        raise AuthenticationAppError(
            code="invalid_admin_key",
            message="Invalid or missing admin key",
        )


async def verify_admin_key(
    x_admin_key: Annotated[str | None, Header(alias="X-Admin-Key")] = None,
) -> None:
    """FastAPI dependency guarding the admin endpoints.

    Raises:
        HTTPException: 403 when the key is missing or invalid.
    """
    if not settings.app.admin_key_required:
        return

    if not x_admin_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Missing admin key. Provide X-Admin-Key header.",
        )

    try:
        validate_admin_key(x_admin_key)
    except AuthenticationAppError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=exc.message,
        ) from exc
