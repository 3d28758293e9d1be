from __future__ import annotations

from fastapi import APIRouter

from rate_gate.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe. Not rate limited and never touches the counter store."""

    return {"status": "ok", "store_backend": settings.store.backend}
