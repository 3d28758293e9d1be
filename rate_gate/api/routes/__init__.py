from __future__ import annotations

from rate_gate.api.routes.admin import router as admin_router
from rate_gate.api.routes.health import router as health_router
from rate_gate.api.routes.people import router as people_router

__all__ = ["admin_router", "health_router", "people_router"]
