"""Factory for the configured counter store."""

from rate_gate.adapters.counter_store.base import AbstractCounterStore
from rate_gate.adapters.counter_store.in_memory import InMemoryCounterStore
from rate_gate.adapters.counter_store.redis_store import RedisCounterStore
from rate_gate.core.config import StoreSettings, settings
from rate_gate.core.errors import ValidationAppError


def create_counter_store(store_settings: StoreSettings | None = None) -> AbstractCounterStore:
    """Instantiate the counter store selected by configuration.

    Args:
        store_settings: Optional store settings; defaults to global settings.

    Returns:
        AbstractCounterStore: Store instance (not yet connected).

    Raises:
        ValidationAppError: If the backend name is not supported.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "redis":
        return RedisCounterStore.from_url(
            cfg.redis_url,
            socket_timeout=cfg.socket_timeout_seconds,
        )

    if backend == "memory":
        return InMemoryCounterStore()

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown counter store backend: '{backend}'. Supported backends: redis, memory",
    )
