"""Counter store adapters.

The limiter depends only on the narrow contract in ``base``; Redis is the
production backend and the in-memory store serves tests and single-process
development.
"""

from rate_gate.adapters.counter_store.base import AbstractCounterStore
from rate_gate.adapters.counter_store.factory import create_counter_store
from rate_gate.adapters.counter_store.in_memory import InMemoryCounterStore
from rate_gate.adapters.counter_store.redis_store import RedisCounterStore

__all__ = [
    "AbstractCounterStore",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "create_counter_store",
]
