"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment defaults are set before anything imports the settings module,
so no test ever needs a running Redis.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("APP_ADMIN_KEY_REQUIRED", "true")
os.environ.setdefault("APP_ADMIN_API_KEYS", "test-admin-key,other-admin-key")
os.environ.setdefault("LOG_LEVEL", "INFO")

from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402

from rate_gate.adapters.counter_store.in_memory import InMemoryCounterStore  # noqa: E402
from rate_gate.adapters.rate_limit.fixed_window import FixedWindowRateLimiter  # noqa: E402

# Start of a 12s window: 1200 // 12 == 100
WINDOW_START = 1200.0


@pytest.fixture
def clock() -> Mock:
    """Controllable time source shared by limiter and store."""
    return Mock(return_value=WINDOW_START)


@pytest.fixture
def store(clock: Mock) -> InMemoryCounterStore:
    return InMemoryCounterStore(clock=clock)


@pytest.fixture
def limiter(store: InMemoryCounterStore, clock: Mock) -> FixedWindowRateLimiter:
    """limit=10 per 0.2 minute (12 seconds)."""
    return FixedWindowRateLimiter(10, 0.2, "minute", store, clock=clock)
