"""Tests for sensitive data filtering and JSON formatting in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from rate_gate.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    hash_client_id,
    set_request_id,
)


@pytest.fixture
def capture() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_rate_gate_logging")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_redacts_store_credentials(capture) -> None:
    logger, stream = capture

    logger.info(
        "store_event",
        extra={
            "redis_url": "redis://:hunter2@cache:6379/0",
            "x-admin-key": "admin-secret",
            "store_backend": "redis",
        },
    )

    output = stream.getvalue()
    assert "hunter2" not in output
    assert "admin-secret" not in output
    assert "[REDACTED]" in output
    assert json.loads(output)["store_backend"] == "redis"


def test_redacts_nested_fields(capture) -> None:
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "X-Forwarded-For": "198.51.100.1",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()
    assert "198.51.100.1" not in output
    assert "pytest" in output


def test_safe_fields_pass_through(capture) -> None:
    logger, stream = capture

    logger.info(
        "rate_limit.exceeded",
        extra={
            "client_hash": hash_client_id("198.51.100.1"),
            "limit": 10,
            "retry_after_s": 12,
        },
    )

    record = json.loads(stream.getvalue())
    assert record["message"] == "rate_limit.exceeded"
    assert record["level"] == "info"
    assert record["limit"] == 10
    assert record["retry_after_s"] == 12
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context(capture) -> None:
    logger, stream = capture

    set_request_id("req-abc-123")
    try:
        logger.info("with_request")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-abc-123"


def test_client_hash_is_stable_and_opaque() -> None:
    digest = hash_client_id("198.51.100.1")

    assert digest == hash_client_id("198.51.100.1")
    assert digest != hash_client_id("198.51.100.2")
    assert len(digest) == 16
