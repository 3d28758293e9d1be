"""Lookup service for the example person dataset.

The dataset is a JSON document of the form ``{"person": [{...}, ...]}``;
records are addressed by their zero-based position in the list.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from rate_gate.core.config import settings
from rate_gate.core.errors import ValidationAppError

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "people.json"


@lru_cache(maxsize=4)
def load_people(path: str) -> tuple[dict[str, Any], ...]:
    """Read and cache the person records stored at ``path``."""

    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)

    records = payload.get("person") if isinstance(payload, dict) else None
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected an object with a 'person' list")

    logger.info("people.loaded", extra={"records": len(records)})
    return tuple(records)


def parse_person_id(raw_id: str) -> int:
    """Convert a path segment into a record index.

    Raises:
        ValidationAppError: If the segment is not a non-negative integer.
    """

    try:
        index = int(raw_id)
    except ValueError:
        index = -1
    if index < 0:
        raise ValidationAppError(
            code="invalid_person_id",
            message="Invalid ID. Must be a number.",
        )
    return index


def find_person(index: int) -> dict[str, Any] | None:
    """Return the record at ``index``, or None when it does not exist."""

    people = load_people(settings.app.people_data_path or str(DEFAULT_DATA_PATH))
    if index >= len(people):
        return None
    return people[index]
