from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from rate_gate.core.rate_limit import enforce_rate_limit
from rate_gate.services.people_service import find_person, parse_person_id

router = APIRouter(tags=["People"], dependencies=[Depends(enforce_rate_limit)])


@router.get("/person/{person_id}")
async def get_person(person_id: str) -> dict[str, Any]:
    """Look up a person by position in the example dataset.

    Raises:
        ValidationAppError: 400 if the id is not a number.
        HTTPException: 404 if no person has that id.
    """
    person = find_person(parse_person_id(person_id))
    if person is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return person
