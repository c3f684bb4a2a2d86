from __future__ import annotations

import json
from typing import Any, Dict, Type, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel, ValidationError

INVALID_ID_MESSAGE = "The show ID must be a positive number"
INVALID_JSON_MESSAGE = "Invalid JSON format"

# ids are 32-bit signed integers
MAX_SHOW_ID = 2**31 - 1

M = TypeVar("M", bound=BaseModel)


# PUBLIC_INTERFACE
def parse_show_id(raw: str) -> int:
    """
    Parse a path id into a positive integer.

    Raises:
        HTTPException(400) when the value is not a positive 32-bit integer.
    """
    value = raw.strip()
    if not value.isdigit() or not value.isascii():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_ID_MESSAGE)
    show_id = int(value)
    if show_id <= 0 or show_id > MAX_SHOW_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_ID_MESSAGE)
    return show_id


# PUBLIC_INTERFACE
def parse_json_object(body: bytes) -> Dict[str, Any]:
    """
    Decode a request body that must be a JSON object.

    Raises:
        HTTPException(400, "Invalid JSON format") for malformed JSON or any
        other top-level JSON value.
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_JSON_MESSAGE) from e
    if not isinstance(data, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_JSON_MESSAGE)
    return data


# PUBLIC_INTERFACE
def parse_payload(body: bytes, model: Type[M]) -> M:
    """Decode body into model; wrong JSON types count as malformed input."""
    data = parse_json_object(body)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_JSON_MESSAGE) from e
