from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from ..auth import get_api_key_dependency
from ..errors import ShowNotFoundError
from ..reconciliation import validate_shows as run_validation
from ..repositories import ShowStore, get_store
from ..schemas import ShowCreate, ShowOut, ShowUpdate, ValidationResult
from ..telemetry import SHOWS_VALIDATED_EVENT, VALIDATE_UNAUTHORIZED_EVENT, track_event
from ..utils import parse_payload, parse_show_id

logger = logging.getLogger(__name__)

TITLE_REQUIRED_MESSAGE = "The 'Title' field is required"
VALIDATION_TRIGGER = "ManualApiCall"

require_api_key = get_api_key_dependency()
require_api_key_tracked = get_api_key_dependency(VALIDATE_UNAUTHORIZED_EVENT)

router = APIRouter(
    prefix="/api/shows",
    tags=["shows"],
)


async def _read_body(request: Request) -> bytes:
    """
    Raw request body; decoding is left to the handler so malformed JSON gets
    the service's own 400 message and runs after the auth and id checks.
    """
    return await request.body()


def _body_schema(model) -> dict:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema(by_alias=True)}},
        }
    }


def _get_or_404(store: ShowStore, show_id: int):
    show = store.find_by_id(show_id)
    if show is None:
        raise ShowNotFoundError(show_id)
    return show


# PUBLIC_INTERFACE
@router.patch(
    "/validate",
    response_model=ValidationResult,
    summary="Validate Shows",
    description=(
        "Recompute IsOld (ReleaseYear < 2005) for every show. Shows whose flag changed or "
        "that were never validated are stamped with LastValidated and saved in one batch."
    ),
    dependencies=[Depends(require_api_key_tracked)],
    responses={
        200: {"description": "Validation pass completed"},
        401: {"description": "Missing or invalid x-api-key"},
    },
)
def validate_shows(store: ShowStore = Depends(get_store)) -> ValidationResult:
    """
    Run the IsOld validation pass across all shows.
    """
    outcome = run_validation(store)
    if outcome.updated_ids:
        logger.info("Validation pass stamped shows %s", outcome.updated_ids)
    track_event(
        SHOWS_VALIDATED_EVENT,
        {"UpdatedCount": outcome.updated_count, "TriggeredBy": VALIDATION_TRIGGER},
    )
    return ValidationResult(updated_count=outcome.updated_count, timestamp=datetime.now(timezone.utc))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[ShowOut],
    summary="List Shows",
    description="Return every show. Results are not paginated.",
    dependencies=[Depends(require_api_key)],
    responses={
        200: {"description": "List retrieved successfully"},
        401: {"description": "Missing or invalid x-api-key"},
    },
)
def list_shows(store: ShowStore = Depends(get_store)) -> List[ShowOut]:
    return [ShowOut.from_entity(s) for s in store.list_all()]


# PUBLIC_INTERFACE
@router.get(
    "/{show_id}",
    response_model=ShowOut,
    summary="Get Show",
    description="Get a single show by ID.",
    dependencies=[Depends(require_api_key)],
    responses={
        200: {"description": "Show found"},
        400: {"description": "ID is not a positive number"},
        401: {"description": "Missing or invalid x-api-key"},
        404: {"description": "Show not found"},
    },
)
def get_show(show_id: str, store: ShowStore = Depends(get_store)) -> ShowOut:
    """
    Retrieve a single show by its ID.
    """
    show = _get_or_404(store, parse_show_id(show_id))
    return ShowOut.from_entity(show)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ShowOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Show",
    description="Create a show. The server assigns the ID; the Location header points at the new resource.",
    dependencies=[Depends(require_api_key)],
    openapi_extra=_body_schema(ShowCreate),
    responses={
        201: {"description": "Show created successfully"},
        400: {"description": "Invalid JSON or missing title"},
        401: {"description": "Missing or invalid x-api-key"},
    },
)
def create_show(
    response: Response,
    body: bytes = Depends(_read_body),
    store: ShowStore = Depends(get_store),
) -> ShowOut:
    """
    Create a new show.
    """
    payload = parse_payload(body, ShowCreate)
    if payload.title is None or not payload.title.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=TITLE_REQUIRED_MESSAGE)

    created = store.insert(payload.to_entity())
    logger.info("Created show %s (%s)", created.id, created.title)
    response.headers["Location"] = f"/api/shows/{created.id}"
    return ShowOut.from_entity(created)


# PUBLIC_INTERFACE
@router.put(
    "/{show_id}",
    response_model=ShowOut,
    summary="Update Show",
    description=(
        "Partially update a show. Only fields that are present overwrite stored values: "
        "null, empty strings and zero numbers are ignored."
    ),
    dependencies=[Depends(require_api_key)],
    openapi_extra=_body_schema(ShowUpdate),
    responses={
        200: {"description": "Show updated"},
        400: {"description": "Invalid ID or JSON"},
        401: {"description": "Missing or invalid x-api-key"},
        404: {"description": "Show not found"},
    },
)
def update_show(
    show_id: str,
    body: bytes = Depends(_read_body),
    store: ShowStore = Depends(get_store),
) -> ShowOut:
    """
    Merge the present fields of the payload into an existing show.
    """
    show = _get_or_404(store, parse_show_id(show_id))
    payload = parse_payload(body, ShowUpdate)

    changed = payload.present_fields()
    payload.apply_to(show)
    updated = store.update(show)
    logger.info("Updated show %s fields=%s", updated.id, sorted(changed))
    return ShowOut.from_entity(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{show_id}",
    response_class=PlainTextResponse,
    summary="Delete Show",
    description="Delete a show by ID.",
    dependencies=[Depends(require_api_key)],
    responses={
        200: {"description": "Show deleted"},
        400: {"description": "ID is not a positive number"},
        401: {"description": "Missing or invalid x-api-key"},
        404: {"description": "Show not found"},
    },
)
def delete_show(show_id: str, store: ShowStore = Depends(get_store)) -> str:
    """
    Delete a show. Returns a confirmation line on success, 404 if not found.
    """
    show = _get_or_404(store, parse_show_id(show_id))
    store.delete(show)
    logger.info("Deleted show %s", show.id)
    return f"Deleted show with id: {show.id}"
