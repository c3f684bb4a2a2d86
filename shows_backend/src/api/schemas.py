from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .models import Show


# ReleaseYear and NumberOfSeasons are stored as 32-bit signed integers
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def _fold_key(key: Any) -> str:
    return str(key).replace("_", "").lower()


class _ShowInput(BaseModel):
    """
    Base for request bodies.

    JSON keys are matched case-insensitively, so 'Title', 'title' and 'TITLE'
    all populate the same field. Unknown keys, including 'Id', 'IsOld' and
    'LastValidated', are ignored. Values must already have the right JSON type.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        strict=True,
    )

    @model_validator(mode="before")
    @classmethod
    def fold_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup = {_fold_key(name): name for name in cls.model_fields}
        folded: Dict[str, Any] = {}
        for key, value in data.items():
            name = lookup.get(_fold_key(key))
            if name is not None:
                folded[name] = value
        return folded


# PUBLIC_INTERFACE
class ShowCreate(_ShowInput):
    """
    Schema for creating a Show. Title presence is checked by the handler so it
    can answer with its own message.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "The Wire",
                "showRunner": "David Simon",
                "genre": "Crime",
                "releaseYear": 2002,
                "numberOfSeasons": 5,
                "distributor": "HBO",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Show title; required and non-blank")
    show_runner: Optional[str] = Field(default=None, description="Show runner")
    genre: Optional[str] = Field(default=None, description="Genre")
    release_year: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX, description="Year of first release")
    number_of_seasons: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX, description="Number of seasons")
    distributor: Optional[str] = Field(default=None, description="Distributor or network")

    def to_entity(self) -> Show:
        return Show(
            title=self.title,
            show_runner=self.show_runner,
            genre=self.genre,
            release_year=self.release_year,
            number_of_seasons=self.number_of_seasons,
            distributor=self.distributor,
            is_old=False,
            last_validated=None,
        )


# PUBLIC_INTERFACE
class ShowUpdate(_ShowInput):
    """
    Schema for a partial update. Every field is optional; None means absent.

    On top of that, empty strings and zero integers also count as absent, so an
    update can never clear a string field or reset ReleaseYear/NumberOfSeasons
    to zero. A blank title is absent too, which keeps persisted titles non-blank.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "The Wire (Remastered)", "numberOfSeasons": 5}
        }
    )

    title: Optional[str] = None
    show_runner: Optional[str] = None
    genre: Optional[str] = None
    release_year: Optional[int] = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    number_of_seasons: Optional[int] = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    distributor: Optional[str] = None

    def present_fields(self) -> Dict[str, Any]:
        """Return the fields that overwrite the stored show under the merge policy."""
        present: Dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, str):
                if value == "" or (name == "title" and not value.strip()):
                    continue
            elif value == 0:
                continue
            present[name] = value
        return present

    def apply_to(self, show: Show) -> Show:
        for name, value in self.present_fields().items():
            setattr(show, name, value)
        return show


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; stored values are always UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# PUBLIC_INTERFACE
class ShowOut(BaseModel):
    """
    Schema returned by the API for a Show.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "The Wire",
                "showRunner": "David Simon",
                "genre": "Crime",
                "releaseYear": 2002,
                "numberOfSeasons": 5,
                "distributor": "HBO",
                "isOld": True,
                "lastValidated": "2025-11-27T17:01:06.123456+00:00",
            }
        },
    )

    id: int = Field(..., description="Server-assigned identifier")
    title: str
    show_runner: Optional[str] = None
    genre: Optional[str] = None
    release_year: int
    number_of_seasons: int
    distributor: Optional[str] = None
    is_old: bool = Field(..., description="ReleaseYear < 2005 as of the last validation pass")
    last_validated: Optional[datetime] = Field(
        default=None, description="When the validation pass last touched this show"
    )

    @classmethod
    def from_entity(cls, show: Show) -> "ShowOut":
        data = {name: getattr(show, name) for name in cls.model_fields}
        data["last_validated"] = _as_utc(show.last_validated)
        return cls.model_validate(data)


# PUBLIC_INTERFACE
class ValidationResult(BaseModel):
    """Summary returned by the validation pass."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    updated_count: int = Field(..., description="Number of shows written by this pass")
    timestamp: datetime = Field(..., description="When the response was built")
