from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.api.models import Show
from src.api.schemas import ShowCreate, ShowOut, ShowUpdate


def test_create_folds_key_casing():
    payload = ShowCreate.model_validate(
        {"TITLE": "Lost", "releaseYear": 2004, "Number_Of_Seasons": 6, "SHOWRUNNER": "Lindelof"}
    )
    assert payload.title == "Lost"
    assert payload.release_year == 2004
    assert payload.number_of_seasons == 6
    assert payload.show_runner == "Lindelof"


def test_create_rejects_wrong_json_types():
    with pytest.raises(ValidationError):
        ShowCreate.model_validate({"Title": "X", "ReleaseYear": "2004"})
    with pytest.raises(ValidationError):
        ShowCreate.model_validate({"Title": 42})


def test_create_entity_starts_unvalidated():
    entity = ShowCreate.model_validate({"Title": "X", "ReleaseYear": 1990}).to_entity()
    assert entity.id is None
    assert entity.is_old is False
    assert entity.last_validated is None


def test_update_present_fields_merge_policy():
    payload = ShowUpdate.model_validate(
        {
            "Title": "New",
            "Genre": "",
            "ShowRunner": None,
            "ReleaseYear": 0,
            "NumberOfSeasons": 4,
            "Distributor": "AMC",
        }
    )
    assert payload.present_fields() == {"title": "New", "number_of_seasons": 4, "distributor": "AMC"}


def test_update_blank_title_is_absent():
    assert ShowUpdate.model_validate({"Title": "   "}).present_fields() == {}


def test_update_negative_numbers_are_present():
    assert ShowUpdate.model_validate({"ReleaseYear": -1}).present_fields() == {"release_year": -1}


def test_update_apply_to_leaves_absent_fields():
    show = Show(id=1, title="Old", genre="Drama", release_year=2001, number_of_seasons=2)
    ShowUpdate.model_validate({"title": "Newer"}).apply_to(show)
    assert show.title == "Newer"
    assert show.genre == "Drama"
    assert show.release_year == 2001


def test_out_serializes_camel_case():
    show = Show(id=3, title="Dark", release_year=2017, number_of_seasons=3, is_old=False)
    data = ShowOut.from_entity(show).model_dump(by_alias=True)
    assert data["releaseYear"] == 2017
    assert data["numberOfSeasons"] == 3
    assert data["isOld"] is False
    assert data["lastValidated"] is None


def test_out_reports_naive_stamps_as_utc():
    show = Show(
        id=4, title="Lost", release_year=2004, number_of_seasons=6, is_old=True,
        last_validated=datetime(2025, 11, 27, 17, 0, 0),
    )
    out = ShowOut.from_entity(show)
    assert out.last_validated == datetime(2025, 11, 27, 17, 0, 0, tzinfo=timezone.utc)


def test_numbers_are_limited_to_int32():
    with pytest.raises(ValidationError):
        ShowCreate.model_validate({"Title": "X", "ReleaseYear": 2**31})
    with pytest.raises(ValidationError):
        ShowUpdate.model_validate({"NumberOfSeasons": -(2**31) - 1})
    assert ShowUpdate.model_validate({"ReleaseYear": 2**31 - 1}).release_year == 2**31 - 1
