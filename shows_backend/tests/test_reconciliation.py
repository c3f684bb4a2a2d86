from datetime import datetime, timezone
from typing import Iterable, List, Optional

from src.api.models import Show
from src.api.reconciliation import validate_shows
from src.api.repositories import ShowStore

STAMP = datetime(2025, 11, 27, 17, 0, tzinfo=timezone.utc)


class RecordingStore(ShowStore):
    """ShowStore double that keeps shows in a list and records batch saves."""

    def __init__(self, shows: List[Show]) -> None:
        self.shows = shows
        self.saved_batches: List[List[Show]] = []

    def list_all(self) -> List[Show]:
        return list(self.shows)

    def find_by_id(self, show_id: int) -> Optional[Show]:
        return next((s for s in self.shows if s.id == show_id), None)

    def insert(self, show: Show) -> Show:
        raise NotImplementedError

    def update(self, show: Show) -> Show:
        raise NotImplementedError

    def delete(self, show: Show) -> None:
        raise NotImplementedError

    def save(self, shows: Iterable[Show]) -> None:
        self.saved_batches.append(list(shows))


def make_show(show_id, release_year, is_old=False, last_validated=None) -> Show:
    return Show(
        id=show_id,
        title=f"Show {show_id}",
        release_year=release_year,
        number_of_seasons=1,
        is_old=is_old,
        last_validated=last_validated,
    )


def test_old_unvalidated_show_is_flagged_and_stamped():
    show = make_show(1, 1999)
    store = RecordingStore([show])

    outcome = validate_shows(store, now=STAMP)

    assert outcome.updated_count == 1
    assert outcome.updated_ids == [1]
    assert show.is_old is True
    assert show.last_validated == STAMP
    assert store.saved_batches == [[show]]


def test_cutoff_year_is_exclusive():
    boundary = make_show(1, 2005)
    before = make_show(2, 2004)
    validate_shows(RecordingStore([boundary, before]), now=STAMP)
    assert boundary.is_old is False
    assert before.is_old is True


def test_already_consistent_validated_rows_are_untouched():
    earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
    shows = [make_show(1, 1999, True, earlier), make_show(2, 2010, False, earlier)]
    store = RecordingStore(shows)

    outcome = validate_shows(store, now=STAMP)

    assert outcome.updated_count == 0
    assert store.saved_batches == []
    assert all(s.last_validated == earlier for s in shows)


def test_never_validated_rows_are_touched_even_when_correct():
    show = make_show(1, 2010, False, None)
    outcome = validate_shows(RecordingStore([show]), now=STAMP)
    assert outcome.updated_count == 1
    assert show.last_validated == STAMP


def test_stale_flag_is_corrected():
    earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
    show = make_show(1, 2010, True, earlier)
    validate_shows(RecordingStore([show]), now=STAMP)
    assert show.is_old is False
    assert show.last_validated == STAMP


def test_changed_rows_are_saved_in_one_batch():
    earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
    shows = [make_show(1, 1990), make_show(2, 2020, False, earlier), make_show(3, 1980)]
    store = RecordingStore(shows)

    outcome = validate_shows(store, now=STAMP)

    assert outcome.updated_count == 2
    assert len(store.saved_batches) == 1
    assert [s.id for s in store.saved_batches[0]] == [1, 3]


def test_second_pass_is_a_no_op():
    store = RecordingStore([make_show(1, 1999), make_show(2, 2015)])
    assert validate_shows(store, now=STAMP).updated_count == 2
    assert validate_shows(store).updated_count == 0
    assert len(store.saved_batches) == 1


def test_defaults_to_current_utc_time():
    show = make_show(1, 1999)
    validate_shows(RecordingStore([show]))
    assert show.last_validated is not None
    assert show.last_validated.tzinfo is not None
