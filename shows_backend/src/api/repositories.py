from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from fastapi import Depends
from sqlalchemy import inspect, select
from sqlalchemy.orm import Session
from tenacity import Retrying

from .db import get_session, transient_retry
from .models import Show

logger = logging.getLogger(__name__)

T = TypeVar("T")


# PUBLIC_INTERFACE
class ShowStore(ABC):
    """Abstract persistence contract for the Shows table."""

    @abstractmethod
    def list_all(self) -> List[Show]:
        """Return every show."""

    @abstractmethod
    def find_by_id(self, show_id: int) -> Optional[Show]:
        """Return a show by id, or None if not found."""

    @abstractmethod
    def insert(self, show: Show) -> Show:
        """Insert a new show. Any id already set is discarded; the database assigns it."""

    @abstractmethod
    def update(self, show: Show) -> Show:
        """Persist mutations already applied to a previously fetched show."""

    @abstractmethod
    def delete(self, show: Show) -> None:
        """Physically remove the show's row."""

    @abstractmethod
    def save(self, shows: Iterable[Show]) -> None:
        """Persist many mutated shows in a single commit."""


def _column_state(show: Show) -> Dict[str, object]:
    return {
        attr.key: getattr(show, attr.key)
        for attr in inspect(Show).column_attrs
        if attr.key != "id"
    }


class SqlAlchemyShowStore(ShowStore):
    """
    ShowStore over a SQLAlchemy session.

    Every operation runs under the transient retry policy. A failed attempt
    rolls the session back; writes re-apply the column values captured before
    the first attempt, since a rollback expires pending mutations.
    """

    def __init__(self, session: Session, retrying: Optional[Retrying] = None) -> None:
        self._session = session
        self._retrying = retrying or transient_retry()

    def _run(self, operation: Callable[[], T]) -> T:
        def attempt() -> T:
            try:
                return operation()
            except Exception:
                self._session.rollback()
                raise

        return self._retrying(attempt)

    def _commit(self, shows: List[Show]) -> None:
        snapshots = [(show, _column_state(show)) for show in shows]

        def attempt() -> None:
            for show, state in snapshots:
                for key, value in state.items():
                    setattr(show, key, value)
                self._session.add(show)
            self._session.commit()

        self._run(attempt)

    def list_all(self) -> List[Show]:
        return self._run(
            lambda: list(self._session.execute(select(Show).order_by(Show.id)).scalars().all())
        )

    def find_by_id(self, show_id: int) -> Optional[Show]:
        return self._run(lambda: self._session.get(Show, show_id))

    def insert(self, show: Show) -> Show:
        def attempt() -> Show:
            # a rolled back flush leaves the previous identity on the instance
            show.id = None
            self._session.add(show)
            self._session.commit()
            return show

        created = self._run(attempt)
        logger.debug("Inserted show %s", created.id)
        return created

    def update(self, show: Show) -> Show:
        self._commit([show])
        return show

    def delete(self, show: Show) -> None:
        def attempt() -> None:
            self._session.delete(show)
            self._session.commit()

        self._run(attempt)

    def save(self, shows: Iterable[Show]) -> None:
        batch = list(shows)
        if not batch:
            return
        self._commit(batch)
        logger.debug("Saved %d shows in one batch", len(batch))


# PUBLIC_INTERFACE
def get_store(session: Session = Depends(get_session)) -> ShowStore:
    """Dependency returning a ShowStore bound to the request session."""
    return SqlAlchemyShowStore(session)
