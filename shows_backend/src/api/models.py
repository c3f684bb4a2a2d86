from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Shows released before this year are flagged IsOld by the reconciliation job
OLD_SHOW_CUTOFF_YEAR = 2005


# PUBLIC_INTERFACE
class Show(Base):
    """
    ORM entity for a row of the Shows table.

    Fields:
    - id: server-assigned identity, immutable after creation
    - title: required, never blank once persisted
    - show_runner, genre, distributor: optional free text
    - release_year, number_of_seasons: integers, no range checks
    - is_old: derived from release_year, refreshed only by the reconciliation job
    - last_validated: when the reconciliation job last touched the row
    """

    __tablename__ = "Shows"
    # ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column("Id", Integer, primary_key=True, autoincrement=True)
    title = Column("Title", String, nullable=False)
    show_runner = Column("ShowRunner", String, nullable=True)
    genre = Column("Genre", String, nullable=True)
    release_year = Column("ReleaseYear", Integer, nullable=False, default=0)
    number_of_seasons = Column("NumberOfSeasons", Integer, nullable=False, default=0)
    distributor = Column("Distributor", String, nullable=True)
    is_old = Column("IsOld", Boolean, nullable=False, default=False)
    last_validated = Column("LastValidated", DateTime(timezone=True), nullable=True)

    def compute_is_old(self) -> bool:
        return (self.release_year or 0) < OLD_SHOW_CUTOFF_YEAR

    def __repr__(self):
        return f"<Show {self.id} {self.title!r} ({self.release_year})>"
