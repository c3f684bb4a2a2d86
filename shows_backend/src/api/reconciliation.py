"""
IsOld reconciliation pass.

Reads every show, recomputes IsOld from ReleaseYear and writes back the rows
that changed in one batch. The read and the batch write are not isolated from
concurrent single-row updates: a row edited between the scan and the save is
overwritten with the values seen during the scan (last write wins).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .repositories import ShowStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationOutcome:
    updated_count: int
    updated_ids: List[int] = field(default_factory=list)


# PUBLIC_INTERFACE
def validate_shows(store: ShowStore, now: Optional[datetime] = None) -> ReconciliationOutcome:
    """
    Refresh IsOld and LastValidated across the Shows table.

    A row is touched when its stored IsOld disagrees with ReleaseYear or when
    it has never been validated. Touched rows are stamped with `now` and saved
    together; nothing is written when no row is touched.
    """
    stamp = now or datetime.now(timezone.utc)
    changed = []
    for show in store.list_all():
        is_old = show.compute_is_old()
        if show.is_old != is_old or show.last_validated is None:
            show.is_old = is_old
            show.last_validated = stamp
            changed.append(show)

    if changed:
        store.save(changed)
    logger.info("Validation pass updated %d show(s)", len(changed))
    return ReconciliationOutcome(updated_count=len(changed), updated_ids=[s.id for s in changed])
