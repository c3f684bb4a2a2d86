"""
Custom telemetry events.

Events travel through the standard logging pipeline on this module's logger so
whatever ships application logs (console, Application Insights exporter, ...)
receives them as structured records.
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

VALIDATE_UNAUTHORIZED_EVENT = "ValidateShowsUnauthorized"
SHOWS_VALIDATED_EVENT = "ShowsValidated"


# PUBLIC_INTERFACE
def track_event(name: str, properties: Optional[Mapping[str, object]] = None) -> None:
    """
    Record a named custom event.

    Property values are stringified, matching how custom dimensions are stored.
    """
    props = {k: str(v) for k, v in (properties or {}).items()}
    logger.info(
        "event=%s %s",
        name,
        " ".join(f"{k}={v}" for k, v in props.items()),
        extra={"event_name": name, "event_properties": props},
    )
