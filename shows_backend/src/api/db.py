"""SQLAlchemy engine, request sessions and the transient-failure retry policy."""
from __future__ import annotations

import logging
import os
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .models import Base
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Errors a connector can expect to succeed on a later attempt
TRANSIENT_DB_EXCEPTIONS = (
    OperationalError,
    DisconnectionError,
    InterfaceError,
    PoolTimeoutError,
)


def create_db_engine(url: str) -> Engine:
    """
    Build an engine for the configured connection string.

    In-memory SQLite shares a single connection across threads so every
    session sees the same database.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        if parsed.database in (None, "", ":memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        os.makedirs(os.path.dirname(parsed.database) or ".", exist_ok=True)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, pool_recycle=3600)


_settings = get_settings()

engine = create_db_engine(_settings.sql_connection_string)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db() -> None:
    """Create the Shows table if it does not exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized (%s)", engine.dialect.name)


# PUBLIC_INTERFACE
def transient_retry(settings: Optional[Settings] = None) -> Retrying:
    """
    Return a retry policy for transient database failures.

    Exponential backoff capped at DB_RETRY_MAX_WAIT, up to DB_RETRY_MAX_ATTEMPTS
    attempts; the last error is re-raised unchanged.
    """
    s = settings or _settings
    return Retrying(
        retry=retry_if_exception_type(TRANSIENT_DB_EXCEPTIONS),
        stop=stop_after_attempt(s.db_retry_max_attempts),
        wait=wait_exponential(multiplier=0.5, max=s.db_retry_max_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def get_session() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
