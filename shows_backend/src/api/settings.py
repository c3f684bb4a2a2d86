from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - SqlConnectionString: SQLAlchemy database URL. Default 'sqlite:///./data/shows.db'
    - KeyVaultUrl: Azure Key Vault address holding the 'ApiKey' secret. When unset the
      secret is read from the process environment instead.
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level (default: INFO)
    - DB_RETRY_MAX_ATTEMPTS: attempts for transient database failures (default: 6)
    - DB_RETRY_MAX_WAIT: upper bound in seconds for the backoff between attempts (default: 30)
    - AUTO_INIT_DB: 'true' to create the Shows table on startup (default: true)
    """

    sql_connection_string: str
    key_vault_url: Optional[str]
    cors_allow_origins: List[str]
    log_level: str
    db_retry_max_attempts: int
    db_retry_max_wait: float
    auto_init_db: bool


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    vault_url = os.getenv("KeyVaultUrl")
    return Settings(
        sql_connection_string=_get_env("SqlConnectionString", "sqlite:///./data/shows.db").strip(),
        key_vault_url=vault_url.strip() if vault_url and vault_url.strip() else None,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        db_retry_max_attempts=_parse_int(_get_env("DB_RETRY_MAX_ATTEMPTS", "6"), 6),
        db_retry_max_wait=_parse_float(_get_env("DB_RETRY_MAX_WAIT", "30"), 30.0),
        auto_init_db=_parse_bool(_get_env("AUTO_INIT_DB", "true"), True),
    )
