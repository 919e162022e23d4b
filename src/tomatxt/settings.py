from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'sqlite' (default) or 'memory'
    - SQLITE_DB_PATH: path to sqlite db file. Default '~/.tomatxt/tomatxt.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: loguru level name (default: INFO)
    - LOG_TO_FILE: 'true' to also write rotating JSON log files (default: false)
    - LOG_DIR: directory for log files (default: 'logs')
    - DEFAULT_WORK_MINUTES / DEFAULT_BREAK_MINUTES: initial timer session (25 / 5)
    - PREVIEW_LENGTH: characters kept in a note's content preview (default: 100)
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    log_level: str
    log_to_file: bool
    log_dir: str
    default_work_minutes: int
    default_break_minutes: int
    preview_length: int


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


def _parse_positive_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


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
    backend = _get_env("PERSISTENCE_BACKEND", "sqlite").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    sqlite_path = os.path.expanduser(_get_env("SQLITE_DB_PATH", "~/.tomatxt/tomatxt.db").strip())

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        log_to_file=_parse_bool(_get_env("LOG_TO_FILE", "false"), False),
        log_dir=_get_env("LOG_DIR", "logs").strip(),
        default_work_minutes=_parse_positive_int(_get_env("DEFAULT_WORK_MINUTES", "25"), 25),
        default_break_minutes=_parse_positive_int(_get_env("DEFAULT_BREAK_MINUTES", "5"), 5),
        preview_length=_parse_positive_int(_get_env("PREVIEW_LENGTH", "100"), 100),
    )
