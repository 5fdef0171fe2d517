from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TASKS_DB_PATH: path to the sqlite database file. Default './data/tasks.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - CORS_ALLOW_HEADERS: comma-separated list of allowed headers
    - LOG_LEVEL: root log level name (default: info)
    - LOG_FILE: optional path of an application log file
    - ACCESS_LOG_FILE: optional path of a per-request access log file
    """

    db_path: str
    cors_allow_origins: List[str]
    cors_allow_headers: List[str]
    log_level: str = "info"
    log_file: Optional[str] = None
    access_log_file: Optional[str] = None


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_list(raw: str) -> List[str]:
    """
    Parse a comma-separated env value. Supports:
    - '*' to allow everything
    - Comma-separated list of entries
    """
    value = raw.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    log_level = _get_env("LOG_LEVEL", "info").strip().lower()
    if log_level not in {"debug", "info", "warning", "error", "critical"}:
        log_level = "info"

    return Settings(
        db_path=_get_env("TASKS_DB_PATH", "./data/tasks.db").strip(),
        cors_allow_origins=_parse_list(_get_env("CORS_ALLOW_ORIGINS", "*")),
        cors_allow_headers=_parse_list(_get_env("CORS_ALLOW_HEADERS", "Origin, Content-Type, Accept")),
        log_level=log_level,
        log_file=os.getenv("LOG_FILE") or None,
        access_log_file=os.getenv("ACCESS_LOG_FILE") or None,
    )
