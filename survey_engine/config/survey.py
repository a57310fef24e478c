"""
Survey Engine Configuration.

Fixed survey constants plus environment-driven runtime settings.

Part A (rating questionnaire) is paginated three questions at a time and spans
0-70% of the progress bar. Part B (priority and action areas) spans 70-85%
while in progress; a submitted survey is 100%.

Environment variables:
    SURVEY_PAGE_SIZE: Questions per Part A page (default 3)
    SURVEY_RETENTION_DAYS: Days a saved snapshot stays resumable (default 7)
    SURVEY_STORE_BACKEND: "memory" | "redis" | "sql" (default "memory")
    SURVEY_DATABASE_URL: Async SQLAlchemy URL for the "sql" backend
    SURVEY_MAX_SESSIONS: Active sessions hosted per process (default 10000)
    SURVEY_ENVIRONMENT: "development" | "production"
    SURVEY_CORS_ORIGINS: Comma-separated list of allowed origins
    REDIS_URL: Redis connection URL for the "redis" backend
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Literal

from survey_engine.lib.exceptions import ConfigurationError

# Part A pagination
PAGE_SIZE = 3

# Part B selection limits
PRIORITY_LIMIT = 3
ACTION_LIMIT = 4

# Progress bar weights (percent)
PART_A_WEIGHT = 70
PART_B_WEIGHT = 15

# Snapshots older than this are void
RETENTION_DAYS = 7
RETENTION_WINDOW = timedelta(days=RETENTION_DAYS)

# Identity used when the respondent is not known
ANONYMOUS_RESPONDENT = "anonymous"
ANONYMOUS_NAME = "Anonymous User"

# Active wizards hosted by one API process
MAX_HOSTED_SESSIONS = 10000

StoreBackend = Literal["memory", "redis", "sql"]

VALID_BACKENDS: set[str] = {"memory", "redis", "sql"}


@dataclass(frozen=True)
class SurveySettings:
    """Runtime settings resolved from the environment."""

    page_size: int = PAGE_SIZE
    retention_days: int = RETENTION_DAYS
    max_hosted_sessions: int = MAX_HOSTED_SESSIONS
    store_backend: StoreBackend = "memory"
    database_url: str = "sqlite+aiosqlite:///survey_progress.db"
    redis_url: str = "redis://localhost:6379/0"
    environment: str = "development"
    cors_origins: tuple[str, ...] = ()

    @property
    def retention_window(self) -> timedelta:
        return timedelta(days=self.retention_days)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigurationError(f"{name} must be >= 1, got {value}")
    return value


def load_settings() -> SurveySettings:
    """
    Build SurveySettings from environment variables.

    Returns:
        Frozen settings instance

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    backend = os.environ.get("SURVEY_STORE_BACKEND", "memory").strip().lower()
    if backend not in VALID_BACKENDS:
        raise ConfigurationError(
            f"SURVEY_STORE_BACKEND must be one of {sorted(VALID_BACKENDS)}, got {backend!r}"
        )

    cors_env = os.environ.get("SURVEY_CORS_ORIGINS", "")
    cors_origins = tuple(origin.strip() for origin in cors_env.split(",") if origin.strip())

    return SurveySettings(
        page_size=_int_from_env("SURVEY_PAGE_SIZE", PAGE_SIZE),
        retention_days=_int_from_env("SURVEY_RETENTION_DAYS", RETENTION_DAYS),
        max_hosted_sessions=_int_from_env("SURVEY_MAX_SESSIONS", MAX_HOSTED_SESSIONS),
        store_backend=backend,  # type: ignore[arg-type]
        database_url=os.environ.get("SURVEY_DATABASE_URL", "sqlite+aiosqlite:///survey_progress.db"),
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        environment=os.environ.get("SURVEY_ENVIRONMENT", "development"),
        cors_origins=cors_origins,
    )
