"""
Structured logging for the survey engine.

Both `logging.getLogger(__name__)` (services, API) and
`structlog.get_logger(__name__)` (the wizard) end up in one stdlib handler
whose formatter is structlog's ProcessorFormatter. Output is JSON unless
SURVEY_DEV_MODE=1, in which case it is a colored console layout.

Respondent ids never reach the log in full: any event field named
"respondent" or "respondent_id" is replaced by "rid-" and a 12-char SHA-256
prefix of the id. Already hashed values pass through unchanged.

Usage:
    from survey_engine.lib.logging import setup_logging

    setup_logging()  # once, before the app is built
"""

import hashlib
import logging
import os
import re
import sys
from typing import Any

import structlog

REDACTED_FIELDS = ("respondent", "respondent_id")
REDACTED_PREFIX = "rid-"
REDACTED_HASH_LENGTH = 12

_REDACTED_PATTERN = re.compile(rf"{REDACTED_PREFIX}[0-9a-f]{{{REDACTED_HASH_LENGTH}}}")

_QUIET_LOGGERS = ("httpx", "httpcore", "redis", "sqlalchemy.engine", "uvicorn.access")


def redact_respondent(respondent_id: str) -> str:
    """Return a SHA-256 prefix for log-safe respondent identification."""
    if _REDACTED_PATTERN.fullmatch(respondent_id):
        return respondent_id
    digest = hashlib.sha256(respondent_id.encode()).hexdigest()[:REDACTED_HASH_LENGTH]
    return f"{REDACTED_PREFIX}{digest}"


def _redact_event_fields(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for name in REDACTED_FIELDS:
        value = event_dict.get(name)
        if isinstance(value, str):
            event_dict[name] = redact_respondent(value)
    return event_dict


def _resolve_level(raw: str | None) -> int:
    level = logging.getLevelName((raw or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging() -> None:
    """
    Route structlog and stdlib logging through one formatter.

    Reads SURVEY_DEV_MODE (console vs JSON) and LOG_LEVEL. Safe to call more
    than once; the root logger always ends up with a single handler.
    """
    dev_mode = os.environ.get("SURVEY_DEV_MODE") == "1"

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact_event_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer() if dev_mode else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(os.environ.get("LOG_LEVEL")))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_session_context(survey_id: str, respondent_id: str) -> None:
    """Attach survey and respondent ids to every log line of the current task."""
    structlog.contextvars.bind_contextvars(
        survey_id=survey_id,
        respondent=redact_respondent(respondent_id),
    )


def clear_session_context() -> None:
    structlog.contextvars.unbind_contextvars("survey_id", "respondent")
