"""Tests for logging setup."""

import hashlib
import logging

import pytest
import structlog

from survey_engine.lib.logging import (
    _redact_event_fields,
    _resolve_level,
    bind_session_context,
    clear_session_context,
    redact_respondent,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def _hashed(respondent_id: str) -> str:
    return "rid-" + hashlib.sha256(respondent_id.encode()).hexdigest()[:12]


def test_redact_respondent_hashes_id():
    redacted = redact_respondent("employee-00042")

    assert redacted == _hashed("employee-00042")
    assert "employee" not in redacted


def test_short_ids_are_not_logged_verbatim():
    redacted = redact_respondent("emp-001")

    assert "emp-001" not in redacted
    assert redacted == _hashed("emp-001")


def test_redaction_is_idempotent():
    once = redact_respondent("contractor-7")
    assert redact_respondent(once) == once


def test_redaction_processor_hashes_ids():
    event = _redact_event_fields(None, "info", {
        "event": "survey_submitted",
        "respondent_id": "employee-00042",
        "respondent": "contractor-7",
        "survey_id": "engagement-2026",
    })

    assert event["respondent_id"] == _hashed("employee-00042")
    assert event["respondent"] == _hashed("contractor-7")
    assert event["survey_id"] == "engagement-2026"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, logging.INFO), ("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("loud", logging.INFO)],
)
def test_resolve_level(raw, expected):
    assert _resolve_level(raw) == expected


def test_setup_installs_single_handler(monkeypatch, restore_root_logger):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    setup_logging()
    setup_logging()

    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_session_context_binding():
    bind_session_context("ees-2026", "employee-00042")
    try:
        context = structlog.contextvars.get_contextvars()
        assert context == {"survey_id": "ees-2026", "respondent": _hashed("employee-00042")}
    finally:
        clear_session_context()

    assert structlog.contextvars.get_contextvars() == {}
