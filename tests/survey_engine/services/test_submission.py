"""
Tests for submission delivery.

Covers:
- Outbound payload layout
- Logging, callback and collecting sinks
"""

import json
import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from survey_engine.lib.logging import redact_respondent
from survey_engine.services.submission import (
    CallbackSubmissionSink,
    CollectingSubmissionSink,
    LoggingSubmissionSink,
    SubmissionSink,
    SurveySubmission,
)


@pytest.fixture
def submission() -> SurveySubmission:
    return SurveySubmission(
        survey_id="ees-2026",
        respondent_id="emp-001",
        respondent_name="Dana Reyes",
        responses={"q1": 7, "q2": 9},
        priorities=("Leadership", "Teamwork"),
        actions=("Training",),
        completed_at=datetime(2026, 3, 2, 9, 42, tzinfo=UTC),
        elapsed_minutes=42,
    )


def test_payload_layout(submission):
    assert submission.to_payload() == {
        "surveyId": "ees-2026",
        "respondentId": "emp-001",
        "respondentName": "Dana Reyes",
        "responses": {"q1": 7, "q2": 9},
        "priorities": ["Leadership", "Teamwork"],
        "actions": ["Training"],
        "completedAt": "2026-03-02T09:42:00+00:00",
        "elapsedMinutes": 42,
    }


def test_anonymous_defaults():
    submission = SurveySubmission(
        survey_id="ees-2026",
        responses={},
        priorities=("Leadership",),
        actions=("Training",),
        completed_at=datetime(2026, 3, 2, tzinfo=UTC),
        elapsed_minutes=0,
    )
    assert submission.respondent_id == "anonymous"
    assert submission.respondent_name == "Anonymous User"


@pytest.mark.parametrize(
    "sink",
    [LoggingSubmissionSink(), CollectingSubmissionSink(), CallbackSubmissionSink(lambda s: None)],
)
def test_sinks_satisfy_protocol(sink):
    assert isinstance(sink, SubmissionSink)


@pytest.mark.asyncio
async def test_logging_sink_logs_payload(submission, caplog):
    with caplog.at_level(logging.INFO, logger="survey_engine.services.submission"):
        await LoggingSubmissionSink().deliver(submission)

    record = next(r for r in caplog.records if r.getMessage() == "Survey completed")
    assert record.survey_id == "ees-2026"
    assert record.respondent == redact_respondent("emp-001")
    assert record.respondent != "emp-001"
    assert json.loads(record.payload)["elapsedMinutes"] == 42


@pytest.mark.asyncio
async def test_callback_sink_sync(submission):
    callback = Mock(return_value=None)
    await CallbackSubmissionSink(callback).deliver(submission)
    callback.assert_called_once_with(submission)


@pytest.mark.asyncio
async def test_callback_sink_async(submission):
    callback = AsyncMock()
    await CallbackSubmissionSink(callback).deliver(submission)
    callback.assert_awaited_once_with(submission)


@pytest.mark.asyncio
async def test_callback_errors_propagate(submission):
    callback = AsyncMock(side_effect=RuntimeError("results service down"))
    with pytest.raises(RuntimeError):
        await CallbackSubmissionSink(callback).deliver(submission)


@pytest.mark.asyncio
async def test_collecting_sink(submission):
    sink = CollectingSubmissionSink()
    await sink.deliver(submission)
    assert sink.submissions == [submission]
