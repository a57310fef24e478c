"""
Survey submission delivery.

On completion the wizard hands exactly one SurveySubmission to a
SubmissionSink. Aggregation of results happens outside the engine; the
engine does not retry or queue delivery.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from survey_engine.config.survey import ANONYMOUS_NAME, ANONYMOUS_RESPONDENT
from survey_engine.lib.logging import redact_respondent
from survey_engine.models.survey import ResponseMap
from survey_engine.services.redis_service import SurveyJSONEncoder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurveySubmission:
    """
    Final payload of a completed survey session.

    Attributes:
        survey_id: Survey identifier
        respondent_id: Respondent identifier ("anonymous" if unknown)
        respondent_name: Display name ("Anonymous User" if unknown)
        responses: Part A answers keyed by question id
        priorities: Part B1 priority areas, highest rank first
        actions: Part B2 action areas
        completed_at: Completion timestamp (UTC)
        elapsed_minutes: Wall-clock minutes since the session was activated
    """

    survey_id: str
    responses: ResponseMap
    priorities: tuple[str, ...]
    actions: tuple[str, ...]
    completed_at: datetime
    elapsed_minutes: int
    respondent_id: str = ANONYMOUS_RESPONDENT
    respondent_name: str = ANONYMOUS_NAME

    def to_payload(self) -> dict[str, Any]:
        """Outbound event body."""
        return {
            "surveyId": self.survey_id,
            "respondentId": self.respondent_id,
            "respondentName": self.respondent_name,
            "responses": dict(self.responses),
            "priorities": list(self.priorities),
            "actions": list(self.actions),
            "completedAt": self.completed_at.isoformat(),
            "elapsedMinutes": self.elapsed_minutes,
        }


@runtime_checkable
class SubmissionSink(Protocol):
    """Receiver of completed survey submissions."""

    async def deliver(self, submission: SurveySubmission) -> None:
        ...


class LoggingSubmissionSink:
    """Logs each submission as a JSON event; the default when no results service is wired."""

    async def deliver(self, submission: SurveySubmission) -> None:
        logger.info(
            "Survey completed",
            extra={
                "survey_id": submission.survey_id,
                "respondent": redact_respondent(submission.respondent_id),
                "elapsed_minutes": submission.elapsed_minutes,
                "payload": json.dumps(submission.to_payload(), cls=SurveyJSONEncoder),
            },
        )


class CallbackSubmissionSink:
    """Forwards submissions to a host callable (sync or async)."""

    def __init__(
        self,
        callback: Callable[[SurveySubmission], Awaitable[None] | None],
    ) -> None:
        self._callback = callback

    async def deliver(self, submission: SurveySubmission) -> None:
        result = self._callback(submission)
        if inspect.isawaitable(result):
            await result


class CollectingSubmissionSink:
    """Keeps submissions in a list. Useful for hosts that batch delivery."""

    def __init__(self) -> None:
        self.submissions: list[SurveySubmission] = []

    async def deliver(self, submission: SurveySubmission) -> None:
        self.submissions.append(submission)


__all__ = [
    "CallbackSubmissionSink",
    "CollectingSubmissionSink",
    "LoggingSubmissionSink",
    "SubmissionSink",
    "SurveySubmission",
]
