"""
Survey Wizard for the engagement survey.

Walks one respondent through the survey, remembers partial progress across
visits and enforces per-section completion rules before advancing.

Flow States:
    1. INTRO    - A fresh saved snapshot exists: resume it or start over
    2. PART_A   - Paginated rating questionnaire (3 questions per page)
    3. PART_B   - Up to 3 ranked priority areas and up to 4 action areas
    4. COMPLETE - Review step; complete() submits and seals the session

Transitions:
    advance():  PART_A page n -> n+1, last page -> PART_B, PART_B -> COMPLETE
                (gated, a blocked call returns a GateResult and changes nothing)
    retreat():  PART_A page n -> n-1 (no-op on page 0), PART_B -> PART_A last
                page, COMPLETE -> PART_B before submission (never gated)
    complete(): PART_B or unsubmitted COMPLETE -> submitted (gated)
    restart():  anything -> PART_A page 0 with empty answers

Every state change inside PART_A or PART_B writes a snapshot once the
session holds any answer or selection. Submission deletes the snapshot.
Calling an operation in the wrong section raises InvalidStateError.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import structlog

from survey_engine.config.survey import (
    ACTION_LIMIT,
    ANONYMOUS_NAME,
    ANONYMOUS_RESPONDENT,
    PAGE_SIZE,
    PRIORITY_LIMIT,
    RETENTION_WINDOW,
)
from survey_engine.core.pagination import paginate
from survey_engine.core.progress import ResumeSummary, progress_percent, summarize_snapshot
from survey_engine.core.selection import ToggleOutcome, toggle_with_outcome
from survey_engine.core.validation import GateResult, can_advance_from_part_a, can_advance_from_part_b
from survey_engine.lib.exceptions import InvalidStateError, ValidationError
from survey_engine.lib.logging import redact_respondent
from survey_engine.models.snapshot import (
    PERSISTABLE_SECTIONS,
    ProgressSnapshot,
    WizardSection,
    session_key,
)
from survey_engine.models.survey import ResponseMap, ResponseValue, SurveyCatalog, SurveyQuestion
from survey_engine.services.progress_store import ProgressStore, is_fresh
from survey_engine.services.submission import LoggingSubmissionSink, SubmissionSink, SurveySubmission

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Session state
# =============================================================================


@dataclass(frozen=True)
class WizardState:
    """All session-scoped data of one survey run."""

    section: WizardSection = WizardSection.PART_A
    page_index: int = 0
    responses: ResponseMap = field(default_factory=dict)
    priorities: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()

    @property
    def has_data(self) -> bool:
        return bool(self.responses or self.priorities or self.actions)

    def to_snapshot(self, saved_at: datetime) -> ProgressSnapshot:
        return ProgressSnapshot(
            section=self.section,
            page_index=self.page_index,
            responses=dict(self.responses),
            priorities=self.priorities,
            actions=self.actions,
            saved_at=saved_at,
        )

    @classmethod
    def from_snapshot(cls, snapshot: ProgressSnapshot, last_page: int) -> WizardState:
        """Restore state, clamping the page to the catalog's current length."""
        return cls(
            section=snapshot.section,
            page_index=min(snapshot.page_index, last_page),
            responses=dict(snapshot.responses),
            priorities=snapshot.priorities,
            actions=snapshot.actions,
        )


@dataclass(frozen=True)
class Activation:
    """Result of activating a wizard."""

    section: WizardSection
    resume_available: bool = False
    summary: ResumeSummary | None = None


# =============================================================================
# Wizard
# =============================================================================


class SurveyWizard:
    """
    Survey-taking state machine for one session.

    One instance exclusively owns one session key; there is no concurrent
    writer, so no locking is done. All operations run to completion before
    the next one is accepted.
    """

    def __init__(
        self,
        catalog: SurveyCatalog,
        store: ProgressStore,
        submission_sink: SubmissionSink | None = None,
        *,
        page_size: int = PAGE_SIZE,
        retention: timedelta = RETENTION_WINDOW,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the wizard.

        Args:
            catalog: Questions and Part B option sets
            store: Durable snapshot store
            submission_sink: Receiver of the final submission (logs it if None)
            page_size: Questions per Part A page
            retention: How long a saved snapshot stays resumable
            clock: Returns the current UTC time (injectable for tests)
        """
        self._catalog = catalog
        self._store = store
        self._sink: SubmissionSink = submission_sink or LoggingSubmissionSink()
        self._retention = retention
        self._clock = clock or _utcnow
        self._pages = paginate(catalog.questions, page_size)

        self._state = WizardState(section=WizardSection.INTRO)
        self._key: str | None = None
        self._survey_id = catalog.survey_id
        self._respondent_id = ANONYMOUS_RESPONDENT
        self._respondent_name = ANONYMOUS_NAME
        self._started_at: datetime | None = None
        self._pending: ProgressSnapshot | None = None
        self._submission: SurveySubmission | None = None

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def section(self) -> WizardSection:
        return self._state.section

    @property
    def page_index(self) -> int:
        return self._state.page_index

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def last_page(self) -> int:
        return len(self._pages) - 1

    @property
    def catalog(self) -> SurveyCatalog:
        return self._catalog

    @property
    def key(self) -> str | None:
        return self._key

    @property
    def is_activated(self) -> bool:
        return self._key is not None

    @property
    def is_submitted(self) -> bool:
        return self._submission is not None

    @property
    def submission(self) -> SurveySubmission | None:
        return self._submission

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def current_page_questions(self) -> tuple[SurveyQuestion, ...]:
        """Questions on the visible page (empty outside Part A)."""
        if self._state.section != WizardSection.PART_A:
            return ()
        return self._pages[self._state.page_index]

    @property
    def progress_percent(self) -> int:
        return progress_percent(
            self._state.section,
            page_index=self._state.page_index,
            page_count=self.page_count,
            priorities_count=len(self._state.priorities),
            actions_count=len(self._state.actions),
        )

    def check_gate(self) -> GateResult:
        """Evaluate the advancement gate for the current section without moving."""
        if self._state.section == WizardSection.PART_A:
            return can_advance_from_part_a(self.current_page_questions, self._state.responses)
        if self._state.section in (WizardSection.PART_B, WizardSection.COMPLETE):
            return can_advance_from_part_b(self._state.priorities, self._state.actions)
        return GateResult.ok()

    # =========================================================================
    # Activation, resume, restart
    # =========================================================================

    async def activate(
        self,
        survey_id: str,
        respondent_id: str | None = None,
        respondent_name: str | None = None,
    ) -> Activation:
        """
        Start the session and look for saved progress.

        A fresh snapshot puts the wizard in INTRO with a resume offer. A stale
        or corrupt snapshot is discarded and the wizard starts at Part A.

        Args:
            survey_id: Survey identifier, must match the catalog
            respondent_id: Respondent identifier (None for anonymous)
            respondent_name: Display name for the submission

        Returns:
            Activation describing the entry section and any resume offer
        """
        if self.is_activated:
            raise InvalidStateError("activate", self._state.section, "wizard is already activated")
        if survey_id != self._catalog.survey_id:
            raise ValidationError(
                f"survey id {survey_id!r} does not match catalog {self._catalog.survey_id!r}"
            )

        self._survey_id = survey_id
        self._respondent_id = respondent_id or ANONYMOUS_RESPONDENT
        self._respondent_name = respondent_name or ANONYMOUS_NAME
        self._key = session_key(survey_id, respondent_id)
        now = self._clock()
        self._started_at = now

        snapshot = await self._store.load(self._key)
        if snapshot is not None and not is_fresh(snapshot, now, self._retention):
            logger.info(
                "survey_progress_expired",
                survey_id=survey_id,
                respondent=redact_respondent(self._respondent_id),
                saved_at=snapshot.saved_at.isoformat(),
            )
            await self._store.delete(self._key)
            snapshot = None

        if snapshot is None:
            self._state = WizardState(section=WizardSection.PART_A)
            logger.info(
                "survey_session_started",
                survey_id=survey_id,
                respondent=redact_respondent(self._respondent_id),
            )
            return Activation(section=WizardSection.PART_A)

        self._pending = snapshot
        self._state = WizardState(section=WizardSection.INTRO)
        summary = summarize_snapshot(snapshot, self.page_count)
        logger.info(
            "survey_resume_offered",
            survey_id=survey_id,
            respondent=redact_respondent(self._respondent_id),
            section=snapshot.section.value,
            answered=summary.answered_count,
        )
        return Activation(section=WizardSection.INTRO, resume_available=True, summary=summary)

    async def resume(self) -> WizardState:
        """Continue from the saved snapshot offered at activation."""
        self._require("resume", WizardSection.INTRO)
        if self._pending is None:
            raise InvalidStateError("resume", self._state.section, "no saved progress to resume")

        self._state = WizardState.from_snapshot(self._pending, self.last_page)
        self._pending = None
        logger.info(
            "survey_session_resumed",
            survey_id=self._survey_id,
            section=self._state.section.value,
            page_index=self._state.page_index,
        )
        return self._state

    async def restart(self) -> WizardState:
        """
        Discard saved progress and start over at Part A, page 0.

        After a submission this begins a brand-new session for the same
        respondent.
        """
        key = self._require_key("restart")
        await self._store.delete(key)
        self._pending = None
        if self._submission is not None:
            self._submission = None
            self._started_at = self._clock()
        self._state = WizardState(section=WizardSection.PART_A)
        logger.info("survey_session_restarted", survey_id=self._survey_id)
        return self._state

    # =========================================================================
    # Part A
    # =========================================================================

    async def record_response(self, question_id: str, value: ResponseValue) -> None:
        """Upsert the answer to a Part A question."""
        self._require("record_response", WizardSection.PART_A)
        if not self._catalog.has_question(question_id):
            raise ValidationError(f"unknown question id {question_id!r}")
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValidationError(f"response for {question_id!r} must be a number or text")

        responses = {**self._state.responses, question_id: value}
        self._state = dataclasses.replace(self._state, responses=responses)
        await self._persist()

    # =========================================================================
    # Part B
    # =========================================================================

    async def toggle_priority(self, label: str) -> ToggleOutcome:
        """Select or deselect a priority area (ranked, at most 3)."""
        self._require("toggle_priority", WizardSection.PART_B)
        if label not in self._catalog.priority_areas:
            raise ValidationError(f"unknown priority area {label!r}")

        priorities, outcome = toggle_with_outcome(
            self._state.priorities, label, PRIORITY_LIMIT
        )
        return await self._apply_selection(outcome, priorities=priorities)

    async def toggle_action(self, label: str) -> ToggleOutcome:
        """Select or deselect an action area (unordered, at most 4)."""
        self._require("toggle_action", WizardSection.PART_B)
        if label not in self._catalog.action_areas:
            raise ValidationError(f"unknown action area {label!r}")

        actions, outcome = toggle_with_outcome(
            self._state.actions, label, ACTION_LIMIT
        )
        return await self._apply_selection(outcome, actions=actions)

    async def _apply_selection(self, outcome: ToggleOutcome, **changes: tuple[str, ...]) -> ToggleOutcome:
        if not outcome.changed:
            logger.debug("survey_selection_limit_reached", survey_id=self._survey_id, **{
                name: len(value) for name, value in changes.items()
            })
            return outcome
        self._state = dataclasses.replace(self._state, **changes)
        await self._persist()
        return outcome

    # =========================================================================
    # Navigation
    # =========================================================================

    async def advance(self) -> GateResult:
        """
        Move forward one page or section if the current gate passes.

        Returns:
            GateResult; when blocked, state is unchanged
        """
        section = self._state.section
        if section not in (WizardSection.PART_A, WizardSection.PART_B):
            raise InvalidStateError("advance", section)

        gate = self.check_gate()
        if not gate:
            logger.info(
                "survey_advance_blocked",
                survey_id=self._survey_id,
                section=section.value,
                page_index=self._state.page_index,
                code=gate.code,
                missing=list(gate.missing),
            )
            return gate

        if section == WizardSection.PART_A:
            if self._state.page_index < self.last_page:
                self._state = dataclasses.replace(self._state, page_index=self._state.page_index + 1)
            else:
                self._state = dataclasses.replace(self._state, section=WizardSection.PART_B)
        else:
            self._state = dataclasses.replace(self._state, section=WizardSection.COMPLETE)

        await self._persist()
        return gate

    async def retreat(self) -> bool:
        """
        Move back one page or section. Never gated.

        Returns:
            True if the position changed, False for the no-op on Part A page 0
        """
        section = self._state.section
        if section == WizardSection.PART_A:
            if self._state.page_index == 0:
                return False
            self._state = dataclasses.replace(self._state, page_index=self._state.page_index - 1)
        elif section == WizardSection.PART_B:
            self._state = dataclasses.replace(
                self._state, section=WizardSection.PART_A, page_index=self.last_page
            )
        elif section == WizardSection.COMPLETE and not self.is_submitted:
            self._state = dataclasses.replace(self._state, section=WizardSection.PART_B)
        else:
            raise InvalidStateError("retreat", section)

        await self._persist()
        return True

    async def complete(self) -> GateResult:
        """
        Submit the survey.

        Delivers one SurveySubmission to the sink, then deletes the snapshot.
        If delivery raises, nothing changes and the error propagates.

        Returns:
            GateResult; when blocked, state is unchanged
        """
        section = self._state.section
        if section not in (WizardSection.PART_B, WizardSection.COMPLETE) or self.is_submitted:
            raise InvalidStateError("complete", section)

        gate = can_advance_from_part_b(self._state.priorities, self._state.actions)
        if not gate:
            logger.info("survey_complete_blocked", survey_id=self._survey_id, code=gate.code)
            return gate

        key = self._require_key("complete")
        now = self._clock()
        submission = SurveySubmission(
            survey_id=self._survey_id,
            respondent_id=self._respondent_id,
            respondent_name=self._respondent_name,
            responses=dict(self._state.responses),
            priorities=self._state.priorities,
            actions=self._state.actions,
            completed_at=now,
            elapsed_minutes=self._elapsed_minutes(now),
        )
        await self._sink.deliver(submission)

        self._submission = submission
        self._state = dataclasses.replace(self._state, section=WizardSection.COMPLETE)
        await self._store.delete(key)
        logger.info(
            "survey_submitted",
            survey_id=self._survey_id,
            respondent=redact_respondent(self._respondent_id),
            answered=len(submission.responses),
            elapsed_minutes=submission.elapsed_minutes,
        )
        return gate

    # =========================================================================
    # Internals
    # =========================================================================

    def _elapsed_minutes(self, now: datetime) -> int:
        if self._started_at is None:
            return 0
        minutes = (now - self._started_at).total_seconds() / 60
        return max(math.floor(minutes + 0.5), 0)

    def _require_key(self, operation: str) -> str:
        if self._key is None:
            raise InvalidStateError(operation, self._state.section, "wizard has not been activated")
        return self._key

    def _require(self, operation: str, section: WizardSection) -> None:
        self._require_key(operation)
        if self._state.section != section:
            raise InvalidStateError(operation, self._state.section)

    async def _persist(self) -> None:
        """Write the current state if it is in a persistable section and holds data."""
        if self._key is None or self._state.section not in PERSISTABLE_SECTIONS:
            return
        if not self._state.has_data:
            return
        await self._store.save(self._key, self._state.to_snapshot(self._clock()))


__all__ = [
    "Activation",
    "SurveyWizard",
    "WizardState",
]
