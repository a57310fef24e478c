"""
Advancement gates.

Two pure predicates decide whether the wizard may move forward:

- Part A: every required question on the visible page has an answer. Only
  the current page is checked; earlier pages were gated when they were left.
- Part B: at least one priority area and at least one action area are
  selected. Upper bounds are enforced when selecting, not here.

A blocked gate is a value, not an exception: callers surface the reason to
the respondent and leave state unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from survey_engine.lib.errors import PAGE_INCOMPLETE, SELECTION_INCOMPLETE, get_error_message
from survey_engine.models.survey import ResponseValue, SurveyQuestion


@dataclass(frozen=True)
class GateResult:
    """
    Outcome of an advancement check.

    Attributes:
        allowed: Whether the transition may proceed
        code: Block reason code (None when allowed)
        reason: Human-readable block reason (None when allowed)
        missing: Ids of unanswered required questions (Part A only)
    """

    allowed: bool
    code: str | None = None
    reason: str | None = None
    missing: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def ok(cls) -> GateResult:
        return cls(allowed=True)

    @classmethod
    def blocked(cls, code: str, missing: tuple[str, ...] = ()) -> GateResult:
        return cls(allowed=False, code=code, reason=get_error_message(code), missing=missing)


def can_advance_from_part_a(
    page_questions: Sequence[SurveyQuestion],
    responses: Mapping[str, ResponseValue],
) -> GateResult:
    """Check that every required question on the current page is answered."""
    missing = tuple(q.id for q in page_questions if q.required and q.id not in responses)
    if missing:
        return GateResult.blocked(PAGE_INCOMPLETE, missing)
    return GateResult.ok()


def can_advance_from_part_b(priorities: Sequence[str], actions: Sequence[str]) -> GateResult:
    """Check that at least one priority and one action area are selected."""
    if len(priorities) >= 1 and len(actions) >= 1:
        return GateResult.ok()
    return GateResult.blocked(SELECTION_INCOMPLETE)


__all__ = ["GateResult", "can_advance_from_part_a", "can_advance_from_part_b"]
