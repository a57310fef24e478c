"""
Survey catalog data model.

Questions and option sets are supplied wholesale by the catalog and are
never mutated by the engine. The engine only checks cardinality: a catalog
must carry at least one question, one priority area and one action area.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from survey_engine.lib.exceptions import ValidationError

ResponseValue = int | float | str
ResponseMap = dict[str, ResponseValue]


class ResponseKind(StrEnum):
    """How a question is answered."""

    RATING = "rating"                    # 1-9 agreement scale
    MULTIPLE_CHOICE = "multiple-choice"
    TEXT = "text"
    YES_NO = "yes-no"


@dataclass(frozen=True)
class SurveyQuestion:
    """A single catalog question."""

    id: str
    prompt: str
    response_kind: ResponseKind = ResponseKind.RATING
    required: bool = True
    category: str | None = None
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class SurveyCatalog:
    """
    Ordered question list plus the two Part B option sets.

    Attributes:
        survey_id: Survey identifier
        title: Display title
        questions: Part A questions in presentation order
        priority_areas: Part B1 labels (ranked, choose up to 3)
        action_areas: Part B2 labels (unordered, choose up to 4)
    """

    survey_id: str
    title: str
    questions: tuple[SurveyQuestion, ...]
    priority_areas: tuple[str, ...]
    action_areas: tuple[str, ...]
    _question_ids: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.questions:
            raise ValidationError("Survey catalog must contain at least one question")
        if not self.priority_areas:
            raise ValidationError("Survey catalog must contain at least one priority area")
        if not self.action_areas:
            raise ValidationError("Survey catalog must contain at least one action area")
        object.__setattr__(self, "_question_ids", frozenset(q.id for q in self.questions))

    def has_question(self, question_id: str) -> bool:
        return question_id in self._question_ids

    @property
    def total_questions(self) -> int:
        return len(self.questions)


__all__ = [
    "ResponseKind",
    "ResponseMap",
    "ResponseValue",
    "SurveyCatalog",
    "SurveyQuestion",
]
