"""
Tests for the built-in engagement catalog.

Covers:
- 50 required rating questions with unique ids
- 11 priority areas, 16 action areas
- Rating labels on the 9-point scale
"""

import pytest

from survey_engine.core.pagination import page_count
from survey_engine.models.survey import ResponseKind
from survey_engine.services.catalog import (
    ACTION_AREAS,
    PRIORITY_AREAS,
    RATING_SCALE,
    engagement_catalog,
    rating_label,
)


def test_question_set(engagement):
    assert engagement.survey_id == "ees-2026"
    assert engagement.total_questions == 50
    assert [q.id for q in engagement.questions] == [f"q{i}" for i in range(1, 51)]
    assert all(q.required and q.response_kind == ResponseKind.RATING for q in engagement.questions)
    assert page_count(engagement.total_questions) == 17


def test_categories_are_contiguous(engagement):
    categories = [q.category for q in engagement.questions]
    seen: list[str] = []
    for category in categories:
        if not seen or seen[-1] != category:
            assert category not in seen
            seen.append(category)
    assert len(seen) == 11


def test_part_b_option_sets():
    assert len(PRIORITY_AREAS) == 11
    assert len(ACTION_AREAS) == 16
    assert len(set(PRIORITY_AREAS)) == len(PRIORITY_AREAS)
    assert len(set(ACTION_AREAS)) == len(ACTION_AREAS)


def test_survey_id_is_applied():
    assert engagement_catalog("ees-2027").survey_id == "ees-2027"


def test_rating_labels():
    assert list(RATING_SCALE) == list(range(1, 10))
    assert rating_label(1) == "Strongly Disagree"
    assert rating_label(9) == "Strongly Agree"


@pytest.mark.parametrize("value", [0, 10, -1])
def test_rating_label_out_of_range(value):
    with pytest.raises(ValueError):
        rating_label(value)
