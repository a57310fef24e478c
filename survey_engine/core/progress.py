"""
Completion percentage.

Part A spans 0-70% and is driven by the page position, not by the number of
answered questions, so the bar moves only when the respondent pages forward.
Part B spans 70-85% while selections are being made (3 priorities + 4 action
areas = 7 picks). A submitted survey is 100%.

Halves round up, so 0.5 -> 1 and 42.5 -> 43.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from survey_engine.config.survey import ACTION_LIMIT, PART_A_WEIGHT, PART_B_WEIGHT, PRIORITY_LIMIT
from survey_engine.models.snapshot import ProgressSnapshot, WizardSection

PART_B_PICKS = PRIORITY_LIMIT + ACTION_LIMIT


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def progress_percent(
    section: WizardSection,
    page_index: int = 0,
    page_count: int = 1,
    priorities_count: int = 0,
    actions_count: int = 0,
) -> int:
    """
    Map wizard state to a 0-100 completion percentage.

    Args:
        section: Current wizard section
        page_index: Zero-based Part A page
        page_count: Total Part A pages
        priorities_count: Selected priority areas
        actions_count: Selected action areas

    Returns:
        Integer percentage
    """
    if section == WizardSection.PART_A:
        if page_count < 1:
            return 0
        return _round_half_up(((page_index + 1) / page_count) * PART_A_WEIGHT)
    if section == WizardSection.PART_B:
        fraction = min((priorities_count + actions_count) / PART_B_PICKS, 1)
        return PART_A_WEIGHT + _round_half_up(fraction * PART_B_WEIGHT)
    if section == WizardSection.COMPLETE:
        return 100
    return 0


@dataclass(frozen=True)
class ResumeSummary:
    """What a saved session holds, shown when offering to resume it."""

    section: WizardSection
    answered_count: int
    priorities_count: int
    actions_count: int
    percent: int
    saved_at: datetime

    @property
    def text(self) -> str:
        return (
            f"{self.answered_count} questions answered, "
            f"{self.priorities_count} priorities selected, "
            f"{self.actions_count} action areas selected"
        )


def summarize_snapshot(snapshot: ProgressSnapshot, page_count: int) -> ResumeSummary:
    """Build the resume prompt summary for a saved snapshot."""
    page_index = min(snapshot.page_index, max(page_count - 1, 0))
    return ResumeSummary(
        section=snapshot.section,
        answered_count=snapshot.answered_count,
        priorities_count=len(snapshot.priorities),
        actions_count=len(snapshot.actions),
        percent=progress_percent(
            snapshot.section,
            page_index=page_index,
            page_count=page_count,
            priorities_count=len(snapshot.priorities),
            actions_count=len(snapshot.actions),
        ),
        saved_at=snapshot.saved_at,
    )


__all__ = ["PART_B_PICKS", "ResumeSummary", "progress_percent", "summarize_snapshot"]
