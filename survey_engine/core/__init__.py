"""
Pure survey rules: pagination, selection limits, advancement gates, progress.

Nothing in this package performs I/O or holds state.
"""

from .pagination import page_at, page_count, paginate
from .progress import PART_B_PICKS, ResumeSummary, progress_percent, summarize_snapshot
from .selection import ToggleOutcome, rank_of, toggle, toggle_with_outcome
from .validation import GateResult, can_advance_from_part_a, can_advance_from_part_b

__all__ = [
    "GateResult",
    "PART_B_PICKS",
    "ResumeSummary",
    "ToggleOutcome",
    "can_advance_from_part_a",
    "can_advance_from_part_b",
    "page_at",
    "page_count",
    "paginate",
    "progress_percent",
    "rank_of",
    "summarize_snapshot",
    "toggle",
    "toggle_with_outcome",
]
