"""
Bounded multi-select toggling for Part B.

Priority areas are ranked: position 0 is the highest priority, and removing
an item closes the gap. Action areas use the same rule without rank meaning.
Toggling a new item while the selection is full leaves it unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum


class ToggleOutcome(StrEnum):
    """What a toggle did to the selection."""

    ADDED = "added"
    REMOVED = "removed"
    LIMIT_REACHED = "limit_reached"

    @property
    def changed(self) -> bool:
        return self is not ToggleOutcome.LIMIT_REACHED


def toggle_with_outcome(
    selection: Sequence[str],
    item: str,
    max_size: int,
) -> tuple[tuple[str, ...], ToggleOutcome]:
    """
    Toggle item in selection, reporting what happened.

    Args:
        selection: Current selection (distinct items)
        item: Item to toggle
        max_size: Maximum selection size

    Returns:
        (new selection, outcome)
    """
    current = tuple(selection)
    if item in current:
        return tuple(x for x in current if x != item), ToggleOutcome.REMOVED
    if len(current) < max_size:
        return (*current, item), ToggleOutcome.ADDED
    return current, ToggleOutcome.LIMIT_REACHED


def toggle(
    selection: Sequence[str],
    item: str,
    max_size: int,
) -> tuple[str, ...]:
    """Toggle item in selection; see toggle_with_outcome."""
    new_selection, _ = toggle_with_outcome(selection, item, max_size)
    return new_selection


def rank_of(selection: Sequence[str], item: str) -> int | None:
    """1-based rank of item in an ordered selection, or None if not selected."""
    try:
        return list(selection).index(item) + 1
    except ValueError:
        return None


__all__ = ["ToggleOutcome", "rank_of", "toggle", "toggle_with_outcome"]
