"""
Part A pagination.

Splits the ordered question list into fixed-size pages. The last page may
hold fewer than page_size questions.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from survey_engine.config.survey import PAGE_SIZE

T = TypeVar("T")


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed for total items: ceil(total / page_size)."""
    _check_page_size(page_size)
    return math.ceil(total / page_size)


def page_at(items: Sequence[T], index: int, page_size: int = PAGE_SIZE) -> tuple[T, ...]:
    """
    Return the items on page index.

    Args:
        items: Ordered items
        index: Zero-based page index
        page_size: Items per page

    Returns:
        Slice [index * page_size, min((index + 1) * page_size, len(items)))

    Raises:
        ValueError: If page_size < 1 or index is out of range
    """
    pages = page_count(len(items), page_size)
    if index < 0 or index >= pages:
        raise ValueError(f"page index {index} out of range (0..{pages - 1})")
    start = index * page_size
    return tuple(items[start:start + page_size])


def paginate(items: Sequence[T], page_size: int = PAGE_SIZE) -> list[tuple[T, ...]]:
    """Split items into consecutive pages of page_size."""
    _check_page_size(page_size)
    return [tuple(items[i:i + page_size]) for i in range(0, len(items), page_size)]


__all__ = ["page_at", "page_count", "paginate"]
