"""
Progress snapshot model and wire codec.

A snapshot is the durable state of one in-flight survey session. It is only
meaningful while the respondent is inside Part A or Part B; the wizard never
persists the intro or complete sections.

Wire format (JSON, camelCase keys):
    {
        "section": "part-a" | "part-b",
        "pageIndex": int >= 0,
        "responses": {questionId: number | string},
        "priorities": [str, ...]   (<= 3, ordered by rank),
        "actions": [str, ...]      (<= 4),
        "savedAt": ISO-8601 timestamp
    }

Encoding is deterministic (sorted keys, compact separators) so that decoding
and re-encoding a record this engine wrote yields identical bytes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from survey_engine.config.survey import ACTION_LIMIT, ANONYMOUS_RESPONDENT, PRIORITY_LIMIT
from survey_engine.lib.exceptions import InvalidStateError, SnapshotDecodeError
from survey_engine.models.survey import ResponseMap

SESSION_KEY_PREFIX = "survey-progress"


class WizardSection(StrEnum):
    """Survey wizard state machine states."""

    INTRO = "intro"          # Resume / restart decision
    PART_A = "part-a"        # Paginated rating questionnaire
    PART_B = "part-b"        # Priority and action area selection
    COMPLETE = "complete"    # Review step, then submitted


# Sections a snapshot may be written for
PERSISTABLE_SECTIONS: frozenset[WizardSection] = frozenset({
    WizardSection.PART_A,
    WizardSection.PART_B,
})

_RECORD_KEYS = ("section", "pageIndex", "responses", "priorities", "actions", "savedAt")


def session_key(survey_id: str, respondent_id: str | None = None) -> str:
    """
    Build the store key for a survey session.

    Args:
        survey_id: Survey identifier
        respondent_id: Respondent identifier, or None for anonymous respondents

    Returns:
        Key of the form "survey-progress-{survey_id}-{respondent_id|anonymous}"
    """
    return f"{SESSION_KEY_PREFIX}-{survey_id}-{respondent_id or ANONYMOUS_RESPONDENT}"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Durable state of one in-flight survey session."""

    section: WizardSection
    page_index: int
    responses: ResponseMap = field(default_factory=dict)
    priorities: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()
    saved_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if self.section not in PERSISTABLE_SECTIONS:
            raise InvalidStateError(
                "snapshot",
                str(self.section),
                f"snapshots are only written for part-a or part-b, not '{self.section}'",
            )

    @property
    def answered_count(self) -> int:
        return len(self.responses)

    def to_record(self) -> dict[str, Any]:
        """Convert to the JSON-compatible persisted record."""
        return {
            "section": self.section.value,
            "pageIndex": self.page_index,
            "responses": dict(self.responses),
            "priorities": list(self.priorities),
            "actions": list(self.actions),
            "savedAt": self.saved_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Any) -> ProgressSnapshot:
        """
        Build a snapshot from a persisted record.

        Raises:
            SnapshotDecodeError: If the record is malformed
        """
        if not isinstance(record, dict):
            raise SnapshotDecodeError(f"snapshot record must be an object, got {type(record).__name__}")
        missing = [key for key in _RECORD_KEYS if key not in record]
        if missing:
            raise SnapshotDecodeError(f"snapshot record missing keys: {missing}")

        try:
            section = WizardSection(record["section"])
        except ValueError as e:
            raise SnapshotDecodeError(f"unknown section {record['section']!r}") from e
        if section not in PERSISTABLE_SECTIONS:
            raise SnapshotDecodeError(f"section {section.value!r} is never persisted")

        page_index = record["pageIndex"]
        if isinstance(page_index, bool) or not isinstance(page_index, int) or page_index < 0:
            raise SnapshotDecodeError(f"invalid pageIndex {page_index!r}")

        responses = _decode_responses(record["responses"])
        priorities = _decode_labels(record["priorities"], "priorities", PRIORITY_LIMIT)
        actions = _decode_labels(record["actions"], "actions", ACTION_LIMIT)
        saved_at = _decode_timestamp(record["savedAt"])

        return cls(
            section=section,
            page_index=page_index,
            responses=responses,
            priorities=priorities,
            actions=actions,
            saved_at=saved_at,
        )


def _decode_responses(value: Any) -> ResponseMap:
    if not isinstance(value, dict):
        raise SnapshotDecodeError("responses must be an object")
    responses: ResponseMap = {}
    for question_id, answer in value.items():
        if isinstance(answer, bool) or not isinstance(answer, (int, float, str)):
            raise SnapshotDecodeError(f"invalid response value for {question_id!r}")
        responses[question_id] = answer
    return responses


def _decode_labels(value: Any, name: str, limit: int) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SnapshotDecodeError(f"{name} must be a list of strings")
    if len(value) > limit:
        raise SnapshotDecodeError(f"{name} holds {len(value)} items, limit is {limit}")
    if len(set(value)) != len(value):
        raise SnapshotDecodeError(f"{name} contains duplicates")
    return tuple(value)


def _decode_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise SnapshotDecodeError("savedAt must be an ISO-8601 string")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise SnapshotDecodeError(f"invalid savedAt {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def encode_snapshot(snapshot: ProgressSnapshot) -> str:
    """Serialize a snapshot to its canonical JSON text."""
    return json.dumps(snapshot.to_record(), sort_keys=True, separators=(",", ":"))


def decode_snapshot(raw: str | bytes) -> ProgressSnapshot:
    """
    Parse canonical or foreign JSON text into a snapshot.

    Raises:
        SnapshotDecodeError: If the payload is not valid JSON or not a valid record
    """
    try:
        record = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise SnapshotDecodeError(f"snapshot payload is not valid JSON: {e}") from e
    return ProgressSnapshot.from_record(record)


__all__ = [
    "PERSISTABLE_SECTIONS",
    "ProgressSnapshot",
    "WizardSection",
    "decode_snapshot",
    "encode_snapshot",
    "session_key",
]
