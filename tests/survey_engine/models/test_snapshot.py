"""
Tests for the progress snapshot model and wire codec.

Covers:
- Session key format
- camelCase record layout and deterministic encoding
- Re-encoding a stored payload is byte-identical
- Rejection of malformed payloads
- Snapshots only exist for part-a and part-b
"""

import json
from datetime import UTC, datetime

import pytest

from survey_engine.lib.exceptions import InvalidStateError, SnapshotDecodeError
from survey_engine.models.snapshot import (
    ProgressSnapshot,
    WizardSection,
    decode_snapshot,
    encode_snapshot,
    session_key,
)

SAVED_AT = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


def _record(**overrides):
    record = {
        "section": "part-b",
        "pageIndex": 16,
        "responses": {"q1": 7, "q2": 4.5, "q3": "n/a"},
        "priorities": ["Teamwork", "Leadership"],
        "actions": ["Training"],
        "savedAt": "2026-03-02T09:30:00+00:00",
    }
    record.update(overrides)
    return record


class TestSessionKey:
    def test_identified_respondent(self) -> None:
        assert session_key("ees-2026", "emp-001") == "survey-progress-ees-2026-emp-001"

    def test_anonymous_respondent(self) -> None:
        assert session_key("ees-2026") == "survey-progress-ees-2026-anonymous"
        assert session_key("ees-2026", None) == session_key("ees-2026")


class TestEncoding:
    """Snapshot to wire record."""

    def test_record_uses_camel_case(self) -> None:
        snapshot = ProgressSnapshot(
            section=WizardSection.PART_A,
            page_index=2,
            responses={"q1": 9},
            saved_at=SAVED_AT,
        )
        assert snapshot.to_record() == {
            "section": "part-a",
            "pageIndex": 2,
            "responses": {"q1": 9},
            "priorities": [],
            "actions": [],
            "savedAt": "2026-03-02T09:30:00+00:00",
        }

    def test_encoding_is_deterministic(self) -> None:
        a = ProgressSnapshot(WizardSection.PART_A, 0, {"q2": 1, "q1": 2}, saved_at=SAVED_AT)
        b = ProgressSnapshot(WizardSection.PART_A, 0, {"q1": 2, "q2": 1}, saved_at=SAVED_AT)
        assert encode_snapshot(a) == encode_snapshot(b)

    def test_reencoding_is_byte_identical(self) -> None:
        payload = json.dumps(_record(), sort_keys=True, separators=(",", ":"))
        assert encode_snapshot(decode_snapshot(payload)) == payload

    def test_priority_order_is_preserved(self) -> None:
        snapshot = decode_snapshot(json.dumps(_record()))
        assert snapshot.priorities == ("Teamwork", "Leadership")

    @pytest.mark.parametrize("section", [WizardSection.INTRO, WizardSection.COMPLETE])
    def test_non_persistable_sections_rejected(self, section: WizardSection) -> None:
        with pytest.raises(InvalidStateError):
            ProgressSnapshot(section=section, page_index=0)


class TestDecoding:
    """Wire record to snapshot."""

    def test_decodes_valid_record(self) -> None:
        snapshot = decode_snapshot(json.dumps(_record()))

        assert snapshot.section == WizardSection.PART_B
        assert snapshot.page_index == 16
        assert snapshot.responses == {"q1": 7, "q2": 4.5, "q3": "n/a"}
        assert snapshot.saved_at == SAVED_AT
        assert snapshot.answered_count == 3

    def test_naive_timestamp_is_utc(self) -> None:
        snapshot = decode_snapshot(json.dumps(_record(savedAt="2026-03-02T09:30:00")))
        assert snapshot.saved_at == SAVED_AT

    def test_accepts_bytes(self) -> None:
        assert decode_snapshot(json.dumps(_record()).encode()).page_index == 16

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "{not json",
            "[]",
            '"part-a"',
            b"\xff\xfe",
        ],
    )
    def test_invalid_json(self, payload) -> None:
        with pytest.raises(SnapshotDecodeError):
            decode_snapshot(payload)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"section": "part-c"},
            {"section": "complete"},
            {"section": "intro"},
            {"pageIndex": -1},
            {"pageIndex": "3"},
            {"pageIndex": True},
            {"responses": []},
            {"responses": {"q1": None}},
            {"responses": {"q1": False}},
            {"responses": {"q1": [1]}},
            {"priorities": "Teamwork"},
            {"priorities": ["A", "B", "C", "D"]},
            {"priorities": ["A", "A"]},
            {"actions": ["A", "B", "C", "D", "E"]},
            {"actions": [1]},
            {"savedAt": "yesterday"},
            {"savedAt": 1767225600},
        ],
    )
    def test_malformed_record(self, overrides) -> None:
        with pytest.raises(SnapshotDecodeError):
            decode_snapshot(json.dumps(_record(**overrides)))

    def test_missing_key(self) -> None:
        record = _record()
        del record["savedAt"]
        with pytest.raises(SnapshotDecodeError, match="savedAt"):
            decode_snapshot(json.dumps(record))
