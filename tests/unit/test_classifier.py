"""Unit tests for record classification."""

import json

import pytest
import pytest_check as check

from src.models.schemas import EventKind, ProgressEvent
from src.stream.classifier import END_OF_STREAM_EVENT, IGNORED, classify


def record(payload: dict) -> str:
    return json.dumps(payload)


class TestIgnorableRecords:
    """Records that never produce state changes or errors."""

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_blank_record_is_ignored(self, text: str) -> None:
        assert classify(text) == IGNORED

    def test_sentinel_is_end_of_stream(self) -> None:
        """The [DONE] sentinel is recognised, surrounding whitespace allowed."""
        assert classify("[DONE]") == END_OF_STREAM_EVENT
        assert classify("  [DONE] ") == END_OF_STREAM_EVENT

    @pytest.mark.parametrize("text", ["{not json", '{"type": "result", "data": {', "undefined"])
    def test_malformed_record_is_ignored(self, text: str) -> None:
        """Unparseable payloads are skipped, not raised."""
        assert classify(text) == IGNORED

    @pytest.mark.parametrize("text", ["42", '"thinking"', "[1, 2]", "null"])
    def test_non_object_record_is_ignored(self, text: str) -> None:
        assert classify(text) == IGNORED

    def test_unknown_type_without_stage_is_ignored(self) -> None:
        assert classify(record({"type": "heartbeat", "ts": 1})) == IGNORED


class TestProgressRecords:
    """Progress classification and field extraction."""

    def test_flat_thinking_record(self) -> None:
        event = classify(
            record({"type": "thinking", "stage": "fetch", "message": "Searching", "status": "starting"})
        )

        assert event.kind is EventKind.PROGRESS
        assert event.progress == ProgressEvent(stage="fetch", message="Searching", status="starting")

    def test_nested_fields_are_read_from_data(self) -> None:
        """Fields missing at the top level come from the nested object."""
        event = classify(
            record({"type": "thinking", "data": {"stage": "search", "message": "Looking", "status": "processing"}})
        )

        assert event.progress == ProgressEvent(stage="search", message="Looking", status="processing")

    def test_defaults_apply_when_fields_missing(self) -> None:
        """A bare thinking record gets stage, message and status defaults."""
        event = classify(record({"type": "thinking"}))

        check.equal(event.kind, EventKind.PROGRESS)
        check.equal(event.progress.stage, "thinking")
        check.equal(event.progress.message, "")
        check.equal(event.progress.status, "info")

    def test_stage_without_type_implies_progress(self) -> None:
        event = classify(record({"stage": "rank", "message": "Ranking clips"}))

        assert event.kind is EventKind.PROGRESS
        assert event.progress.stage == "rank"
        assert event.progress.status == "info"

    def test_nested_stage_with_unknown_type_implies_progress(self) -> None:
        event = classify(record({"type": "update", "data": {"stage": "summarize"}}))

        assert event.kind is EventKind.PROGRESS
        assert event.progress.stage == "summarize"

    def test_empty_top_level_value_falls_through_to_nested(self) -> None:
        """Empty strings count as absent, like null."""
        event = classify(record({"type": "thinking", "message": "", "data": {"message": "Nested"}}))

        assert event.progress.message == "Nested"

    def test_top_level_wins_over_nested(self) -> None:
        """Documented assumption: when both levels carry a field, top level wins.

        The backend has not been observed sending differing values at both
        levels; this pins the compatible default rather than a confirmed
        contract.
        """
        event = classify(
            record(
                {
                    "type": "thinking",
                    "stage": "top",
                    "status": "complete",
                    "data": {"stage": "nested", "message": "from data", "status": "info"},
                }
            )
        )

        check.equal(event.progress.stage, "top")
        check.equal(event.progress.status, "complete")
        check.equal(event.progress.message, "from data")

    def test_non_string_values_are_stringified(self) -> None:
        event = classify(record({"type": "thinking", "stage": 3, "message": 12.5}))

        assert event.progress.stage == "3"
        assert event.progress.message == "12.5"


class TestResultRecords:
    """Result classification."""

    def test_result_carries_nested_payload(self) -> None:
        data = {"success": True, "summary": "Team A won 2-1"}
        event = classify(record({"type": "result", "data": data}))

        assert event.kind is EventKind.RESULT
        assert event.payload == data

    def test_result_type_wins_over_stage(self) -> None:
        """The explicit discriminator takes precedence over a stage field."""
        event = classify(record({"type": "result", "stage": "final", "data": {"summary": "x"}}))

        assert event.kind is EventKind.RESULT

    def test_result_without_data_uses_top_level(self) -> None:
        event = classify(record({"type": "result", "success": False, "error": "boom"}))

        assert event.kind is EventKind.RESULT
        assert event.payload == {"success": False, "error": "boom"}
