"""Tests for response helpers."""

import pytest

from varometer.exceptions import ExtractionError
from varometer.models import JobStatus
from varometer.utils import (
    EXPERIMENT_ID_CANDIDATES,
    PROJECT_ID_CANDIDATES,
    classify_status,
    extract_id,
    extract_status,
    has_payload,
)


class TestExtractId:
    """Ordered candidate lookup."""

    def test_first_candidate_in_priority_order(self) -> None:
        response = {"gwasExperimentId": "g", "_id": "u", "projectId": "p", "id": "i"}

        assert extract_id(response) == "i"

    def test_priority_follows_candidates_not_response_order(self) -> None:
        response = {"experimentId": "e", "projectId": "p"}

        assert extract_id(response) == "p"
        assert extract_id(response, EXPERIMENT_ID_CANDIDATES) == "e"

    def test_top_level_beats_nested(self) -> None:
        response = {"data": {"id": "nested"}, "_id": "top"}

        assert extract_id(response, PROJECT_ID_CANDIDATES) == "top"

    def test_nested_under_data(self) -> None:
        assert extract_id({"data": {"projectId": 42}}) == "42"

    def test_value_converted_to_string(self) -> None:
        assert extract_id({"id": 123}) == "123"

    def test_none_values_skipped(self) -> None:
        assert extract_id({"id": None, "_id": "x"}) == "x"

    def test_no_candidate(self) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            extract_id({"name": "p"}, ("id", "projectId"))

        assert exc_info.value.candidates == ("id", "projectId")
        assert "Tried: id, projectId" in str(exc_info.value)

    def test_non_mapping_response(self) -> None:
        with pytest.raises(ExtractionError, match="not a mapping"):
            extract_id("created")

    def test_data_not_a_mapping(self) -> None:
        with pytest.raises(ExtractionError):
            extract_id({"data": ["id"]})


class TestExtractStatus:
    """Status lookup across status/state and data.*"""

    @pytest.mark.parametrize(
        "response,expected",
        [
            ({"status": "running"}, "running"),
            ({"state": "DONE"}, "DONE"),
            ({"data": {"status": "failed"}}, "failed"),
            ({"data": {"state": "queued"}}, "queued"),
            ({"state": "A", "data": {"status": "B"}}, "A"),
            ({"results": [1, 2]}, None),
            ("plain text", None),
            (None, None),
        ],
    )
    def test_extract(self, response, expected) -> None:
        assert extract_status(response) == expected


class TestClassifyStatus:
    """Normalization into JobStatus tags."""

    @pytest.mark.parametrize("raw", ["COMPLETED", "complete", "Done", "success"])
    def test_completed(self, raw: str) -> None:
        assert classify_status(raw).status is JobStatus.COMPLETED

    @pytest.mark.parametrize("raw", ["FAILED", "error"])
    def test_failed(self, raw: str) -> None:
        assert classify_status(raw).status is JobStatus.FAILED

    def test_running(self) -> None:
        reading = classify_status("running")

        assert reading.status is JobStatus.RUNNING
        assert reading.raw == "RUNNING"
        assert not reading.is_terminal

    def test_unknown_keeps_raw_text(self) -> None:
        reading = classify_status("annotating")

        assert reading.status is JobStatus.UNKNOWN
        assert reading.raw == "ANNOTATING"
        assert not reading.is_terminal


class TestHasPayload:
    @pytest.mark.parametrize(
        "response,expected",
        [({}, False), ([], False), ("", False), (None, False), ({"a": 1}, True), ("x", True)],
    )
    def test_has_payload(self, response, expected) -> None:
        assert has_payload(response) is expected
