"""Tests for console rendering of results."""

import json

from core.interfaces.solution import ProviderError
from core.models.solution import RequestMode, RequestSnapshot, SolutionResult
from shotsolve.formatting import format_result, format_snapshot, result_to_json


def snapshot(**overrides):
    values = dict(is_in_flight=False, mode=RequestMode.ANALYZE, last_result=None, last_error=None)
    values.update(overrides)
    return RequestSnapshot(**values)


def test_analyze_result_sections(two_sum_result):
    text = format_result(two_sum_result)

    assert "Two Sum" in text
    assert "1. use a hash map" in text
    assert "func twoSum(...)" in text
    assert "Time:  O(n)" in text


def test_debug_result_shows_revision():
    result = SolutionResult(code="old()", revised_code="new()", approach_notes=["fixed loop"])

    text = format_result(result, RequestMode.DEBUG)

    assert "Revised code" in text
    assert "new()" in text
    assert "old()" not in text
    assert "What changed" in text


def test_empty_result():
    assert "empty answer" in format_result(SolutionResult())


def test_snapshot_text_by_state(two_sum_result):
    assert format_snapshot(snapshot()) is None
    assert "analyze" in format_snapshot(snapshot(is_in_flight=True))
    assert format_snapshot(snapshot(last_error=ProviderError("invalid api key"))) == "Error: invalid api key"
    assert "Two Sum" in format_snapshot(snapshot(last_result=two_sum_result))


def test_result_json_uses_wire_names(two_sum_result):
    assert json.loads(result_to_json(two_sum_result))["thoughts"] == ["use a hash map"]
