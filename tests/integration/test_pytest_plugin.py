"""Integration tests for the json-identity-diff pytest plugin.

These tests verify that the assert_json_no_diffs fixture is auto-discovered
via the pytest11 entry point and behaves correctly.

NOTE: These tests require json-identity-diff to be installed (even in editable
mode via ``pip install -e .``). The pytest11 entry point is only registered at
install time -- running from a raw source checkout without installing will not
discover the fixture.
"""

from __future__ import annotations

from typing import Any

import pytest

from json_identity_diff import DiffConfig, IgnoreList


def test_fixture_passes_reordered_records(assert_json_no_diffs: Any) -> None:
    assert_json_no_diffs(
        [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}],
        [{"id": 2, "v": "b"}, {"id": 1, "v": "a"}],
    )


def test_fixture_fails_on_change(assert_json_no_diffs: Any) -> None:
    with pytest.raises(AssertionError, match=r"changed \[id=2\]\.v: 'b' -> 'c'"):
        assert_json_no_diffs(
            [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}],
            [{"id": 2, "v": "c"}, {"id": 1, "v": "a"}],
        )


def test_fixture_ignore_patterns(assert_json_no_diffs: Any) -> None:
    assert_json_no_diffs(
        {"meta": {"at": 1}, "x": 1},
        {"meta": {"at": 2}, "x": 1},
        ignore=["meta.at"],
    )


def test_fixture_accepts_ignore_list(assert_json_no_diffs: Any) -> None:
    assert_json_no_diffs({"a": 1, "b": 2}, {"a": 1, "b": 3}, ignore=IgnoreList(["b"]))


def test_fixture_custom_config(assert_json_no_diffs: Any) -> None:
    assert_json_no_diffs({"a": None}, {}, config=DiffConfig(null_equals_missing=True))


def test_fixture_error_message_lists_every_diff(assert_json_no_diffs: Any) -> None:
    with pytest.raises(AssertionError) as exc_info:
        assert_json_no_diffs({"a": 1, "b": 2}, {"a": 2, "c": 3})
    message = str(exc_info.value)
    assert "(3 diffs)" in message
    assert "changed a: 1 -> 2" in message
    assert "removed b: 2" in message
    assert "added c: 3" in message


def test_plugin_module_exposes_fixture() -> None:
    import importlib

    module = importlib.import_module("json_identity_diff.integrations._pytest_plugin")
    assert callable(module.assert_json_no_diffs)
