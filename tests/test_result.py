"""Tests for DiffKind, DiffRecord and ComparisonResult.

Covers:
- Construction defaults and immutability
- DiffRecord helpers: address_on, scoped, swapped, pattern, str
- ComparisonResult helpers: is_identical, keyed_arrays, counts, by_kind,
  key_index, without
- __all__ export
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from json_identity_diff.api import compare
from json_identity_diff.ignore import IgnoreList
from json_identity_diff.paths.addresses import (
    ArrayPattern,
    IdentityAddress,
    PositionAddress,
    ScopedAddress,
    Side,
)
from json_identity_diff.result import ComparisonResult, DiffKind, DiffRecord
from json_identity_diff.tree import MISSING

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_record(**overrides: object) -> DiffRecord:
    """Return a CHANGED record, optionally overriding specific fields."""
    defaults: dict[str, object] = {
        "kind": DiffKind.CHANGED,
        "identity_address": IdentityAddress.parse("items[id=b].v"),
        "left_address": PositionAddress.parse("items[1].v"),
        "right_address": PositionAddress.parse("items[0].v"),
        "old_value": 2,
        "new_value": 3,
    }
    defaults.update(overrides)
    return DiffRecord(**defaults)  # type: ignore[arg-type]


LEFT = {"items": [{"id": "a", "v": 1}, {"id": "b", "v": 2}], "xs": [1]}
RIGHT = {"items": [{"id": "b", "v": 3}, {"id": "a", "v": 1}, {"id": "c", "v": 4}], "xs": [1]}


# ---------------------------------------------------------------------------
# DiffKind
# ---------------------------------------------------------------------------


class TestDiffKind:
    def test_members(self) -> None:
        assert {k.value for k in DiffKind} == {"added", "removed", "changed"}

    def test_mirrored(self) -> None:
        assert DiffKind.ADDED.mirrored is DiffKind.REMOVED
        assert DiffKind.REMOVED.mirrored is DiffKind.ADDED
        assert DiffKind.CHANGED.mirrored is DiffKind.CHANGED


# ---------------------------------------------------------------------------
# DiffRecord
# ---------------------------------------------------------------------------


class TestDiffRecord:
    def test_defaults(self) -> None:
        record = DiffRecord(DiffKind.ADDED, IdentityAddress.parse("a"))
        assert record.left_address is None
        assert record.right_address is None
        assert record.old_value is MISSING
        assert record.new_value is MISSING

    def test_frozen(self) -> None:
        record = make_record()
        with pytest.raises(FrozenInstanceError):
            record.kind = DiffKind.ADDED  # type: ignore[misc]

    def test_hashable_with_container_values(self) -> None:
        record = make_record(old_value={"a": [1]}, new_value=[2])
        assert hash(record) == hash(make_record(old_value=None, new_value=None))

    def test_scoped(self) -> None:
        record = make_record()
        assert record.scoped(Side.LEFT) == ScopedAddress.parse("left:items[1].v")
        assert record.scoped(Side.RIGHT) == ScopedAddress.parse("right:items[0].v")

    def test_scoped_absent_side(self) -> None:
        record = make_record(kind=DiffKind.ADDED, left_address=None, old_value=MISSING)
        assert record.scoped(Side.LEFT) is None
        assert record.address_on(Side.RIGHT) == PositionAddress.parse("items[0].v")

    def test_swapped(self) -> None:
        record = make_record(kind=DiffKind.ADDED, left_address=None, old_value=MISSING)
        swapped = record.swapped()
        assert swapped.kind is DiffKind.REMOVED
        assert swapped.left_address == PositionAddress.parse("items[0].v")
        assert swapped.right_address is None
        assert swapped.old_value == 3
        assert swapped.new_value is MISSING
        assert swapped.swapped() == record

    def test_pattern(self) -> None:
        assert make_record().pattern == ArrayPattern.parse("items[].v")

    def test_str(self) -> None:
        assert str(make_record()) == "changed items[id=b].v: 2 -> 3"
        root = DiffRecord(DiffKind.REMOVED, IdentityAddress(), PositionAddress(), None, 1)
        assert str(root) == "removed <root>: 1"


# ---------------------------------------------------------------------------
# ComparisonResult
# ---------------------------------------------------------------------------


class TestComparisonResult:
    def test_identical(self) -> None:
        result = compare(LEFT, LEFT)
        assert result.is_identical
        assert result.diffs == ()

    def test_frozen(self) -> None:
        result = compare(LEFT, RIGHT)
        with pytest.raises(FrozenInstanceError):
            result.diffs = ()  # type: ignore[misc]

    def test_keyed_arrays(self) -> None:
        result = compare(LEFT, RIGHT)
        assert len(result.identity_keys) == 2
        assert [info.label for info in result.keyed_arrays] == ["id"]

    def test_counts(self) -> None:
        counts = compare(LEFT, RIGHT).counts()
        assert counts == {DiffKind.ADDED: 1, DiffKind.REMOVED: 0, DiffKind.CHANGED: 1}

    def test_by_kind(self) -> None:
        (added,) = compare(LEFT, RIGHT).by_kind(DiffKind.ADDED)
        assert str(added.identity_address) == "items[id=c]"

    def test_key_index(self) -> None:
        index = compare(LEFT, RIGHT).key_index()
        assert index[IdentityAddress.parse("items")].key == "id"

    def test_without(self) -> None:
        result = compare(LEFT, RIGHT)
        trimmed = result.without(IgnoreList(["items[id=c]*"]))
        assert [str(d.identity_address) for d in trimmed.diffs] == ["items[id=b].v"]
        assert trimmed.identity_keys == result.identity_keys
        assert trimmed.computation_time_ms == result.computation_time_ms

    def test_manual_construction(self) -> None:
        result = ComparisonResult(diffs=(make_record(),), identity_keys=(), computation_time_ms=0.5)
        assert not result.is_identical
        assert result.keyed_arrays == ()


class TestExports:
    def test_all(self) -> None:
        import json_identity_diff.result as module

        assert set(module.__all__) == {"ComparisonResult", "DiffKind", "DiffRecord"}
