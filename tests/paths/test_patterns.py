"""Tests for generalize, group_by_pattern and pattern matching."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from json_identity_diff.algorithm.identity import detect_identity_key
from json_identity_diff.errors import AddressSyntaxError
from json_identity_diff.paths.addresses import (
    ArrayPattern,
    IdentityAddress,
    PositionAddress,
)
from json_identity_diff.paths.patterns import (
    compile_pattern,
    generalize,
    group_by_pattern,
    matches,
)

# ---------------------------------------------------------------------------
# generalize
# ---------------------------------------------------------------------------


class TestGeneralize:
    def test_keyed_and_index_segments(self) -> None:
        address = IdentityAddress.parse("orders[id=7].lines[sku=A::2].qty")
        assert generalize(address) == ArrayPattern.parse("orders[].lines[].qty")

    def test_position_address(self) -> None:
        assert generalize(PositionAddress.parse("a[0].b[3]")) == ArrayPattern.parse("a[].b[]")

    def test_root(self) -> None:
        assert generalize(IdentityAddress()) == ArrayPattern()

    def test_same_location_different_elements(self) -> None:
        a = generalize(IdentityAddress.parse("items[id=a].v"))
        b = generalize(IdentityAddress.parse("items[id=b].v"))
        assert a == b


class TestGroupByPattern:
    def test_groups_sibling_arrays(self) -> None:
        infos = [
            detect_identity_key(
                [],
                [],
                array_address=PositionAddress.parse(position),
                identity_address=IdentityAddress.parse(identity),
            )
            for position, identity in [
                ("orders[0].lines", "orders[id=1].lines"),
                ("tags", "tags"),
                ("orders[1].lines", "orders[id=2].lines"),
            ]
        ]
        groups = group_by_pattern(infos)
        assert list(groups) == [ArrayPattern.parse("orders[].lines"), ArrayPattern.parse("tags")]
        assert groups[ArrayPattern.parse("orders[].lines")] == [infos[0], infos[2]]


# ---------------------------------------------------------------------------
# matches
# ---------------------------------------------------------------------------


class TestMatches:
    @pytest.mark.parametrize(
        ("address", "pattern", "expected"),
        [
            ("items[id=b].v", "items.*.v", True),
            ("items[id=b].w", "items.*.v", False),
            ("items[id=b].v", "items[*].v", True),
            ("items.x.v", "items[*].v", False),
            ("items.x.v", "items.*.v", True),
            ("items[id=b].v", "items[id=b].v", True),
            ("items[id=c].v", "items[id=b].v", False),
            ("items[id=b]", "items[id=b]*", True),
            ("items[id=b].v", "items[id=b]*", True),
            ("items[id=b].tags[0]", "items[id=b]*", True),
            ("items[id=c].v", "items[id=b]*", False),
            ("items", "items[id=b]*", False),
            ("items[id=b].v", "items*", True),
            ("items[id=b].v", "items.*", False),
            ("items", "*", True),
            ("", "*", False),
            ("", "", True),
            ("a", "", False),
        ],
    )
    def test_identity_addresses(self, address: str, pattern: str, expected: bool) -> None:
        assert matches(IdentityAddress.parse(address), pattern) is expected

    def test_position_address(self) -> None:
        assert matches(PositionAddress.parse("items[3].v"), "items[*].v")

    def test_array_pattern(self) -> None:
        address = IdentityAddress.parse("orders[id=7].lines[0]")
        assert matches(address, ArrayPattern.parse("orders[].lines[]"))
        assert not matches(address, ArrayPattern.parse("orders[]"))

    def test_escaped_star_is_literal(self) -> None:
        assert matches(IdentityAddress.parse(r"a\*"), r"a\*")
        assert not matches(IdentityAddress.parse("a.b"), r"a\*")

    def test_escaped_dot_then_prefix_star(self) -> None:
        address = IdentityAddress.parse(r"a\..b")
        assert matches(address, r"a\.*")

    def test_rejects_non_address(self) -> None:
        with pytest.raises(TypeError):
            matches("items", "items")  # type: ignore[arg-type]

    @pytest.mark.parametrize("pattern", ["items[", "a*b", "items..v"])
    def test_malformed_pattern(self, pattern: str) -> None:
        with pytest.raises(AddressSyntaxError):
            matches(IdentityAddress.parse("items"), pattern)


class TestCompilePattern:
    def test_cached(self) -> None:
        assert compile_pattern("items.*.v") is compile_pattern("items.*.v")

    def test_prefix_flag(self) -> None:
        assert compile_pattern("items[id=b]*").prefix
        assert not compile_pattern("items.*").prefix

    def test_str(self) -> None:
        assert str(compile_pattern("items[*].v")) == "items[*].v"

    def test_concurrent_compilation(self) -> None:
        texts = [f"items[id={i % 16}].v" for i in range(512)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            compiled = list(pool.map(compile_pattern, texts))
        assert compile_pattern.cache_lock is not None
        assert [p.text for p in compiled] == texts
        assert all(p == compile_pattern(p.text) for p in compiled)
