"""IdentityDiffer: the recursive walk that turns two documents into diffs.

This is the wiring layer between identity-key detection and the public API.
It compares two JSON values node by node and returns a ComparisonResult with
the differences, one IdentityKeyInfo per array location, and timing data.

Architecture:
- compare() starts a wall-clock timer and hands the two roots to a fresh
  ``_ComparisonSession``.  The session owns all per-call state (the diff list
  and the identity-key memo), so an IdentityDiffer can be shared between
  threads.
- Objects are walked by field name: left declaration order first, then the
  fields only the right side has.
- Arrays go through ``detect_identity_key`` once per IdentityAddress.  Keyed
  arrays are walked as logical elements (left order, then right-only
  elements) and addressed with ``[key=value]`` segments; positional arrays are
  walked index by index.
- A node present on one side only is a single ADDED/REMOVED record carrying
  the whole value, unless ``DiffConfig.expand_one_sided`` asks for one record
  per leaf.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Any

from json_identity_diff.algorithm.config import DiffConfig
from json_identity_diff.algorithm.identity import (
    IdentityKeyInfo,
    TypedKey,
    detect_identity_key,
    render_typed_key,
)
from json_identity_diff.paths.addresses import IdentityAddress, PositionAddress
from json_identity_diff.result import ComparisonResult, DiffKind, DiffRecord
from json_identity_diff.tree.nodes import MISSING, SCALAR_KINDS, ValueKind
from json_identity_diff.tree.walk import kind_of, scalar_equal

logger = logging.getLogger(__name__)

__all__ = ["IdentityDiffer"]


class IdentityDiffer:
    """Identity-aware structural diff of two JSON documents.

    Example::

        from json_identity_diff import IdentityDiffer

        differ = IdentityDiffer()
        result = differ.compare(
            {"items": [{"id": "a", "v": 1}, {"id": "b", "v": 2}]},
            {"items": [{"id": "b", "v": 3}, {"id": "a", "v": 1}]},
        )
        print([str(d) for d in result.diffs])
        # ['changed items[id=b].v: 2 -> 3']
    """

    def __init__(self, config: DiffConfig | None = None) -> None:
        """Initialise the differ.

        Args:
            config: Engine parameters.  Defaults to ``DiffConfig()``.
        """
        self._config: DiffConfig = config if config is not None else DiffConfig()

    @property
    def config(self) -> DiffConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compare(self, left: Any, right: Any) -> ComparisonResult:
        """Compare two JSON values and return a ComparisonResult.

        The result depends only on the inputs and the config: calling this
        twice with the same arguments produces equal diffs and identity keys.

        Args:
            left:  Left JSON value (dict, list, str, int, float, bool, None).
            right: Right JSON value.

        Returns:
            A ``ComparisonResult``; ``diffs`` is empty when the documents are
            structurally equal.

        Raises:
            TypeError: If either document contains a non-JSON value.
        """
        t0 = time.perf_counter()
        session = _ComparisonSession(self._config)
        session.walk(left, right, IdentityAddress(), PositionAddress(), PositionAddress())
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        result = ComparisonResult(
            diffs=tuple(session.diffs),
            identity_keys=tuple(session.identity_keys),
            computation_time_ms=elapsed_ms,
        )
        logger.debug(
            "compared documents: %d diffs, %d/%d arrays keyed, %.2f ms",
            len(result.diffs),
            len(result.keyed_arrays),
            len(result.identity_keys),
            elapsed_ms,
        )
        return result

    def survey(self, document: Any) -> tuple[IdentityKeyInfo, ...]:
        """Run identity-key detection over a single document.

        Every array is treated as if compared against an empty counterpart,
        so only uniqueness and coverage decide the key.

        Returns:
            One IdentityKeyInfo per array location, in pre-order.
        """
        session = _ComparisonSession(self._config)
        session.survey(document, IdentityAddress(), PositionAddress())
        return tuple(session.identity_keys)


class _ComparisonSession:
    """Mutable state of one compare() or survey() call."""

    def __init__(self, config: DiffConfig) -> None:
        self.config = config
        self.diffs: list[DiffRecord] = []
        self.identity_keys: list[IdentityKeyInfo] = []
        self._memo: dict[IdentityAddress, IdentityKeyInfo] = {}

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def walk(
        self,
        left: Any,
        right: Any,
        identity: IdentityAddress,
        left_pos: PositionAddress | None,
        right_pos: PositionAddress | None,
    ) -> None:
        if left is MISSING and right is MISSING:
            return
        if left is MISSING:
            self._one_sided(right, identity, None, right_pos)
            return
        if right is MISSING:
            self._one_sided(left, identity, left_pos, None)
            return

        left_kind, right_kind = kind_of(left), kind_of(right)
        if left_kind != right_kind or left_kind in SCALAR_KINDS:
            if not scalar_equal(left, right):
                self._emit(DiffKind.CHANGED, identity, left_pos, right_pos, left, right)
            return

        if left_kind == ValueKind.OBJECT:
            self._walk_object(left, right, identity, left_pos, right_pos)
        else:
            self._walk_array(left, right, identity, left_pos, right_pos)

    def _emit(
        self,
        kind: DiffKind,
        identity: IdentityAddress,
        left_pos: PositionAddress | None,
        right_pos: PositionAddress | None,
        old: Any = MISSING,
        new: Any = MISSING,
    ) -> None:
        self.diffs.append(DiffRecord(kind, identity, left_pos, right_pos, old, new))

    def _one_sided(
        self,
        value: Any,
        identity: IdentityAddress,
        left_pos: PositionAddress | None,
        right_pos: PositionAddress | None,
    ) -> None:
        """Report a node that only one document has."""
        on_left = left_pos is not None
        kind = kind_of(value)
        if not self.config.expand_one_sided or kind in SCALAR_KINDS or not value:
            if on_left:
                self._emit(DiffKind.REMOVED, identity, left_pos, None, old=value)
            else:
                self._emit(DiffKind.ADDED, identity, None, right_pos, new=value)
            return

        empty: Any = {} if kind == ValueKind.OBJECT else []
        left, right = (value, empty) if on_left else (empty, value)
        if kind == ValueKind.OBJECT:
            self._walk_object(left, right, identity, left_pos, right_pos, one_sided=True)
        else:
            self._walk_array(left, right, identity, left_pos, right_pos)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _walk_object(
        self,
        left: dict[str, Any],
        right: dict[str, Any],
        identity: IdentityAddress,
        left_pos: PositionAddress | None,
        right_pos: PositionAddress | None,
        *,
        one_sided: bool = False,
    ) -> None:
        names = [*left, *(name for name in right if name not in left)]
        for name in names:
            left_value = left[name] if name in left else MISSING
            right_value = right[name] if name in right else MISSING
            if (
                self.config.null_equals_missing
                and not one_sided
                and _null_against_missing(left_value, right_value)
            ):
                continue
            self.walk(
                left_value,
                right_value,
                identity.child_field(name),
                None if left_value is MISSING else left_pos.child_field(name),  # type: ignore[union-attr]
                None if right_value is MISSING else right_pos.child_field(name),  # type: ignore[union-attr]
            )

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _walk_array(
        self,
        left: list[Any],
        right: list[Any],
        identity: IdentityAddress,
        left_pos: PositionAddress | None,
        right_pos: PositionAddress | None,
    ) -> None:
        reference = left_pos if left_pos is not None else right_pos
        info = self._detect(left, right, identity, reference)  # type: ignore[arg-type]

        if not info.is_keyed:
            for i in range(max(len(left), len(right))):
                left_value = left[i] if i < len(left) else MISSING
                right_value = right[i] if i < len(right) else MISSING
                self.walk(
                    left_value,
                    right_value,
                    identity.child_index(i),
                    None if left_value is MISSING else left_pos.child_index(i),  # type: ignore[union-attr]
                    None if right_value is MISSING else right_pos.child_index(i),  # type: ignore[union-attr]
                )
            return

        left_index, right_index, order = _logical_elements(info, left, right)
        for key in order:
            i = left_index.get(key)
            j = right_index.get(key)
            self.walk(
                MISSING if i is None else left[i],
                MISSING if j is None else right[j],
                identity.child_keyed(info.segment_for(key)),
                None if i is None else left_pos.child_index(i),  # type: ignore[union-attr]
                None if j is None else right_pos.child_index(j),  # type: ignore[union-attr]
            )

    def _detect(
        self,
        left: list[Any],
        right: list[Any],
        identity: IdentityAddress,
        reference: PositionAddress,
    ) -> IdentityKeyInfo:
        """Memoised identity-key decision for the array at ``identity``."""
        known = self._memo.get(identity)
        if known is not None:
            return known

        info = detect_identity_key(
            left,
            right,
            array_address=reference,
            identity_address=identity,
            config=self.config,
        )
        if info.is_keyed:
            _, _, order = _logical_elements(info, left, right)
            ambiguous = _ambiguous_values(order)
            if ambiguous:
                info = replace(info, ambiguous_values=ambiguous)

        self._memo[identity] = info
        self.identity_keys.append(info)
        return info

    # ------------------------------------------------------------------
    # Single-document detection
    # ------------------------------------------------------------------

    def survey(self, value: Any, identity: IdentityAddress, position: PositionAddress) -> None:
        kind = kind_of(value)
        if kind == ValueKind.OBJECT:
            for name, item in value.items():
                self.survey(item, identity.child_field(name), position.child_field(name))
        elif kind == ValueKind.ARRAY:
            info = self._detect(value, [], identity, position)
            for i, item in enumerate(value):
                if info.is_keyed:
                    step = identity.child_keyed(info.segment_for(info.key_for(item)))  # type: ignore[arg-type]
                else:
                    step = identity.child_index(i)
                self.survey(item, step, position.child_index(i))


def _null_against_missing(left: Any, right: Any) -> bool:
    return (left is None and right is MISSING) or (left is MISSING and right is None)


def _logical_elements(
    info: IdentityKeyInfo, left: list[Any], right: list[Any]
) -> tuple[dict[TypedKey, int], dict[TypedKey, int], list[TypedKey]]:
    """Index both sides by typed key and list the union in walk order.

    Walk order is every left element by left position, then the elements only
    the right side has, by right position.  Keys are unique per side (the
    detector guarantees it), so each key names exactly one logical element.
    """
    left_index: dict[TypedKey, int] = {}
    for i, item in enumerate(left):
        left_index[info.key_for(item)] = i  # type: ignore[index]
    right_index: dict[TypedKey, int] = {}
    for j, item in enumerate(right):
        right_index[info.key_for(item)] = j  # type: ignore[index]

    order = [*left_index, *(key for key in right_index if key not in left_index)]
    return left_index, right_index, order


def _ambiguous_values(
    order: list[TypedKey],
) -> tuple[tuple[tuple[str, ...], tuple[TypedKey, ...]], ...]:
    """Group typed keys whose rendered text collides (``1`` vs ``"1"``).

    Keys in a group are numbered by value kind (null, bool, number, string),
    never by which side they were first seen on, so swapping the documents
    keeps every ``::n`` counter.
    """
    groups: dict[tuple[str, ...], list[TypedKey]] = {}
    for key in order:
        groups.setdefault(render_typed_key(key), []).append(key)
    return tuple(
        (text, tuple(sorted(keys, key=_collision_rank)))
        for text, keys in sorted(groups.items())
        if len(keys) > 1
    )


_KIND_RANK = {kind: rank for rank, kind in enumerate(ValueKind)}


def _collision_rank(key: TypedKey) -> tuple[tuple[int, str], ...]:
    return tuple((_KIND_RANK[kind], repr(value)) for kind, value in key)
