"""Identity-key detection for arrays of record-like objects.

Given the two arrays found at the same logical location in both documents,
propose the field (or smallest field combination) whose values identify each
element on both sides, so that elements can be matched by identity instead of
by index.

Detection never raises.  When nothing qualifies the array is compared by
position and the returned ``IdentityKeyInfo`` simply has ``key=None``.

Algorithm:
1. Positional when the mode is POSITIONAL, when neither side reaches
   ``min_keyed_length`` elements, or when any element is not an object.
2. Candidates are fields holding a primitive on at least one element, in
   first-declaration order (first left element first).
3. A simple key must be present with a primitive value on every element of
   both sides (numpy presence matrix), unique per side, and overlap enough
   between sides.
4. Otherwise ordered pairs, then triples, of the leading fully-covered
   candidates are tried with the same test.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from json_identity_diff.algorithm.config import ArrayMatchMode, DiffConfig
from json_identity_diff.paths.patterns import generalize
from json_identity_diff.paths.segments import Keyed, render_key_value
from json_identity_diff.tree.nodes import SCALAR_KINDS, ValueKind
from json_identity_diff.tree.walk import kind_of

if TYPE_CHECKING:
    from json_identity_diff.paths.addresses import (
        ArrayPattern,
        IdentityAddress,
        PositionAddress,
    )

logger = logging.getLogger(__name__)

__all__ = ["IdentityKeyInfo", "TypedKey", "detect_identity_key", "typed_key"]

# One (kind, value) pair per key field.  Kinds keep 1 and "1" apart.
TypedKey = tuple[tuple[ValueKind, Any], ...]


def _typed(value: Any) -> tuple[ValueKind, Any]:
    kind = kind_of(value)
    if kind == ValueKind.NUMBER and isinstance(value, float) and math.isnan(value):
        return kind, "nan"
    return kind, value


def typed_key(element: Any, fields: Sequence[str]) -> TypedKey | None:
    """Typed identity of ``element`` under ``fields``.

    Returns None when the element is not an object or lacks a primitive value
    for any of the fields.
    """
    if not isinstance(element, dict):
        return None
    parts: list[tuple[ValueKind, Any]] = []
    for name in fields:
        if name not in element or kind_of(element[name]) not in SCALAR_KINDS:
            return None
        parts.append(_typed(element[name]))
    return tuple(parts)


def render_typed_key(key: TypedKey) -> tuple[str, ...]:
    """Rendered address text of each part of a typed key."""
    return tuple(render_key_value(value) for _, value in key)


@dataclass(frozen=True, slots=True)
class IdentityKeyInfo:
    """Identity-key decision for one array location in one comparison run.

    Attributes:
        array_address:    PositionAddress of the array in the reference
                          document (left when present there, else right).
        identity_address: IdentityAddress of the array; the lookup key used
                          when resolving keyed segments.
        key:              Field name, tuple of field names for a composite
                          key, or None when the array is compared by position.
        is_composite:     True for multi-field keys.
        size_left:        Element count on the left (0 when absent).
        size_right:       Element count on the right (0 when absent).
        ambiguous_values: ``(rendered values, typed keys)`` pairs for logical
                          elements whose keys render identically; the position
                          of a typed key in its tuple is its ``::n`` counter
                          minus one.
    """

    array_address: PositionAddress
    identity_address: IdentityAddress
    key: str | tuple[str, ...] | None
    is_composite: bool
    size_left: int
    size_right: int
    ambiguous_values: tuple[tuple[tuple[str, ...], tuple[TypedKey, ...]], ...] = ()

    @property
    def fields(self) -> tuple[str, ...]:
        if self.key is None:
            return ()
        if isinstance(self.key, str):
            return (self.key,)
        return self.key

    @property
    def is_keyed(self) -> bool:
        return self.key is not None

    @property
    def label(self) -> str | None:
        """Display form of the key: ``"id"`` or ``"region+sku"``."""
        return "+".join(self.fields) if self.key is not None else None

    @property
    def pattern(self) -> ArrayPattern:
        return generalize(self.identity_address)

    def key_for(self, element: Any) -> TypedKey | None:
        return typed_key(element, self.fields) if self.key is not None else None

    def occurrences(self, rendered: tuple[str, ...]) -> tuple[TypedKey, ...]:
        """Typed keys sharing ``rendered`` text, in ``::n`` order (may be empty)."""
        for text, keys in self.ambiguous_values:
            if text == rendered:
                return keys
        return ()

    def segment_for(self, key: TypedKey) -> Keyed:
        """IdentityAddress segment naming the logical element with ``key``."""
        rendered = render_typed_key(key)
        shared = self.occurrences(rendered)
        occurrence = shared.index(key) + 1 if key in shared else None
        return Keyed(tuple(zip(self.fields, rendered, strict=True)), occurrence)


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def _candidate_fields(items: Sequence[dict[str, Any]]) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        for name, value in item.items():
            if name not in seen and kind_of(value) in SCALAR_KINDS:
                seen[name] = None
    return list(seen)


def _presence(items: Sequence[dict[str, Any]], candidates: list[str]) -> np.ndarray:
    """Boolean matrix (elements x candidates): field present with a primitive."""
    matrix = np.zeros((len(items), len(candidates)), dtype=bool)
    for i, item in enumerate(items):
        for j, name in enumerate(candidates):
            matrix[i, j] = name in item and kind_of(item[name]) in SCALAR_KINDS
    return matrix


def _qualifies(
    fields: tuple[str, ...],
    left: Sequence[dict[str, Any]],
    right: Sequence[dict[str, Any]],
    min_overlap: float,
) -> bool:
    value_sets: list[set[TypedKey]] = []
    for items in (left, right):
        keys = [typed_key(item, fields) for item in items]
        unique = {k for k in keys if k is not None}
        if len(unique) != len(keys):
            return False
        value_sets.append(unique)

    left_keys, right_keys = value_sets
    if left_keys and right_keys:
        smaller = min(len(left_keys), len(right_keys))
        if len(left_keys & right_keys) / smaller < min_overlap:
            return False
    return True


def _find_key(
    left: list[Any], right: list[Any], config: DiffConfig
) -> tuple[str, ...] | None:
    if config.array_match_mode == ArrayMatchMode.POSITIONAL:
        return None
    if max(len(left), len(right)) < max(config.min_keyed_length, 1):
        return None
    if not all(isinstance(item, dict) for item in itertools.chain(left, right)):
        return None

    candidates = _candidate_fields([*left, *right])
    if not candidates:
        return None

    covered = _presence(left, candidates).all(axis=0) & _presence(
        right, candidates
    ).all(axis=0)
    pool = [name for name, ok in zip(candidates, covered.tolist(), strict=True) if ok]

    for name in pool:
        if _qualifies((name,), left, right, config.min_key_overlap):
            return (name,)

    limited = pool[: config.max_composite_fields]
    for arity in range(2, config.max_composite_arity + 1):
        for combo in itertools.combinations(limited, arity):
            if _qualifies(combo, left, right, config.min_key_overlap):
                return combo
    return None


def detect_identity_key(
    left: Any,
    right: Any,
    *,
    array_address: PositionAddress,
    identity_address: IdentityAddress,
    config: DiffConfig | None = None,
) -> IdentityKeyInfo:
    """Propose an identity key for two arrays at the same logical location.

    Args:
        left:             Left array; anything that is not a list counts as
                          an empty array.
        right:            Right array, same convention.
        array_address:    PositionAddress of the array in the reference
                          document.
        identity_address: IdentityAddress of the array.
        config:           Engine configuration. Defaults to ``DiffConfig()``.

    Returns:
        An ``IdentityKeyInfo``; ``key`` is None when the array must be
        compared by position.
    """
    cfg = config if config is not None else DiffConfig()
    left_items = left if isinstance(left, list) else []
    right_items = right if isinstance(right, list) else []

    fields = _find_key(left_items, right_items, cfg)
    if fields is None:
        logger.debug("array %r: no identity key, comparing by position", str(identity_address))
        key: str | tuple[str, ...] | None = None
    else:
        key = fields[0] if len(fields) == 1 else fields
        logger.debug("array %r: identity key %s", str(identity_address), "+".join(fields))

    return IdentityKeyInfo(
        array_address=array_address,
        identity_address=identity_address,
        key=key,
        is_composite=fields is not None and len(fields) > 1,
        size_left=len(left_items),
        size_right=len(right_items),
    )
