"""DiffRecord and ComparisonResult dataclasses for diff output.

This module provides the rich result type returned by compare() calls.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from json_identity_diff.algorithm.identity import IdentityKeyInfo
from json_identity_diff.paths.addresses import (
    ArrayPattern,
    IdentityAddress,
    PositionAddress,
    ScopedAddress,
    Side,
)
from json_identity_diff.paths.patterns import generalize
from json_identity_diff.paths.resolve import IdentityKeyIndex
from json_identity_diff.tree.nodes import MISSING

if TYPE_CHECKING:
    from json_identity_diff.ignore import IgnoreList

__all__ = ["ComparisonResult", "DiffKind", "DiffRecord"]


class DiffKind(StrEnum):
    """Kind of a detected difference.

    - ADDED:   present on the right only.
    - REMOVED: present on the left only.
    - CHANGED: present on both sides with different values.
    """

    ADDED = auto()
    REMOVED = auto()
    CHANGED = auto()

    @property
    def mirrored(self) -> DiffKind:
        """The kind seen when left and right are swapped."""
        if self is DiffKind.ADDED:
            return DiffKind.REMOVED
        if self is DiffKind.REMOVED:
            return DiffKind.ADDED
        return self


@dataclass(frozen=True, slots=True)
class DiffRecord:
    """One detected difference.

    Attributes:
        kind:             ADDED, REMOVED or CHANGED.
        identity_address: Stable address of the node across both documents.
        left_address:     Position of the node in the left document; None when
                          the node does not exist there (ADDED).
        right_address:    Position of the node in the right document; None
                          when the node does not exist there (REMOVED).
        old_value:        Left value; MISSING for ADDED.
        new_value:        Right value; MISSING for REMOVED.
    """

    kind: DiffKind
    identity_address: IdentityAddress
    left_address: PositionAddress | None = None
    right_address: PositionAddress | None = None
    old_value: Any = field(default=MISSING, hash=False)
    new_value: Any = field(default=MISSING, hash=False)

    def address_on(self, side: Side) -> PositionAddress | None:
        return self.left_address if side is Side.LEFT else self.right_address

    def scoped(self, side: Side) -> ScopedAddress | None:
        """Position address tagged with its document, or None if absent there."""
        address = self.address_on(side)
        return None if address is None else address.scoped(side)

    @property
    def pattern(self) -> ArrayPattern:
        return generalize(self.identity_address)

    def swapped(self) -> DiffRecord:
        """The record ``compare(right, left)`` reports for the same node."""
        return DiffRecord(
            kind=self.kind.mirrored,
            identity_address=self.identity_address,
            left_address=self.right_address,
            right_address=self.left_address,
            old_value=self.new_value,
            new_value=self.old_value,
        )

    def __str__(self) -> str:
        where = str(self.identity_address) or "<root>"
        if self.kind is DiffKind.ADDED:
            return f"added {where}: {self.new_value!r}"
        if self.kind is DiffKind.REMOVED:
            return f"removed {where}: {self.old_value!r}"
        return f"changed {where}: {self.old_value!r} -> {self.new_value!r}"


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Rich result of a compare() call.

    Attributes:
        diffs: Differences in deterministic pre-order: object fields in left
            declaration order then right-only fields; array elements in left
            order then right-only elements.
        identity_keys: One IdentityKeyInfo per array location visited, keyed
            or not, in visiting order.
        computation_time_ms: Wall-clock duration of the comparison in
            milliseconds.
    """

    diffs: tuple[DiffRecord, ...]
    identity_keys: tuple[IdentityKeyInfo, ...]
    computation_time_ms: float

    @property
    def is_identical(self) -> bool:
        return not self.diffs

    @property
    def keyed_arrays(self) -> tuple[IdentityKeyInfo, ...]:
        """Only the arrays that were matched by an identity key."""
        return tuple(info for info in self.identity_keys if info.is_keyed)

    def key_index(self) -> IdentityKeyIndex:
        """Lookup table for the resolvers in ``json_identity_diff.paths``."""
        return IdentityKeyIndex(self.identity_keys)

    def counts(self) -> dict[DiffKind, int]:
        tally = Counter(d.kind for d in self.diffs)
        return {kind: tally.get(kind, 0) for kind in DiffKind}

    def by_kind(self, kind: DiffKind) -> tuple[DiffRecord, ...]:
        return tuple(d for d in self.diffs if d.kind is kind)

    def without(self, ignore: IgnoreList) -> ComparisonResult:
        """Copy of this result with every ignored diff removed."""
        return replace(self, diffs=tuple(ignore.filter(self.diffs)))
