"""Convert between identity-based and position-based addresses.

An IdentityAddress is valid against both documents of a comparison, but the
element it names may sit at a different index in each document, or not exist
at all on one side.  Resolution walks the address against one concrete
document and returns the PositionAddress the node actually occupies there.

"Not there" is a normal answer: every function in this module returns None
instead of raising when a segment cannot be matched, when the document's
shape differs from what the address expects, or when a keyed segment does
not agree with the recorded identity key (stale or fabricated address).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from json_identity_diff.algorithm.identity import IdentityKeyInfo, render_typed_key
from json_identity_diff.paths.addresses import IdentityAddress, PositionAddress
from json_identity_diff.paths.segments import Field, Index, Keyed
from json_identity_diff.tree.nodes import MISSING
from json_identity_diff.tree.walk import child

__all__ = [
    "IdentityKeyIndex",
    "resolve_both_sides",
    "resolve_identity_to_position",
    "resolve_position_to_identity",
]


class IdentityKeyIndex(Mapping[IdentityAddress, IdentityKeyInfo]):
    """Read-only lookup from an array's IdentityAddress to its key record.

    Built once from ``ComparisonResult.identity_keys`` (or any iterable of
    IdentityKeyInfo); the resolvers accept either form.
    """

    def __init__(self, identity_keys: Iterable[IdentityKeyInfo] = ()) -> None:
        self._by_address: dict[IdentityAddress, IdentityKeyInfo] = {
            info.identity_address: info for info in identity_keys
        }

    @classmethod
    def of(
        cls, identity_keys: IdentityKeyIndex | Iterable[IdentityKeyInfo] | None
    ) -> IdentityKeyIndex:
        if isinstance(identity_keys, IdentityKeyIndex):
            return identity_keys
        return cls(identity_keys or ())

    def __getitem__(self, address: IdentityAddress) -> IdentityKeyInfo:
        return self._by_address[address]

    def __iter__(self) -> Iterator[IdentityAddress]:
        return iter(self._by_address)

    def __len__(self) -> int:
        return len(self._by_address)


def _locate_keyed(
    array: list[Any], segment: Keyed, info: IdentityKeyInfo | None
) -> int | None:
    """Index of the element named by ``segment`` in ``array``, or None."""
    if info is None or not info.is_keyed or segment.fields != info.fields:
        return None

    shared = info.occurrences(segment.values)
    if segment.occurrence is not None:
        if segment.occurrence > len(shared):
            return None
        target = shared[segment.occurrence - 1]
        found = [i for i, item in enumerate(array) if info.key_for(item) == target]
    else:
        if shared:
            # The text is ambiguous in this run, so an unnumbered segment is stale.
            return None
        found = [
            i
            for i, item in enumerate(array)
            if (key := info.key_for(item)) is not None
            and render_typed_key(key) == segment.values
        ]
    return found[0] if len(found) == 1 else None


def resolve_identity_to_position(
    address: IdentityAddress,
    document: Any,
    identity_keys: IdentityKeyIndex | Iterable[IdentityKeyInfo] | None = None,
) -> PositionAddress | None:
    """Resolve ``address`` against one concrete document.

    Field segments must name an existing field of an object.  Index segments
    are literal indices into an array.  Keyed segments use the identity key
    recorded for that array's IdentityAddress to find the element on this
    document.

    Args:
        address:       The identity-based address to resolve.
        document:      The document (left or right) to resolve against.
        identity_keys: ``ComparisonResult.identity_keys`` of the run that
                       produced ``address``, or an IdentityKeyIndex.

    Returns:
        The PositionAddress of the node in ``document``, or None when the
        node is absent, the shapes disagree, or the key record is missing or
        does not match the segment.
    """
    index = IdentityKeyIndex.of(identity_keys)
    node = document
    walked = IdentityAddress()
    position = PositionAddress()

    for segment in address.segments:
        if isinstance(segment, Field):
            node = child(node, segment.name)
            position = position.child_field(segment.name)
        elif isinstance(segment, Index):
            node = child(node, segment.index)
            position = position.child_index(segment.index)
        else:
            if not isinstance(node, list):
                return None
            found = _locate_keyed(node, segment, index.get(walked))
            if found is None:
                return None
            node = node[found]
            position = position.child_index(found)
        if node is MISSING:
            return None
        walked = IdentityAddress((*walked.segments, segment))

    return position


def resolve_both_sides(
    address: IdentityAddress,
    left: Any,
    right: Any,
    identity_keys: IdentityKeyIndex | Iterable[IdentityKeyInfo] | None = None,
) -> tuple[PositionAddress | None, PositionAddress | None]:
    """Resolve ``address`` against both documents of a comparison."""
    index = IdentityKeyIndex.of(identity_keys)
    return (
        resolve_identity_to_position(address, left, index),
        resolve_identity_to_position(address, right, index),
    )


def resolve_position_to_identity(
    address: PositionAddress,
    document: Any,
    identity_keys: IdentityKeyIndex | Iterable[IdentityKeyInfo] | None = None,
) -> IdentityAddress | None:
    """Name the node at ``address`` in ``document`` by identity.

    Index steps into arrays that have an identity key become keyed steps;
    steps into positional arrays stay as indices.

    Returns:
        The IdentityAddress, or None when ``address`` does not exist in
        ``document`` or an element of a keyed array has no key value.
    """
    index = IdentityKeyIndex.of(identity_keys)
    node = document
    identity = IdentityAddress()

    for segment in address.segments:
        parent = node
        if isinstance(segment, Field):
            node = child(parent, segment.name)
            if node is MISSING:
                return None
            identity = identity.child_field(segment.name)
            continue

        node = child(parent, segment.index)  # type: ignore[union-attr]
        if node is MISSING:
            return None
        info = index.get(identity)
        if info is None or not info.is_keyed:
            identity = identity.child_index(segment.index)  # type: ignore[union-attr]
            continue
        key = info.key_for(node)
        if key is None:
            return None
        identity = identity.child_keyed(info.segment_for(key))

    return identity
