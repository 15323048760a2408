"""Address generalisation and segment-wise glob matching.

``generalize`` turns a concrete address into an ArrayPattern by replacing
every index or keyed segment with ``[]``, so identity keys discovered at
structurally equivalent locations can be grouped.

``matches`` implements the pattern language behind ignore lists::

    items.*.v        exactly three segments; the middle one is anything
    items[*].v       the middle segment must be a bracket (index or keyed)
    items[id=b].v    literal segments only
    items[id=b]*     items[id=b] itself or anything nested under it

A ``*`` glued to the end of the preceding segment makes a prefix pattern.
Without one, pattern and address must have the same number of segments.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cachetools import LRUCache, cached

from json_identity_diff.paths.addresses import (
    ArrayPattern,
    IdentityAddress,
    PositionAddress,
)
from json_identity_diff.paths.segments import (
    AnyElement,
    Field,
    Segment,
    Star,
    is_bracket,
    render,
    scan,
)

if TYPE_CHECKING:
    from json_identity_diff.algorithm.identity import IdentityKeyInfo

__all__ = [
    "AddressPattern",
    "compile_pattern",
    "generalize",
    "group_by_pattern",
    "matches",
]


def generalize(address: IdentityAddress | PositionAddress) -> ArrayPattern:
    """Replace every index/keyed segment of ``address`` with ``[]``.

    Example::

        generalize(IdentityAddress.parse("orders[id=7].lines[sku=A::2].qty"))
        # ArrayPattern('orders[].lines[].qty')
    """
    return ArrayPattern(
        tuple(seg if isinstance(seg, Field) else AnyElement() for seg in address.segments)
    )


def group_by_pattern(
    identity_keys: Iterable[IdentityKeyInfo],
) -> dict[ArrayPattern, list[IdentityKeyInfo]]:
    """Group identity-key records by the ArrayPattern of their array.

    Insertion order follows the first occurrence of each pattern.
    """
    groups: dict[ArrayPattern, list[IdentityKeyInfo]] = {}
    for info in identity_keys:
        groups.setdefault(generalize(info.identity_address), []).append(info)
    return groups


def _matches_segment(pattern: Segment, segment: Segment) -> bool:
    if isinstance(pattern, Star):
        return not pattern.bracket_only or is_bracket(segment)
    if isinstance(pattern, AnyElement):
        return is_bracket(segment)
    return pattern == segment


@dataclass(frozen=True, slots=True)
class AddressPattern:
    """A compiled ignore/selection pattern.

    Attributes:
        text:     Pattern text as written.
        segments: Literal segments, ``Star`` globs and ``AnyElement`` (``[]``
                  behaves like ``[*]`` so ArrayPatterns can be used as-is).
        prefix:   True when the pattern ended with a glued ``*``.
    """

    text: str
    segments: tuple[Segment, ...]
    prefix: bool = False

    def matches(self, address: IdentityAddress | PositionAddress) -> bool:
        segments = address.segments
        n = len(self.segments)
        if self.prefix:
            if len(segments) < n:
                return False
        elif len(segments) != n:
            return False
        return all(
            _matches_segment(p, s) for p, s in zip(self.segments, segments[:n], strict=True)
        )

    def __str__(self) -> str:
        return self.text


def _trailing_backslashes(text: str) -> int:
    return len(text) - len(text.rstrip("\\"))


def _has_glued_star(text: str) -> bool:
    if len(text) < 2 or not text.endswith("*"):
        return False
    body = text[:-1]
    if _trailing_backslashes(body) % 2:
        return False
    if body.endswith("."):
        # Only an escaped dot can carry a glued star.
        return _trailing_backslashes(body[:-1]) % 2 == 1
    return True


@cached(cache=LRUCache(maxsize=256), lock=threading.Lock())
def compile_pattern(text: str) -> AddressPattern:
    """Parse pattern text into an AddressPattern.

    Compiled patterns are cached process-wide behind a lock, so patterns
    can be compiled from several threads at once.

    Raises:
        AddressSyntaxError: If the pattern is malformed.
    """
    if _has_glued_star(text):
        return AddressPattern(text, scan(text[:-1], "pattern", globs=True), prefix=True)
    return AddressPattern(text, scan(text, "pattern", globs=True))


def matches(
    address: IdentityAddress | PositionAddress,
    pattern: str | AddressPattern | ArrayPattern,
) -> bool:
    """Return True if ``address`` matches ``pattern``.

    Args:
        address: A PositionAddress or IdentityAddress.
        pattern: Pattern text, a compiled AddressPattern, or an ArrayPattern
                 (its ``[]`` segments match any single bracket segment).

    Raises:
        TypeError: If ``address`` is not a Position or Identity address.
        AddressSyntaxError: If ``pattern`` text is malformed.
    """
    if not isinstance(address, (IdentityAddress, PositionAddress)):
        raise TypeError(
            f"matches() needs a PositionAddress or IdentityAddress, got {type(address)!r}"
        )
    if isinstance(pattern, ArrayPattern):
        compiled = AddressPattern(render(pattern.segments), pattern.segments)
    elif isinstance(pattern, AddressPattern):
        compiled = pattern
    else:
        compiled = compile_pattern(pattern)
    return compiled.matches(address)
