"""Typed address values: PositionAddress, IdentityAddress, ScopedAddress, ArrayPattern.

The kinds are deliberately distinct classes.  Dataclass equality compares the
concrete class, so ``PositionAddress.parse("a") != IdentityAddress.parse("a")``
and a type checker rejects passing one where the other is expected.

- PositionAddress: field names and literal indices.  Meaningful against one
  specific document only.
- IdentityAddress: field names, literal indices and ``[key=value]`` steps.
  Meaningful against either document (or resolves to absent).
- ScopedAddress:   a PositionAddress tagged with the document (left/right)
  it was resolved against.
- ArrayPattern:    field names and ``[]``.  Groups structurally equivalent
  array locations regardless of which element was addressed.

Every constructor validates its segments; ``parse`` validates text.  An
address object that exists is always well-formed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any, ClassVar, Self

from json_identity_diff.errors import AddressSyntaxError
from json_identity_diff.paths.segments import (
    AnyElement,
    Field,
    Index,
    Keyed,
    Segment,
    render,
    scan,
)

__all__ = [
    "ArrayPattern",
    "IdentityAddress",
    "PositionAddress",
    "ScopedAddress",
    "Side",
    "validate_array_pattern",
    "validate_identity_address",
    "validate_position_address",
    "validate_scoped_address",
]


class Side(StrEnum):
    """Which of the two compared documents an address belongs to."""

    LEFT = auto()
    RIGHT = auto()

    @property
    def opposite(self) -> Side:
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


@dataclass(frozen=True, slots=True)
class _Address:
    segments: tuple[Segment, ...] = ()

    _allowed: ClassVar[tuple[type, ...]] = ()
    _kind: ClassVar[str] = "address"

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            # Accept any iterable of segments but store a tuple.
            object.__setattr__(self, "segments", tuple(self.segments))
        for seg in self.segments:
            if not isinstance(seg, self._allowed):
                msg = f"{type(seg).__name__} segment is not allowed in a {self._kind}"
                raise TypeError(msg)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse address text, raising AddressSyntaxError when malformed."""
        segments = scan(text, cls._kind)
        for seg in segments:
            if not isinstance(seg, cls._allowed):
                raise AddressSyntaxError(
                    text,
                    max(text.find(seg.text()), 0),
                    f"{seg.text()!r} is not allowed here",
                    cls._kind,
                )
        return cls(segments)

    def __str__(self) -> str:
        return render(self.segments)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __len__(self) -> int:
        return len(self.segments)

    def __bool__(self) -> bool:
        # The root address has no segments but is still a real address.
        return True

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def last(self) -> Segment | None:
        return self.segments[-1] if self.segments else None

    @property
    def parent(self) -> Self | None:
        """Address one segment up; None for the root."""
        if not self.segments:
            return None
        return type(self)(self.segments[:-1])

    def child_field(self, name: str) -> Self:
        return type(self)((*self.segments, Field(name)))

    def child_index(self, index: int) -> Self:
        return type(self)((*self.segments, Index(index)))

    def startswith(self, prefix: Self) -> bool:
        """True when ``prefix`` is this address or one of its ancestors."""
        n = len(prefix.segments)
        return self.segments[:n] == prefix.segments


@dataclass(frozen=True, slots=True, repr=False)
class PositionAddress(_Address):
    """Field names and literal indices, e.g. ``items[1].v``."""

    _allowed: ClassVar[tuple[type, ...]] = (Field, Index)
    _kind: ClassVar[str] = "position address"

    @property
    def steps(self) -> tuple[str | int, ...]:
        """Raw steps usable with ``json_identity_diff.tree.child``."""
        return tuple(
            seg.name if isinstance(seg, Field) else seg.index  # type: ignore[union-attr]
            for seg in self.segments
        )

    @classmethod
    def from_steps(cls, steps: tuple[str | int, ...]) -> PositionAddress:
        return cls(tuple(Field(s) if isinstance(s, str) else Index(s) for s in steps))

    def scoped(self, side: Side) -> ScopedAddress:
        return ScopedAddress(side, self)


@dataclass(frozen=True, slots=True, repr=False)
class IdentityAddress(_Address):
    """Field names, literal indices and identity steps, e.g. ``items[id=b].v``."""

    _allowed: ClassVar[tuple[type, ...]] = (Field, Index, Keyed)
    _kind: ClassVar[str] = "identity address"

    def child_keyed(self, segment: Keyed) -> IdentityAddress:
        return IdentityAddress((*self.segments, segment))

    @property
    def is_positional(self) -> bool:
        """True when no segment uses an identity key."""
        return not any(isinstance(seg, Keyed) for seg in self.segments)

    def to_position(self) -> PositionAddress | None:
        """The same path as a PositionAddress, or None if any step is keyed."""
        if not self.is_positional:
            return None
        return PositionAddress(self.segments)

    @classmethod
    def from_position(cls, address: PositionAddress) -> IdentityAddress:
        """Index steps are valid identity steps, so this always succeeds."""
        return cls(address.segments)


@dataclass(frozen=True, slots=True, repr=False)
class ArrayPattern(_Address):
    """Field names and ``[]`` wildcards, e.g. ``orders[].lines[]``."""

    _allowed: ClassVar[tuple[type, ...]] = (Field, AnyElement)
    _kind: ClassVar[str] = "array pattern"

    @property
    def depth(self) -> int:
        """Number of array levels in the pattern."""
        return sum(isinstance(seg, AnyElement) for seg in self.segments)

    @property
    def target_field(self) -> str | None:
        """Field holding the innermost array (``lines`` for ``orders[].lines[]``)."""
        for i in range(len(self.segments) - 1, 0, -1):
            seg, before = self.segments[i], self.segments[i - 1]
            if isinstance(seg, AnyElement) and isinstance(before, Field):
                return before.name
        return None

    @property
    def parent_pattern(self) -> ArrayPattern | None:
        """Pattern of the enclosing array level, ending in ``[]``.

        ``orders[].lines[]`` -> ``orders[]``; None when there is no outer array.
        """
        marks = [i for i, seg in enumerate(self.segments) if isinstance(seg, AnyElement)]
        if self.segments and isinstance(self.segments[-1], AnyElement):
            marks = marks[:-1]
        if not marks:
            return None
        return ArrayPattern(self.segments[: marks[-1] + 1])


@dataclass(frozen=True, slots=True)
class ScopedAddress:
    """A PositionAddress bound to the document it was resolved against.

    Text form is ``"<side>:<address>"``, e.g. ``"left:items[0].v"``.
    """

    side: Side
    address: PositionAddress

    def __post_init__(self) -> None:
        if not isinstance(self.address, PositionAddress):
            msg = f"ScopedAddress needs a PositionAddress, got {type(self.address).__name__}"
            raise TypeError(msg)
        object.__setattr__(self, "side", Side(self.side))

    @classmethod
    def parse(cls, text: str) -> ScopedAddress:
        if not isinstance(text, str):
            raise TypeError(f"scoped address must be a str, got {type(text)!r}")
        side, sep, rest = text.partition(":")
        if not sep or side not in {s.value for s in Side}:
            raise AddressSyntaxError(
                text, 0, "must start with 'left:' or 'right:'", "scoped address"
            )
        try:
            address = PositionAddress.parse(rest)
        except AddressSyntaxError as exc:
            raise AddressSyntaxError(
                text,
                exc.position + len(side) + 1,
                exc.reason,
                "scoped address",
            ) from exc
        return cls(Side(side), address)

    def __str__(self) -> str:
        return f"{self.side}:{self.address}"


# ---------------------------------------------------------------------------
# Validators (fail fast at construction)
# ---------------------------------------------------------------------------


def _validate(cls: Any, value: Any) -> Any:
    if isinstance(value, cls):
        return value
    return cls.parse(value)


def validate_position_address(text: str | PositionAddress) -> PositionAddress:
    """Parse ``text`` as a PositionAddress.

    Raises:
        AddressSyntaxError: If ``text`` is malformed or contains keyed or
            wildcard segments.
    """
    return _validate(PositionAddress, text)  # type: ignore[no-any-return]


def validate_identity_address(text: str | IdentityAddress) -> IdentityAddress:
    """Parse ``text`` as an IdentityAddress.

    Raises:
        AddressSyntaxError: If ``text`` is malformed or contains wildcards.
    """
    return _validate(IdentityAddress, text)  # type: ignore[no-any-return]


def validate_scoped_address(text: str | ScopedAddress) -> ScopedAddress:
    """Parse ``text`` as a ScopedAddress (``"left:..."`` / ``"right:..."``)."""
    return _validate(ScopedAddress, text)  # type: ignore[no-any-return]


def validate_array_pattern(text: str | ArrayPattern) -> ArrayPattern:
    """Parse ``text`` as an ArrayPattern (fields and ``[]`` only)."""
    return _validate(ArrayPattern, text)  # type: ignore[no-any-return]
