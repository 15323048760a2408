"""Kind dispatch and generic walks over plain JSON values.

``kind_of`` is the single exhaustive dispatch point over the JSON sum type.
Every other helper in the package goes through it, so a new value kind only
has to be taught here.

Paths produced by ``iter_nodes`` and ``fold`` are tuples of raw steps: ``str``
for an object field and ``int`` for an array index.  Rendering them as
addresses is the job of ``json_identity_diff.paths``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from json_identity_diff.tree.nodes import MISSING, SCALAR_KINDS, Missing, ValueKind

T = TypeVar("T")

Step = str | int


def kind_of(value: Any) -> ValueKind:
    """Return the ValueKind of a JSON value.

    Raises:
        TypeError: If value is not a valid JSON type (including MISSING).
    """
    # bool subclasses int, so it must be checked first.
    if isinstance(value, bool):
        return ValueKind.BOOL
    if value is None:
        return ValueKind.NULL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY

    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def is_scalar(value: Any) -> bool:
    """True for null, bool, number and string values."""
    return kind_of(value) in SCALAR_KINDS


def is_container(value: Any) -> bool:
    """True for objects and arrays."""
    return kind_of(value) not in SCALAR_KINDS


def scalar_equal(a: Any, b: Any) -> bool:
    """Kind-aware scalar equality.

    ``True`` and ``1`` differ (different kinds), ``1`` and ``1.0`` are equal,
    and NaN equals NaN so that comparing a document with itself is clean.
    """
    kind = kind_of(a)
    if kind != kind_of(b):
        return False
    if kind == ValueKind.NUMBER and a != b:
        return math.isnan(a) and math.isnan(b)
    return bool(a == b)


def child(value: Any, step: Step) -> Any | Missing:
    """Look up a child by field name or array index.

    Returns MISSING when the child does not exist or when the container kind
    does not fit the step (a field on an array, an index on an object, any
    step on a scalar).  Negative indices are never honoured.
    """
    if isinstance(step, str):
        if isinstance(value, dict) and step in value:
            return value[step]
        return MISSING
    if isinstance(step, bool):
        return MISSING
    if isinstance(value, list) and 0 <= step < len(value):
        return value[step]
    return MISSING


def iter_nodes(
    value: Any, path: tuple[Step, ...] = ()
) -> Iterator[tuple[tuple[Step, ...], Any]]:
    """Yield ``(path, node)`` for every node in pre-order, root first."""
    yield path, value
    kind = kind_of(value)
    if kind == ValueKind.OBJECT:
        for name, item in value.items():
            yield from iter_nodes(item, (*path, name))
    elif kind == ValueKind.ARRAY:
        for idx, item in enumerate(value):
            yield from iter_nodes(item, (*path, idx))


def fold(
    value: Any,
    fn: Callable[[T, tuple[Step, ...], Any], T],
    initial: T,
) -> T:
    """Left fold ``fn(acc, path, node)`` over every node in pre-order."""
    acc = initial
    for path, node in iter_nodes(value):
        acc = fn(acc, path, node)
    return acc


def count_nodes(value: Any) -> int:
    """Number of nodes (containers and scalars) in a document."""
    return fold(value, lambda acc, _path, _node: acc + 1, 0)
