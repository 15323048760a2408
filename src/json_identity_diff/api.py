"""Public API functions for json-identity-diff.

This module provides the user-facing functions: compare, detect_identity_keys,
is_identical, the address resolvers, generalize and matches.  Each comparing
call creates a fresh IdentityDiffer to guarantee zero global state mutation
between calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from json_identity_diff.algorithm.config import DiffConfig
from json_identity_diff.algorithm.identity import IdentityKeyInfo
from json_identity_diff.differ import IdentityDiffer
from json_identity_diff.paths.addresses import (
    IdentityAddress,
    PositionAddress,
    validate_identity_address,
    validate_position_address,
)
from json_identity_diff.paths.patterns import generalize, matches
from json_identity_diff.paths.resolve import IdentityKeyIndex
from json_identity_diff.paths.resolve import (
    resolve_both_sides as _resolve_both_sides,
)
from json_identity_diff.paths.resolve import (
    resolve_identity_to_position as _resolve_identity_to_position,
)
from json_identity_diff.paths.resolve import (
    resolve_position_to_identity as _resolve_position_to_identity,
)
from json_identity_diff.result import ComparisonResult

__all__ = [
    "compare",
    "detect_identity_keys",
    "generalize",
    "is_identical",
    "matches",
    "resolve_both_sides",
    "resolve_identity_to_position",
    "resolve_position_to_identity",
]

IdentityKeys = IdentityKeyIndex | Iterable[IdentityKeyInfo] | None


def compare(
    left: Any,
    right: Any,
    config: DiffConfig | None = None,
) -> ComparisonResult:
    """Compare two JSON values and return a rich ComparisonResult.

    Creates a fresh ``IdentityDiffer`` per call to guarantee zero global state
    mutation between calls.

    Args:
        left:   Left JSON value (dict, list, str, int, float, bool, None).
        right:  Right JSON value.
        config: Engine parameters. Defaults to ``DiffConfig()`` when None.

    Returns:
        A ``ComparisonResult`` with diffs, identity_keys and
        computation_time_ms populated.

    Raises:
        TypeError: If either document contains a non-JSON value.
    """
    return IdentityDiffer(config=config).compare(left, right)


def detect_identity_keys(
    document: Any,
    config: DiffConfig | None = None,
) -> tuple[IdentityKeyInfo, ...]:
    """Run identity-key detection over every array of a single document.

    Useful for previewing how a document's arrays would be matched before
    comparing it against anything.

    Args:
        document: Any JSON value.
        config:   Engine parameters. Defaults to ``DiffConfig()`` when None.

    Returns:
        One ``IdentityKeyInfo`` per array location, in pre-order.
    """
    return IdentityDiffer(config=config).survey(document)


def is_identical(
    left: Any,
    right: Any,
    config: DiffConfig | None = None,
) -> bool:
    """Return True if comparing the two values reports no differences."""
    return compare(left, right, config=config).is_identical


def resolve_identity_to_position(
    address: str | IdentityAddress,
    document: Any,
    identity_keys: IdentityKeys = None,
) -> PositionAddress | None:
    """Resolve an identity address (object or text) against one document.

    Args:
        address:       IdentityAddress or its text form.
        document:      The left or right document of the comparison.
        identity_keys: ``ComparisonResult.identity_keys`` of that comparison.

    Returns:
        The node's PositionAddress in ``document``, or None when it is absent.

    Raises:
        AddressSyntaxError: If ``address`` is malformed text.
    """
    return _resolve_identity_to_position(
        validate_identity_address(address), document, identity_keys
    )


def resolve_both_sides(
    address: str | IdentityAddress,
    left: Any,
    right: Any,
    identity_keys: IdentityKeys = None,
) -> tuple[PositionAddress | None, PositionAddress | None]:
    """Resolve an identity address against both documents of a comparison.

    Raises:
        AddressSyntaxError: If ``address`` is malformed text.
    """
    return _resolve_both_sides(validate_identity_address(address), left, right, identity_keys)


def resolve_position_to_identity(
    address: str | PositionAddress,
    document: Any,
    identity_keys: IdentityKeys = None,
) -> IdentityAddress | None:
    """Name the node at a position address by identity.

    Raises:
        AddressSyntaxError: If ``address`` is malformed text.
    """
    return _resolve_position_to_identity(
        validate_position_address(address), document, identity_keys
    )
