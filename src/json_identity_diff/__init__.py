"""json-identity-diff - identity-aware structural diff for JSON documents."""

from __future__ import annotations

from json_identity_diff.algorithm.config import ArrayMatchMode, DiffConfig
from json_identity_diff.algorithm.identity import IdentityKeyInfo
from json_identity_diff.api import (
    compare,
    detect_identity_keys,
    generalize,
    is_identical,
    matches,
    resolve_both_sides,
    resolve_identity_to_position,
    resolve_position_to_identity,
)
from json_identity_diff.differ import IdentityDiffer
from json_identity_diff.errors import AddressSyntaxError
from json_identity_diff.ignore import IgnoreList
from json_identity_diff.paths.addresses import (
    ArrayPattern,
    IdentityAddress,
    PositionAddress,
    ScopedAddress,
    Side,
)
from json_identity_diff.paths.resolve import IdentityKeyIndex
from json_identity_diff.result import ComparisonResult, DiffKind, DiffRecord
from json_identity_diff.tree.nodes import MISSING

__version__: str = "0.1.0"
__all__: list[str] = [
    "MISSING",
    "AddressSyntaxError",
    "ArrayMatchMode",
    "ArrayPattern",
    "ComparisonResult",
    "DiffConfig",
    "DiffKind",
    "DiffRecord",
    "IdentityAddress",
    "IdentityDiffer",
    "IdentityKeyIndex",
    "IdentityKeyInfo",
    "IgnoreList",
    "PositionAddress",
    "ScopedAddress",
    "Side",
    "compare",
    "detect_identity_keys",
    "generalize",
    "is_identical",
    "matches",
    "resolve_both_sides",
    "resolve_identity_to_position",
    "resolve_position_to_identity",
]
