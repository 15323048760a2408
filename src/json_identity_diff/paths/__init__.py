"""Paths subpackage: address values, the text grammar and pattern matching.

Re-exports the public API for the paths module:
- PositionAddress / IdentityAddress / ArrayPattern / ScopedAddress: typed addresses
- Side: which document a ScopedAddress refers to
- Field / Index / Keyed / AnyElement / Star: address segments
- generalize / matches / compile_pattern: pattern helpers

Resolution between address kinds lives in ``json_identity_diff.paths.resolve``
and is re-exported from the top-level package.
"""

from json_identity_diff.paths.addresses import (
    ArrayPattern,
    IdentityAddress,
    PositionAddress,
    ScopedAddress,
    Side,
    validate_array_pattern,
    validate_identity_address,
    validate_position_address,
    validate_scoped_address,
)
from json_identity_diff.paths.patterns import (
    AddressPattern,
    compile_pattern,
    generalize,
    group_by_pattern,
    matches,
)
from json_identity_diff.paths.segments import (
    AnyElement,
    Field,
    Index,
    Keyed,
    Segment,
    Star,
    render_key_value,
)

__all__ = [
    "AddressPattern",
    "AnyElement",
    "ArrayPattern",
    "Field",
    "IdentityAddress",
    "Index",
    "Keyed",
    "PositionAddress",
    "ScopedAddress",
    "Segment",
    "Side",
    "Star",
    "compile_pattern",
    "generalize",
    "group_by_pattern",
    "matches",
    "render_key_value",
    "validate_array_pattern",
    "validate_identity_address",
    "validate_position_address",
    "validate_scoped_address",
]
