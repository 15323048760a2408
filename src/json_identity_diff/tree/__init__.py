"""Tree subpackage: the JSON value model and generic walks.

Re-exports the public API for the tree module:
- JsonValue: type alias for plain Python JSON values
- ValueKind: StrEnum of the six value kinds
- MISSING: sentinel for "no node here" (distinct from JSON null)
- kind_of / child / fold / iter_nodes: dispatch and traversal helpers
"""

from json_identity_diff.tree.nodes import MISSING, JsonValue, Missing, ValueKind
from json_identity_diff.tree.walk import (
    child,
    count_nodes,
    fold,
    is_container,
    is_scalar,
    iter_nodes,
    kind_of,
    scalar_equal,
)

__all__ = [
    "MISSING",
    "JsonValue",
    "Missing",
    "ValueKind",
    "child",
    "count_nodes",
    "fold",
    "is_container",
    "is_scalar",
    "iter_nodes",
    "kind_of",
    "scalar_equal",
]
