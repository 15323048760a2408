"""Algorithm subpackage: engine configuration and identity-key detection."""

from json_identity_diff.algorithm.config import ArrayMatchMode, DiffConfig
from json_identity_diff.algorithm.identity import (
    IdentityKeyInfo,
    TypedKey,
    detect_identity_key,
    typed_key,
)

__all__ = [
    "ArrayMatchMode",
    "DiffConfig",
    "IdentityKeyInfo",
    "TypedKey",
    "detect_identity_key",
    "typed_key",
]
