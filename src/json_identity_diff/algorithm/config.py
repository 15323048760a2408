"""DiffConfig and ArrayMatchMode for identity-aware diff configuration.

DiffConfig is a frozen (immutable) dataclass holding the engine parameters.
ArrayMatchMode selects how arrays are aligned: by detected identity key
(falling back to position) or always by position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto


class ArrayMatchMode(StrEnum):
    """How to align JSON arrays during comparison.

    - AUTO:       Detect an identity key per array; fall back to position.
    - POSITIONAL: Always compare index-by-index (no detection).
    """

    AUTO = auto()
    POSITIONAL = auto()


@dataclass(frozen=True, slots=True)
class DiffConfig:
    """Immutable configuration for the diff engine.

    Attributes:
        array_match_mode: How arrays are aligned.
        min_keyed_length: Key detection is only attempted when at least one
            side has this many elements (>= 0).  Default 2: a pair of
            single-element arrays is compared positionally.
        min_key_overlap: Fraction of the smaller side's key values that must
            also occur on the other side for a key to qualify, in [0, 1].
            Rejects keys that would turn every element into remove + add.
        max_composite_fields: How many leading candidate fields take part in
            composite key search (>= 0).  Bounds the combinatorial search.
        max_composite_arity: Largest number of fields in a composite key,
            in [1, 3].  1 disables composite keys.
        expand_one_sided: When True, a container present on one side only is
            reported as one record per leaf instead of a single record.
        null_equals_missing: When True, an object field whose value is null on
            one side and absent on the other is not reported.
    """

    array_match_mode: ArrayMatchMode = ArrayMatchMode.AUTO
    min_keyed_length: int = 2
    min_key_overlap: float = 0.5
    max_composite_fields: int = 8
    max_composite_arity: int = 3
    expand_one_sided: bool = False
    null_equals_missing: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "array_match_mode", ArrayMatchMode(self.array_match_mode))
        if self.min_keyed_length < 0:
            msg = f"min_keyed_length must be >= 0, got {self.min_keyed_length}"
            raise ValueError(msg)
        if not 0.0 <= self.min_key_overlap <= 1.0:
            msg = f"min_key_overlap must be in [0, 1], got {self.min_key_overlap}"
            raise ValueError(msg)
        if self.max_composite_fields < 0:
            msg = f"max_composite_fields must be >= 0, got {self.max_composite_fields}"
            raise ValueError(msg)
        if not 1 <= self.max_composite_arity <= 3:
            msg = f"max_composite_arity must be in [1, 3], got {self.max_composite_arity}"
            raise ValueError(msg)
