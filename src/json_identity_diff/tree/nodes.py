"""ValueKind StrEnum and the MISSING sentinel for JSON value representation.

Documents are plain Python JSON values (dict, list, str, int, float, bool,
None).  This module names the six kinds a value can have and provides the
sentinel used throughout the engine for "no node at this address", which must
never be confused with JSON ``null``.
"""

from __future__ import annotations

from enum import Enum, StrEnum, auto
from typing import Any, Final, Literal

# Type alias for valid JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


class ValueKind(StrEnum):
    """Enumeration of the six JSON value kinds.

    StrEnum values are the lowercased member names (Python 3.11+):
    - NULL   -> "null"   : JSON null (Python None)
    - BOOL   -> "bool"   : true / false
    - NUMBER -> "number" : int or float (never bool)
    - STRING -> "string" : str
    - OBJECT -> "object" : ordered mapping of field name to value
    - ARRAY  -> "array"  : ordered list of values
    """

    NULL = auto()
    BOOL = auto()
    NUMBER = auto()
    STRING = auto()
    OBJECT = auto()
    ARRAY = auto()


SCALAR_KINDS: Final = frozenset(
    {ValueKind.NULL, ValueKind.BOOL, ValueKind.NUMBER, ValueKind.STRING}
)


class _Missing(Enum):
    MISSING = auto()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Single-member enum so that ``value is MISSING`` narrows under type checkers.
MISSING: Final = _Missing.MISSING
Missing = Literal[_Missing.MISSING]
