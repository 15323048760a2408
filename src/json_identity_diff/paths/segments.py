"""Address segments and the shared scanner for the address text grammar.

Grammar (root is the empty string)::

    address  := [ first ( "." field | bracket )* ]
    first    := field | bracket
    bracket  := "[" ( index | keyed | "" | "*" ) "]"
    index    := digit+                      (no leading zeros)
    keyed    := pair ( "," pair )* [ "::" digit+ ]
    pair     := text "=" text

Escaping:
- In field names ``\\ . [ ] " *`` are written with a leading backslash.  An
  empty field name is written ``""``.
- Inside brackets ``\\ [ ] = , :`` are written with a leading backslash.

Each address kind (see ``addresses.py``) accepts a different subset of the
segment types produced here; the scanner itself is shared so that all kinds
agree on tokenisation and escaping.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from json_identity_diff.errors import AddressSyntaxError

_FIELD_ESCAPES = frozenset('\\.[]"*')
_BRACKET_ESCAPES = frozenset("\\[]=,:")


def _escape(text: str, specials: frozenset[str]) -> str:
    return "".join(f"\\{ch}" if ch in specials else ch for ch in text)


def render_key_value(value: Any) -> str:
    """Render a primitive identity-key value as address text.

    Integral floats render without a fraction so that ``1`` and ``1.0``
    (equal JSON numbers) always produce the same segment.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


# ---------------------------------------------------------------------------
# Segment types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Field:
    """Object field step."""

    name: str

    def text(self) -> str:
        if not self.name:
            return '""'
        return _escape(self.name, _FIELD_ESCAPES)


@dataclass(frozen=True, slots=True)
class Index:
    """Literal array index step (``[3]``)."""

    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            msg = f"index must be >= 0, got {self.index}"
            raise ValueError(msg)

    def text(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True, slots=True)
class Keyed:
    """Identity step: ``[id=7]``, ``[a=1,b=x]`` or ``[id=7::2]``.

    Attributes:
        pairs:      Ordered ``(field, rendered value)`` pairs.  One pair for a
                    simple key, several for a composite key.
        occurrence: 1-based counter distinguishing logical elements whose key
                    values render to the same text; ``None`` when unambiguous.
    """

    pairs: tuple[tuple[str, str], ...]
    occurrence: int | None = None

    def __post_init__(self) -> None:
        if not self.pairs:
            msg = "a keyed segment needs at least one key=value pair"
            raise ValueError(msg)
        if self.occurrence is not None and self.occurrence < 1:
            msg = f"occurrence must be >= 1, got {self.occurrence}"
            raise ValueError(msg)

    @classmethod
    def of(
        cls,
        fields: tuple[str, ...],
        values: tuple[Any, ...],
        occurrence: int | None = None,
    ) -> Keyed:
        """Build a segment from key field names and raw primitive values."""
        rendered = tuple(render_key_value(v) for v in values)
        return cls(tuple(zip(fields, rendered, strict=True)), occurrence)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.pairs)

    @property
    def values(self) -> tuple[str, ...]:
        """Rendered key values, one per field."""
        return tuple(value for _, value in self.pairs)

    def text(self) -> str:
        body = ",".join(
            f"{_escape(k, _BRACKET_ESCAPES)}={_escape(v, _BRACKET_ESCAPES)}"
            for k, v in self.pairs
        )
        if self.occurrence is not None:
            body += f"::{self.occurrence}"
        return f"[{body}]"


@dataclass(frozen=True, slots=True)
class AnyElement:
    """Array pattern step ``[]``: any element of the array."""

    def text(self) -> str:
        return "[]"


@dataclass(frozen=True, slots=True)
class Star:
    """Glob step: ``*`` matches one segment of any kind, ``[*]`` one bracket."""

    bracket_only: bool = False

    def text(self) -> str:
        return "[*]" if self.bracket_only else "*"


Segment = Field | Index | Keyed | AnyElement | Star

BRACKET_TYPES = (Index, Keyed, AnyElement)


def is_bracket(segment: Segment) -> bool:
    if isinstance(segment, Star):
        return segment.bracket_only
    return not isinstance(segment, Field)


def render(segments: tuple[Segment, ...]) -> str:
    """Render segments as address text; the root renders as ``""``."""
    parts: list[str] = []
    for i, seg in enumerate(segments):
        if i and not is_bracket(seg):
            parts.append(".")
        parts.append(seg.text())
    return "".join(parts)


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class _Scanner:
    """Single-use tokenizer for one address or pattern string."""

    def __init__(self, text: str, kind: str, *, globs: bool) -> None:
        self.text = text
        self.kind = kind
        self.globs = globs
        self.pos = 0

    def fail(self, reason: str, position: int | None = None) -> AddressSyntaxError:
        where = self.pos if position is None else position
        return AddressSyntaxError(self.text, where, reason, self.kind)

    def scan(self) -> tuple[Segment, ...]:
        text = self.text
        segments: list[Segment] = []
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == "[":
                self.pos += 1
                segments.append(self._bracket())
            elif ch == ".":
                if not segments:
                    raise self.fail("address cannot start with '.'")
                self.pos += 1
                segments.append(self._field())
            elif segments:
                raise self.fail("expected '.' or '[' between segments")
            else:
                segments.append(self._field())
        return tuple(segments)

    def _field(self) -> Field | Star:
        text = self.text
        start = self.pos
        chars: list[str] = []
        bare_quote = bare_star = False
        while self.pos < len(text):
            ch = text[self.pos]
            if ch in ".[":
                break
            if ch == "\\":
                nxt = text[self.pos + 1 : self.pos + 2]
                if nxt not in _FIELD_ESCAPES:
                    raise self.fail("invalid escape in field name")
                chars.append(nxt)
                self.pos += 2
                continue
            if ch == "]":
                raise self.fail("unexpected ']'")
            bare_quote = bare_quote or ch == '"'
            bare_star = bare_star or ch == "*"
            chars.append(ch)
            self.pos += 1

        raw = text[start : self.pos]
        if not raw:
            raise self.fail('empty field name (write "" for an empty key)')
        if raw == '""':
            return Field("")
        if bare_quote:
            raise self.fail("unescaped '\"' in field name", start)
        if bare_star:
            if self.globs and raw == "*":
                return Star()
            if self.globs:
                raise self.fail("'*' must be a whole segment or escaped", start)
            raise self.fail("unescaped '*' in field name", start)
        return Field("".join(chars))

    def _bracket(self) -> Index | Keyed | AnyElement | Star:
        text = self.text
        start = self.pos
        pairs: list[tuple[str, str]] = []
        key: str | None = None
        buf: list[str] = []
        escaped = False
        occurrence: int | None = None

        while True:
            if self.pos >= len(text):
                raise self.fail("unterminated '['", start - 1)
            ch = text[self.pos]
            if ch == "\\":
                nxt = text[self.pos + 1 : self.pos + 2]
                if nxt not in _BRACKET_ESCAPES:
                    raise self.fail("invalid escape inside brackets")
                buf.append(nxt)
                escaped = True
                self.pos += 2
            elif ch == "]":
                self.pos += 1
                break
            elif ch == "[":
                raise self.fail("unescaped '[' inside brackets")
            elif ch == "=":
                if key is not None:
                    raise self.fail("unescaped '=' inside key value")
                key = "".join(buf)
                if not key:
                    raise self.fail("empty key name")
                buf = []
                self.pos += 1
            elif ch == ",":
                if key is None:
                    raise self.fail("',' must separate key=value pairs")
                pairs.append((key, "".join(buf)))
                key, buf = None, []
                self.pos += 1
            elif ch == ":":
                if key is None or text[self.pos : self.pos + 2] != "::":
                    raise self.fail("unescaped ':' inside brackets")
                self.pos += 2
                occurrence = self._occurrence()
                break
            else:
                buf.append(ch)
                self.pos += 1

        if key is not None:
            pairs.append((key, "".join(buf)))
            return Keyed(tuple(pairs), occurrence)
        if pairs:
            raise self.fail("trailing ',' inside brackets")

        content = "".join(buf)
        if not escaped:
            if content == "":
                return AnyElement()
            if content == "*" and self.globs:
                return Star(bracket_only=True)
            if content.isascii() and content.isdigit():
                if len(content) > 1 and content[0] == "0":
                    raise self.fail("index has leading zeros", start)
                return Index(int(content))
        raise self.fail("expected an index or key=value pairs", start)

    def _occurrence(self) -> int:
        text = self.text
        start = self.pos
        while self.pos < len(text) and text[self.pos].isascii() and text[self.pos].isdigit():
            self.pos += 1
        digits = text[start : self.pos]
        if not digits or text[self.pos : self.pos + 1] != "]":
            raise self.fail("occurrence must be digits followed by ']'", start)
        self.pos += 1
        value = int(digits)
        if value < 1:
            raise self.fail("occurrence must be >= 1", start)
        return value


def scan(text: str, kind: str, *, globs: bool = False) -> tuple[Segment, ...]:
    """Tokenize ``text`` into segments.

    Args:
        text:  Address or pattern text.
        kind:  Name used in error messages.
        globs: When True, ``*`` and ``[*]`` produce ``Star`` segments.

    Raises:
        AddressSyntaxError: On any malformed input.
    """
    if not isinstance(text, str):
        raise TypeError(f"{kind} must be a str, got {type(text)!r}")
    return _Scanner(text, kind, globs=globs).scan()
