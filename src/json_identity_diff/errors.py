"""Exception types raised by json-identity-diff.

Only malformed input is an error.  An address that cannot be resolved against
a document, or an array without a usable identity key, is a normal outcome
and is reported as a value (``None`` or a positional IdentityKeyInfo).
"""

from __future__ import annotations

__all__ = ["AddressSyntaxError"]


class AddressSyntaxError(ValueError):
    """Raised when an address or pattern string is malformed.

    Attributes:
        text:     The full string that failed to parse.
        position: Character offset of the problem within ``text``.
        reason:   Short description of what is wrong.
        kind:     Human-readable name of what was being parsed
                  (e.g. ``"identity address"``).
    """

    def __init__(self, text: str, position: int, reason: str, kind: str) -> None:
        self.text = text
        self.position = position
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind} {text!r} at offset {position}: {reason}")
