"""IgnoreList: stored patterns that hide families of diffs.

A pattern ignores a diff when it matches the diff's identity address or
either of its position addresses.  Patterns are written in the address
pattern language of ``json_identity_diff.paths.patterns``::

    ignore = IgnoreList(["meta.updated_at", "items.*.v"])
    ignore.add_subtree(IdentityAddress.parse("items[id=c]"))   # items[id=c]*
    kept = ignore.filter(result.diffs)

Verdicts are memoised per address in a per-instance ``LRUCache``; the cache
is cleared whenever the pattern set changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from cachetools import LRUCache

from json_identity_diff.paths.addresses import IdentityAddress, PositionAddress
from json_identity_diff.paths.patterns import AddressPattern, compile_pattern
from json_identity_diff.paths.segments import render
from json_identity_diff.result import DiffRecord

__all__ = ["IgnoreList"]


class IgnoreList:
    """Ordered, de-duplicated collection of ignore patterns.

    Args:
        patterns: Initial pattern texts.  Malformed patterns raise
            ``AddressSyntaxError`` immediately.
        max_cache_size: Maximum number of address verdicts kept in memory.
            Defaults to 1024.
    """

    def __init__(self, patterns: Iterable[str] = (), max_cache_size: int = 1024) -> None:
        self._patterns: dict[str, AddressPattern] = {}
        self._verdicts: LRUCache[IdentityAddress | PositionAddress, bool] = LRUCache(
            maxsize=max_cache_size
        )
        for text in patterns:
            self.add(text)

    # ------------------------------------------------------------------
    # Pattern set
    # ------------------------------------------------------------------

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[str]:
        return iter(self._patterns)

    def __contains__(self, text: object) -> bool:
        return text in self._patterns

    def __repr__(self) -> str:
        return f"IgnoreList({list(self._patterns)!r})"

    def add(self, pattern: str) -> None:
        """Add ``pattern``; adding a pattern twice is a no-op.

        Raises:
            AddressSyntaxError: If the pattern is malformed.
        """
        if pattern in self._patterns:
            return
        self._patterns[pattern] = compile_pattern(pattern)
        self._verdicts.clear()

    def add_subtree(self, address: IdentityAddress | PositionAddress) -> str:
        """Ignore ``address`` and everything nested under it.

        Returns:
            The pattern text that was added.

        Raises:
            ValueError: For the root address.
        """
        if address.is_root:
            msg = "cannot ignore the document root"
            raise ValueError(msg)
        text = f"{render(address.segments)}*"
        self.add(text)
        return text

    def remove(self, pattern: str) -> bool:
        """Remove ``pattern``.  Returns False when it was not present."""
        if self._patterns.pop(pattern, None) is None:
            return False
        self._verdicts.clear()
        return True

    def clear(self) -> None:
        self._patterns.clear()
        self._verdicts.clear()

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def matches_address(self, address: IdentityAddress | PositionAddress) -> bool:
        verdict = self._verdicts.get(address)
        if verdict is None:
            verdict = any(p.matches(address) for p in self._patterns.values())
            self._verdicts[address] = verdict
        return verdict

    def is_ignored(self, diff: DiffRecord) -> bool:
        """True when any pattern matches the diff's identity or position addresses."""
        if not self._patterns:
            return False
        candidates = (diff.identity_address, diff.left_address, diff.right_address)
        return any(a is not None and self.matches_address(a) for a in candidates)

    def filter(self, diffs: Iterable[DiffRecord]) -> list[DiffRecord]:
        """The diffs that are not ignored, in input order."""
        return [d for d in diffs if not self.is_ignored(d)]

    def partition(
        self, diffs: Iterable[DiffRecord]
    ) -> tuple[list[DiffRecord], list[DiffRecord]]:
        """Split diffs into ``(kept, ignored)``, preserving order in both."""
        kept: list[DiffRecord] = []
        ignored: list[DiffRecord] = []
        for diff in diffs:
            (ignored if self.is_ignored(diff) else kept).append(diff)
        return kept, ignored
