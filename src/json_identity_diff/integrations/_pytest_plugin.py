"""pytest plugin for json-identity-diff.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from json_identity_diff import DiffConfig, IgnoreList, compare


@pytest.fixture(scope="session")
def assert_json_no_diffs() -> Any:
    """Fixture that returns a callable structural-equality asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to compare() which creates a fresh IdentityDiffer per call).

    Usage in tests::

        def test_reordered(assert_json_no_diffs):
            assert_json_no_diffs(
                [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}],
                [{"id": 2, "v": "b"}, {"id": 1, "v": "a"}],
            )

        def test_timestamps_ignored(assert_json_no_diffs):
            assert_json_no_diffs(actual, expected, ignore=["meta.updated_at"])

    Returns:
        A callable ``_assert(actual, expected, ignore=(), config=None) -> None``
        that raises ``AssertionError`` when any diff survives the ignore list.
    """

    def _assert(
        actual: Any,
        expected: Any,
        ignore: Iterable[str] | IgnoreList = (),
        config: DiffConfig | None = None,
    ) -> None:
        """Assert that two JSON documents have no unignored differences.

        Args:
            actual:   The JSON value produced by the code under test (left).
            expected: The expected/reference JSON value (right).
            ignore:   Pattern texts or an IgnoreList of diffs to disregard.
            config:   Optional DiffConfig for custom engine parameters.

        Raises:
            AssertionError: Listing every remaining diff, one per line.
        """
        ignore_list = ignore if isinstance(ignore, IgnoreList) else IgnoreList(ignore)
        result = compare(actual, expected, config=config).without(ignore_list)
        if not result.is_identical:
            lines = "\n".join(f"  {diff}" for diff in result.diffs)
            raise AssertionError(
                f"JSON documents differ ({len(result.diffs)} diffs):\n{lines}"
            )

    return _assert
