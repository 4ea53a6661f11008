"""Global pytest fixtures and default marks for FIXTUREGATE."""

from __future__ import annotations

from pathlib import Path

import pytest

# pylint: disable=unused-argument

pytest_plugins = [
    "pytester",
    "tests.fixtures.clock",
    "tests.fixtures.remote",
]

TESTS_ROOT = Path(__file__).parent.resolve()

# Top-level test directory -> default marker
DEFAULT_MARKERS = {
    "unit": "unit",
    "contract": "contract",
    "integration": "integration",
    "e2e": "e2e",
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each item after the top-level test directory it lives in."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        try:
            top = path.relative_to(TESTS_ROOT).parts[0]
        except (ValueError, IndexError):
            continue
        if (marker_name := DEFAULT_MARKERS.get(top)) is None:
            continue
        if not any(marker.name == marker_name for marker in item.iter_markers()):
            item.add_marker(getattr(pytest.mark, marker_name))
