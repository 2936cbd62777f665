"""Pytest fixtures shared across the chart studio tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from tools.ingest import SAMPLE_ROWS


@pytest.fixture
def sample_rows():
    """Return a fresh copy of the six-month sales/revenue sample."""

    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def preferences_path(tmp_path):
    """Return a preferences file location inside the test's temp dir."""

    return tmp_path / "prefs" / "preferences.json"


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no filesystem access.
    - `integration`: tests touching files, plotly figures end to end, or the
      full command pipeline.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
