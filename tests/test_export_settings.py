"""Tests for figure export and environment settings."""

from __future__ import annotations

import plotly.graph_objects as go
import pytest
from pydantic import ValidationError

from charts.export import ExportError, export_figure, export_filename
from schemas.chart_spec import ExportOptions
from utils.settings import load_settings


@pytest.mark.unit
def test_export_options_defaults_and_bounds() -> None:
    """Defaults match the export dialog; dimensions and quality are bounded."""

    options = ExportOptions()
    assert (options.format, options.quality, options.width, options.height) == (
        "png",
        1.0,
        1200,
        800,
    )
    assert options.background_color == "#ffffff"

    for bad in ({"width": 99}, {"height": 3001}, {"quality": 0}, {"format": "gif"}):
        with pytest.raises(ValidationError):
            ExportOptions(**bad)


@pytest.mark.unit
def test_export_filename() -> None:
    """Files are named chart.<format>."""

    assert export_filename(ExportOptions(format="svg")) == "chart.svg"


@pytest.mark.integration
def test_export_passes_options_to_engine(monkeypatch) -> None:
    """Size, scale and format reach plotly; background applies to a copy."""

    seen = {}

    def fake_to_image(self, **kwargs):
        seen.update(kwargs)
        seen["bg"] = self.layout.paper_bgcolor
        return b"jpeg-bytes"

    monkeypatch.setattr(go.Figure, "to_image", fake_to_image)

    fig = go.Figure()
    fig.update_layout(paper_bgcolor="#111827")
    options = ExportOptions(format="jpg", quality=0.5, width=640, height=480)

    assert export_figure(fig, options) == b"jpeg-bytes"
    assert seen == {
        "format": "jpeg",
        "width": 640,
        "height": 480,
        "scale": 0.5,
        "bg": "#ffffff",
    }
    assert fig.layout.paper_bgcolor == "#111827"


@pytest.mark.integration
def test_export_engine_failure_is_wrapped(monkeypatch) -> None:
    """Engine errors surface as ExportError."""

    def broken(self, **kwargs):
        raise ValueError("kaleido not installed")

    monkeypatch.setattr(go.Figure, "to_image", broken)

    with pytest.raises(ExportError, match="kaleido not installed"):
        export_figure(go.Figure())


@pytest.mark.unit
def test_settings_defaults(monkeypatch) -> None:
    """Unset variables fall back to defaults."""

    for var in (
        "CHART_STUDIO_PREFERENCES",
        "CHART_STUDIO_DEFAULT_CHART_TYPE",
        "CHART_STUDIO_PREVIEW_ROWS",
        "CHART_STUDIO_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)

    settings = load_settings()
    assert settings.default_chart_type == "bar"
    assert settings.preview_rows == 10
    assert settings.log_level == "INFO"
    assert settings.preferences_path.name == "preferences.json"


@pytest.mark.unit
def test_settings_read_environment(monkeypatch, tmp_path) -> None:
    """Environment overrides are honoured."""

    monkeypatch.setenv("CHART_STUDIO_PREFERENCES", str(tmp_path / "p.json"))
    monkeypatch.setenv("CHART_STUDIO_DEFAULT_CHART_TYPE", "radar")
    monkeypatch.setenv("CHART_STUDIO_PREVIEW_ROWS", "25")
    monkeypatch.setenv("CHART_STUDIO_LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.preferences_path == tmp_path / "p.json"
    assert settings.default_chart_type == "radar"
    assert settings.preview_rows == 25
    assert settings.log_level == "DEBUG"


@pytest.mark.unit
@pytest.mark.parametrize(
    "var, value",
    [
        ("CHART_STUDIO_DEFAULT_CHART_TYPE", "gantt"),
        ("CHART_STUDIO_PREVIEW_ROWS", "zero"),
        ("CHART_STUDIO_PREVIEW_ROWS", "-1"),
        ("CHART_STUDIO_LOG_LEVEL", "LOUD"),
    ],
)
def test_settings_reject_invalid_values(monkeypatch, var: str, value: str) -> None:
    """Invalid environment values fail at load time."""

    monkeypatch.setenv(var, value)
    with pytest.raises(RuntimeError):
        load_settings()
