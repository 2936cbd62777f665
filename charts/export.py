from __future__ import annotations

import logging

import plotly.graph_objects as go

from schemas.chart_spec import ExportOptions

logger = logging.getLogger(__name__)

# plotly's static export names jpg "jpeg"
_ENGINE_FORMATS = {"png": "png", "jpg": "jpeg", "pdf": "pdf", "svg": "svg"}


class ExportError(RuntimeError):
    pass


def export_filename(options: ExportOptions) -> str:
    return f"chart.{options.format}"


def export_figure(fig: go.Figure, options: ExportOptions | None = None) -> bytes:
    """
    Encode a rendered figure as png/jpg/pdf/svg bytes.

    Quality maps to the export scale factor; the background color is applied
    to a copy so the on-screen figure keeps its theme.
    """
    options = options or ExportOptions()

    out = go.Figure(fig)
    out.update_layout(
        paper_bgcolor=options.background_color,
        plot_bgcolor=options.background_color,
    )

    try:
        payload = out.to_image(
            format=_ENGINE_FORMATS[options.format],
            width=options.width,
            height=options.height,
            scale=options.quality,
        )
    except Exception as e:
        raise ExportError(f"Export failed: {e}") from e

    logger.info(
        "Exported %s (%dx%d, scale=%.1f, %d bytes)",
        export_filename(options),
        options.width,
        options.height,
        options.quality,
        len(payload),
    )
    return payload
