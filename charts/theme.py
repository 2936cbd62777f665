from __future__ import annotations

from schemas.theme import Theme

DEFAULT_THEME = Theme()

_DARK = {
    "background_color": "#111827",
    "text_color": "#f9fafb",
    "grid_color": "#374151",
}
_LIGHT = {
    "background_color": "#ffffff",
    "text_color": "#1f2937",
    "grid_color": "#e5e7eb",
}


def toggle_theme(theme: Theme) -> Theme:
    """
    Flip light/dark. Background, text and grid colors follow the mode;
    primary and secondary colors are kept.
    """
    if theme.mode == "light":
        return theme.model_copy(update={"mode": "dark", **_DARK})
    return theme.model_copy(update={"mode": "light", **_LIGHT})


def tooltip_colors(theme: Theme) -> dict:
    if theme.mode == "dark":
        return {
            "bgcolor": "#374151",
            "bordercolor": "#4b5563",
            "font": {"color": "#f9fafb"},
        }
    return {
        "bgcolor": "#ffffff",
        "bordercolor": "#e5e7eb",
        "font": {"color": "#1f2937"},
    }
