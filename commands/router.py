# studio/commands/router.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from schemas.chart_spec import CHART_TYPES, ExportOptions

FONT_SIZE_RANGE: Tuple[int, int] = (10, 24)
PADDING_RANGE: Tuple[int, int] = (10, 50)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

_SWITCHES = {
    "legend": "show_legend",
    "grid": "show_grid",
    "animation": "animation",
    "responsive": "responsive",
    "aspect": "maintain_aspect_ratio",
}

_TEXT_FIELDS = {
    "title": "title",
    "xlabel": "x_axis_label",
    "ylabel": "y_axis_label",
}

_SIMPLE = {
    "sample": "load_sample",
    "theme": "toggle_theme",
    "series": "list_series",
    "preview": "preview",
    "help": "help",
    "chart": "show_chart",
}

HELP_TEXT = """\
Commands:
- `sample` load the sample dataset
- paste a JSON array of objects to use it as data, or upload a .csv/.xlsx/.xls file
- `series` list inferred series, `toggle <series>` show/hide one
- `type <bar|line|pie|scatter|area|heatmap|bubble|radar|doughnut|polarArea>`
- `title <text>`, `xlabel <text>`, `ylabel <text>`
- `legend|grid|animation|responsive|aspect on|off`
- `font <10-24>`, `padding <10-50>`, `color <#hex>`
- `theme` switch light/dark, `preview` show the first rows
- `export <png|jpg|pdf|svg> [width height] [quality]`"""


class CommandError(ValueError):
    pass


@dataclass(frozen=True)
class Command:
    action: str
    args: Dict[str, Any] = field(default_factory=dict)


def _bounded_int(raw: str, name: str, bounds: Tuple[int, int]) -> int:
    lo, hi = bounds
    try:
        value = int(raw)
    except ValueError:
        raise CommandError(f"{name} must be a whole number, got {raw!r}") from None
    if not lo <= value <= hi:
        raise CommandError(f"{name} must be between {lo} and {hi}, got {value}")
    return value


def _switch(raw: str, word: str) -> bool:
    v = raw.lower()
    if v in ("on", "true", "yes", "1"):
        return True
    if v in ("off", "false", "no", "0"):
        return False
    raise CommandError(f"Use `{word} on` or `{word} off`")


def resolve_chart_type(raw: str) -> str:
    key = raw.strip().replace(" ", "").replace("_", "").lower()
    for chart_type in CHART_TYPES:
        if chart_type.lower() == key:
            return chart_type
    raise CommandError(
        f"Unknown chart type {raw!r} (expected one of {', '.join(CHART_TYPES)})"
    )


def _export_command(parts: list[str]) -> Command:
    kwargs: Dict[str, Any] = {}
    if parts:
        kwargs["format"] = parts[0].lower()
    if len(parts) >= 3:
        kwargs["width"], kwargs["height"] = parts[1], parts[2]
    if len(parts) >= 4:
        kwargs["quality"] = parts[3]
    try:
        options = ExportOptions(**kwargs)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(x) for x in first["loc"])
        raise CommandError(f"Invalid export option {loc}: {first['msg']}") from None
    return Command("export", {"options": options})


def route_command(text: str) -> Command:
    """
    Map one chat message to a workspace command. Input bounds (font size,
    padding, export dimensions) are enforced here.
    """
    raw = (text or "").strip()
    if not raw:
        raise CommandError("Please enter a command. Type `help` for the list.")

    if raw[0] in "[{":
        return Command("load_json", {"text": raw})

    word, _, rest = raw.partition(" ")
    word = word.lower()
    rest = rest.strip()

    if word in _SIMPLE:
        return Command(_SIMPLE[word])

    if word == "toggle":
        if not rest:
            raise CommandError("Usage: `toggle <series>`")
        return Command("toggle_series", {"name": rest})

    if word == "type":
        return Command("chart_type", {"chart_type": resolve_chart_type(rest)})

    if word in _TEXT_FIELDS:
        if word == "title" and not rest:
            raise CommandError("Usage: `title <text>`")
        return Command("config", {"patch": {_TEXT_FIELDS[word]: rest or None}})

    if word in _SWITCHES:
        return Command("config", {"patch": {_SWITCHES[word]: _switch(rest, word)}})

    if word == "font":
        size = _bounded_int(rest, "Font size", FONT_SIZE_RANGE)
        return Command("config", {"patch": {"font_size": size}})

    if word == "padding":
        pad = _bounded_int(rest, "Padding", PADDING_RANGE)
        return Command("config", {"patch": {"padding": pad}})

    if word == "color":
        if not _HEX_COLOR.match(rest):
            raise CommandError(f"Expected a hex color like #ff0000, got {rest!r}")
        return Command("primary_color", {"color": rest.lower()})

    if word == "export":
        return _export_command(rest.split())

    raise CommandError(f"No route for command {word!r}. Type `help` for the list.")
