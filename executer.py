from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import plotly.graph_objects as go

from charts.export import export_figure, export_filename
from commands.router import HELP_TEXT, Command
from preview_builder import preview_markdown
from tools.ingest import DatasetLoader
from workspace import ChartWorkspace


@dataclass(frozen=True)
class ExportPayload:
    filename: str
    content: bytes
    mime: str


@dataclass(frozen=True)
class CommandResult:
    text: str
    figure: Optional[go.Figure] = None
    export: Optional[ExportPayload] = None


Handler = Callable[[Dict[str, Any]], "CommandResult"]

_MIME = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "pdf": "application/pdf",
    "svg": "image/svg+xml",
}


class CommandExecutor:
    """
    Deterministic dispatcher: command action -> workspace operation.
    """

    def __init__(
        self, *, workspace: ChartWorkspace, loader: DatasetLoader | None = None
    ):
        self.workspace = workspace
        self.loader = loader or DatasetLoader()

        self._action_to_handler: Dict[str, Handler] = {
            "load_sample": self._load_sample,
            "load_json": self._load_json,
            "toggle_series": self._toggle_series,
            "chart_type": self._chart_type,
            "config": self._config,
            "primary_color": self._primary_color,
            "toggle_theme": self._toggle_theme,
            "list_series": self._list_series,
            "preview": self._preview,
            "export": self._export,
            "show_chart": self._show_chart,
            "help": self._help,
        }

    def execute(self, cmd: Command) -> CommandResult:
        if cmd.action not in self._action_to_handler:
            raise ValueError(f"Unsupported action: {cmd.action}")

        handler = self._action_to_handler[cmd.action]
        return handler(cmd.args)

    def load_upload(self, path: str, name: str | None = None) -> CommandResult:
        self.workspace.load_from(lambda: self.loader.load_upload(path, name=name))
        return self._loaded_result()

    # -----------------------
    # Handlers
    # -----------------------

    def _load_sample(self, args: Dict[str, Any]) -> CommandResult:
        self.workspace.load_from(self.loader.sample)
        return self._loaded_result()

    def _load_json(self, args: Dict[str, Any]) -> CommandResult:
        self.workspace.load_from(lambda: self.loader.load_json_text(args["text"]))
        return self._loaded_result()

    def _toggle_series(self, args: Dict[str, Any]) -> CommandResult:
        name = args["name"]
        self.workspace.toggle_series(name)
        state = "shown" if name in self.workspace.active else "hidden"
        known = {s.name for s in self.workspace.all_series}
        text = f"Series `{name}` {state}."
        if name not in known:
            text += " (no series with that name in the current data)"
        return self._with_chart(text)

    def _chart_type(self, args: Dict[str, Any]) -> CommandResult:
        config = self.workspace.select_chart_type(args["chart_type"])
        return self._with_chart(f"Chart type: {config.chart_type}.")

    def _config(self, args: Dict[str, Any]) -> CommandResult:
        patch = args["patch"]
        self.workspace.update_config(patch)
        changed = ", ".join(f"{k}={v!r}" for k, v in patch.items())
        return self._with_chart(f"Updated {changed}.")

    def _primary_color(self, args: Dict[str, Any]) -> CommandResult:
        config = self.workspace.set_primary_color(args["color"])
        return self._with_chart(f"Primary color {config.colors[0]}.")

    def _toggle_theme(self, args: Dict[str, Any]) -> CommandResult:
        theme = self.workspace.toggle_theme()
        return self._with_chart(f"Theme: {theme.mode}.")

    def _list_series(self, args: Dict[str, Any]) -> CommandResult:
        series = self.workspace.all_series
        if not series:
            return CommandResult(text="No series inferred. Load some data first.")
        active = self.workspace.active
        lines = [
            f"- [{'x' if s.name in active else ' '}] `{s.name}`" for s in series
        ]
        return CommandResult(text="**Series**\n" + "\n".join(lines))

    def _preview(self, args: Dict[str, Any]) -> CommandResult:
        md = preview_markdown(self.workspace.preview())
        return CommandResult(text=f"**Data (preview)**\n\n{md}")

    def _export(self, args: Dict[str, Any]) -> CommandResult:
        options = args["options"]
        content = export_figure(self.workspace.figure(), options)
        payload = ExportPayload(
            filename=export_filename(options),
            content=content,
            mime=_MIME[options.format],
        )
        return CommandResult(
            text=f"Exported {payload.filename} ({options.width}x{options.height}).",
            export=payload,
        )

    def _show_chart(self, args: Dict[str, Any]) -> CommandResult:
        return self._with_chart(self.workspace.config.title)

    def _help(self, args: Dict[str, Any]) -> CommandResult:
        return CommandResult(text=HELP_TEXT)

    # -----------------------
    # Helpers
    # -----------------------

    def _loaded_result(self) -> CommandResult:
        ws = self.workspace
        n_rows = len(ws.dataset)
        if not n_rows:
            return CommandResult(text="Dataset is empty. Nothing to chart.")
        names = ", ".join(f"`{s.name}`" for s in ws.all_series) or "none"
        label = ws.source.label if ws.source else "data"
        return self._with_chart(
            f"Loaded {label}: {n_rows} rows. Series: {names}. "
            f"Showing: {', '.join(sorted(ws.active)) or 'none'}."
        )

    def _with_chart(self, text: str) -> CommandResult:
        if self.workspace.model.is_empty:
            return CommandResult(text=text)
        return CommandResult(text=text, figure=self.workspace.figure())
