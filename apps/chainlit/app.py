# apps/chainlit/app.py
from __future__ import annotations

import logging
import pathlib
import sys

cwd = pathlib.Path.cwd()
if cwd.name == "notebooks":
    proj_root = cwd.parent
else:
    proj_root = cwd  # if you launched from project root
if str(proj_root) not in sys.path:
    sys.path.insert(0, str(proj_root))


import chainlit as cl
from commands.router import CommandError, route_command
from executer import CommandExecutor, CommandResult
from tools.ingest import IngestError
from utils.preferences import ThemePreferenceStore
from utils.settings import configure_logging, load_settings
from workspace import ChartWorkspace

logger = logging.getLogger(__name__)

# -------------------------
# 1) Dependency wiring (startup)
# -------------------------

settings = load_settings()
configure_logging(settings.log_level)


def build_container():
    """
    Build the per-session dependencies.
    Each chat session gets its own workspace; the theme store is shared
    through the preferences file.
    """
    theme_store = ThemePreferenceStore(settings.preferences_path)
    workspace = ChartWorkspace(theme=theme_store, preview_rows=settings.preview_rows)
    workspace.select_chart_type(settings.default_chart_type)
    executor = CommandExecutor(workspace=workspace)
    return {"workspace": workspace, "executor": executor}


@cl.set_starters
async def set_starters():
    return [
        cl.Starter(label="Load sample data", message="sample"),
        cl.Starter(
            label="Paste JSON rows",
            message='[{"city": "Oslo", "visits": 12, "sales": 4}, '
            '{"city": "Lima", "visits": 7, "sales": 9}]',
        ),
        cl.Starter(label="Show commands", message="help"),
    ]


@cl.on_chat_start
async def on_chat_start():
    cl.user_session.set("deps", build_container())


async def _send(result: CommandResult) -> None:
    elements = []
    if result.figure is not None:
        elements.append(cl.Plotly(name="chart", figure=result.figure, display="inline"))
    if result.export is not None:
        elements.append(
            cl.File(
                name=result.export.filename,
                content=result.export.content,
                mime=result.export.mime,
                display="inline",
            )
        )
    await cl.Message(content=result.text, elements=elements).send()


@cl.on_message
async def on_message(message: cl.Message):
    deps = cl.user_session.get("deps") or {}
    executor: CommandExecutor = deps.get("executor")  # type: ignore[assignment]

    uploads = [el for el in (message.elements or []) if getattr(el, "path", None)]

    try:
        # (A) File upload wins over the message text
        if uploads:
            upload = uploads[0]
            result = executor.load_upload(upload.path, name=upload.name)
            await _send(result)
            return

        # (B) Route text -> command, (C) execute against the workspace
        cmd = route_command(message.content or "")
        result = executor.execute(cmd)
        await _send(result)

    except (CommandError, IngestError) as e:
        await cl.Message(content=str(e)).send()
    except Exception as e:
        # Keep errors visible during development
        logger.exception("Command failed")
        await cl.Message(content=f"Error: {e}").send()
