from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from schemas.chart_spec import CHART_TYPES

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration read from the environment (and `.env`).

    Environment variables:
      - CHART_STUDIO_PREFERENCES=path/to/preferences.json
      - CHART_STUDIO_DEFAULT_CHART_TYPE=bar
      - CHART_STUDIO_PREVIEW_ROWS=10
      - CHART_STUDIO_LOG_LEVEL=INFO
    """

    preferences_path: Path
    default_chart_type: str = "bar"
    preview_rows: int = 10
    log_level: str = "INFO"


def load_settings() -> Settings:
    preferences_path = Path(
        os.getenv("CHART_STUDIO_PREFERENCES", "data/preferences.json")
    )

    chart_type = os.getenv("CHART_STUDIO_DEFAULT_CHART_TYPE", "bar")
    if chart_type not in CHART_TYPES:
        raise RuntimeError(
            f"Invalid CHART_STUDIO_DEFAULT_CHART_TYPE={chart_type!r} "
            f"(expected one of {', '.join(CHART_TYPES)})"
        )

    raw_rows = os.getenv("CHART_STUDIO_PREVIEW_ROWS", "10")
    try:
        preview_rows = int(raw_rows)
    except ValueError:
        preview_rows = 0
    if preview_rows <= 0:
        raise RuntimeError(
            f"Invalid CHART_STUDIO_PREVIEW_ROWS={raw_rows!r} (expected a positive int)"
        )

    log_level = os.getenv("CHART_STUDIO_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(f"Invalid CHART_STUDIO_LOG_LEVEL={log_level!r}")

    return Settings(
        preferences_path=preferences_path,
        default_chart_type=chart_type,
        preview_rows=preview_rows,
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
