from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict

from pydantic import ValidationError

from charts.theme import DEFAULT_THEME, toggle_theme
from schemas.theme import Theme

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class ThemePreferenceStore:
    """
    Theme preference persisted as a JSON blob under a well-known key.

    The file is a small key-value document; only `key` is owned by this
    store and other keys are preserved on save. A missing or unreadable
    entry falls back to the light theme.
    """

    def __init__(self, path: str | Path, *, key: str = THEME_KEY):
        self.path = Path(path)
        self.key = key
        self._lock = Lock()
        self._theme = self.load()

    @property
    def theme(self) -> Theme:
        return self._theme

    # -------------------------
    # Public API
    # -------------------------

    def load(self) -> Theme:
        blob = self._read_blob()
        raw = blob.get(self.key)
        if raw is None:
            return DEFAULT_THEME
        try:
            return Theme.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring corrupt theme preference in %s: %s", self.path, e)
            return DEFAULT_THEME

    def save(self, theme: Theme) -> Theme:
        with self._lock:
            blob = self._read_blob()
            blob[self.key] = theme.model_dump()
            self._write_blob(blob)
            self._theme = theme
            return theme

    def toggle(self) -> Theme:
        return self.save(toggle_theme(self._theme))

    # -------------------------
    # File I/O
    # -------------------------

    def _read_blob(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            blob = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Unreadable preferences file %s: %s", self.path, e)
            return {}
        return blob if isinstance(blob, dict) else {}

    def _write_blob(self, blob: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp.json")
        tmp.write_text(json.dumps(blob, indent=2), encoding="utf-8")
        tmp.replace(self.path)
