"""Tests for theme toggling and the persisted theme preference."""

from __future__ import annotations

import json

import pytest

from charts.theme import DEFAULT_THEME, toggle_theme
from schemas.theme import Theme
from utils.preferences import ThemePreferenceStore


@pytest.mark.unit
def test_toggle_derives_dark_palette() -> None:
    """Dark mode swaps background, text and grid colors, keeps accents."""

    dark = toggle_theme(DEFAULT_THEME)
    assert dark.mode == "dark"
    assert (dark.background_color, dark.text_color, dark.grid_color) == (
        "#111827",
        "#f9fafb",
        "#374151",
    )
    assert dark.primary_color == DEFAULT_THEME.primary_color

    assert toggle_theme(dark) == DEFAULT_THEME


@pytest.mark.integration
def test_missing_file_defaults_to_light(preferences_path) -> None:
    """No stored preference means the light theme."""

    assert ThemePreferenceStore(preferences_path).theme == DEFAULT_THEME


@pytest.mark.integration
def test_save_and_restore(preferences_path) -> None:
    """A saved theme is restored by the next session."""

    ThemePreferenceStore(preferences_path).save(Theme(mode="dark", primary_color="#000000"))

    restored = ThemePreferenceStore(preferences_path).theme
    assert restored.mode == "dark"
    assert restored.primary_color == "#000000"


@pytest.mark.integration
def test_corrupt_blob_falls_back_to_default(preferences_path) -> None:
    """Unparsable files and invalid theme entries both mean the default."""

    preferences_path.parent.mkdir(parents=True)
    preferences_path.write_text("{not json")
    assert ThemePreferenceStore(preferences_path).theme == DEFAULT_THEME

    preferences_path.write_text(json.dumps({"theme": {"mode": "sepia"}}))
    assert ThemePreferenceStore(preferences_path).theme == DEFAULT_THEME


@pytest.mark.integration
def test_save_preserves_other_keys(preferences_path) -> None:
    """Only the theme key is rewritten."""

    preferences_path.parent.mkdir(parents=True)
    preferences_path.write_text(json.dumps({"language": "en"}))

    store = ThemePreferenceStore(preferences_path)
    store.toggle()

    blob = json.loads(preferences_path.read_text())
    assert blob["language"] == "en"
    assert blob["theme"]["mode"] == "dark"
    assert not preferences_path.with_suffix(".tmp.json").exists()
