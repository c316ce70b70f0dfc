"""Persisted user settings. Only the theme survives between sessions."""
from __future__ import annotations

import json
from pathlib import Path

from .config import DEFAULT_THEME, THEMES

SETTINGS_DIR = Path.home() / ".simlab"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"
THEME_KEY = "sim_theme"


def load_user_settings(path: Path = SETTINGS_PATH) -> dict[str, object]:
    """Return persisted settings if the JSON file is readable."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object], path: Path = SETTINGS_PATH) -> None:
    """Persist settings, ignoring filesystem errors."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError:
        # the sketch keeps running with an unsaved theme
        pass


def load_theme(path: Path = SETTINGS_PATH) -> str:
    theme = load_user_settings(path).get(THEME_KEY)
    if isinstance(theme, str) and theme in THEMES:
        return theme
    return DEFAULT_THEME


def save_theme(theme: str, path: Path = SETTINGS_PATH) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme {theme!r}")
    settings = load_user_settings(path)
    settings[THEME_KEY] = theme
    save_user_settings(settings, path)


__all__ = [
    "SETTINGS_PATH",
    "THEME_KEY",
    "load_theme",
    "load_user_settings",
    "save_theme",
    "save_user_settings",
]
