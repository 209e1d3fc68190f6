"""User preferences with JSON persistence.

Settings are stored at:
    ~/.focusflow/settings.json

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from loguru import logger


# Shared by the database, sound cache and log files
APP_DIR = Path.home() / ".focusflow"
SETTINGS_PATH = APP_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True
    do_not_disturb: bool = False

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        settings = Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Unreadable settings at {SETTINGS_PATH}, using defaults: {e}")
        return Settings()
    return _sanitize(settings)


def _sanitize(settings: Settings) -> Settings:
    """Replace values the app cannot use with their defaults."""
    defaults = Settings()

    level = settings.log_level
    if isinstance(level, str):
        level = level.strip().upper()
    try:
        logger.level(level)
        settings.log_level = level
    except (ValueError, TypeError):
        logger.warning(f"Unknown log_level {settings.log_level!r}, using {defaults.log_level}")
        settings.log_level = defaults.log_level

    volume = settings.sound_volume
    try:
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            raise TypeError(volume)
        settings.sound_volume = max(0, min(int(volume), 100))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid sound_volume {volume!r}, using {defaults.sound_volume}")
        settings.sound_volume = defaults.sound_volume

    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
