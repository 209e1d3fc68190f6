"""Database package."""

from .db import configure_engine, get_session, init_db, DEFAULT_PRESETS
from .models import CompletedSession, SessionPreset

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "DEFAULT_PRESETS",
    "CompletedSession",
    "SessionPreset",
]
