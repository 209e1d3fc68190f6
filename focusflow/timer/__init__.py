"""Timer package."""

from .engine import Phase, TimerEngine, TimerState, format_remaining
from .ports import (
    Clock,
    NotificationKind,
    NotificationSink,
    SessionConfig,
    SessionStore,
    SystemClock,
)
from .ticker import Ticker, TICK_INTERVAL_MS

__all__ = [
    "Clock",
    "NotificationKind",
    "NotificationSink",
    "Phase",
    "SessionConfig",
    "SessionStore",
    "SystemClock",
    "Ticker",
    "TICK_INTERVAL_MS",
    "TimerEngine",
    "TimerState",
    "format_remaining",
]
