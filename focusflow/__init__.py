"""FocusFlow: a pomodoro timer with local session presets and history."""

__version__ = "0.1.0"
