"""Sound + tray notifications for timer events."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from .settings import Settings
from .timer.engine import Phase
from .timer.ports import NotificationKind


class CuePlayer(Protocol):
    def play(self, name: str) -> None: ...


# kind → (cue name, title, body)
MESSAGES: dict[NotificationKind, tuple[str, str, str]] = {
    NotificationKind.WORK_COMPLETE: (
        "work_complete", "Nice work!", "Time for a break.",
    ),
    NotificationKind.BREAK_COMPLETE: (
        "break_complete", "Break over", "Pomodoro complete. Ready for another?",
    ),
}


class AlertNotifier:
    """``NotificationSink`` that plays a cue and shows a tray message.

    *show_message* is usually ``QSystemTrayIcon.showMessage``; leave it out
    where no tray exists.  Do-not-disturb silences both channels.
    """

    def __init__(
        self,
        sounds: CuePlayer,
        settings: Settings,
        show_message: Callable[[str, str], None] | None = None,
    ) -> None:
        self._sounds = sounds
        self._settings = settings
        self._show_message = show_message

    def notify(self, kind: NotificationKind) -> None:
        cue, title, body = MESSAGES[kind]
        self._play(cue)
        self._send(title, body)

    def on_phase_changed(self, phase: Phase) -> None:
        if phase is Phase.WORK:
            self._play("session_start")

    def _play(self, name: str) -> None:
        if self._settings.do_not_disturb or not self._settings.sound_enabled:
            return
        self._sounds.play(name)

    def _send(self, title: str, body: str) -> None:
        if self._show_message is None:
            return
        if self._settings.do_not_disturb or not self._settings.notifications_enabled:
            return
        self._show_message(title, body)
