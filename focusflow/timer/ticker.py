"""One-second tick source for a ``TimerEngine``."""

from __future__ import annotations

from loguru import logger
from PyQt6.QtCore import QObject, QTimer

from .engine import TimerEngine


TICK_INTERVAL_MS = 1000


class Ticker(QObject):
    """Drives ``engine.tick()`` from a ``QTimer`` while the engine runs.

    The timer follows ``running_changed``: it starts when the engine starts
    and stops on pause, reset or completion.  ``stop()`` detaches for good
    (e.g. when the owning widget goes away) and may be called repeatedly.
    """

    def __init__(
        self,
        engine: TimerEngine,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._detached = False

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

        engine.running_changed.connect(self._on_running_changed)
        if engine.running:
            self._qt_timer.start()

    @property
    def active(self) -> bool:
        """True while the underlying QTimer is scheduled."""
        return self._qt_timer.isActive()

    @property
    def detached(self) -> bool:
        return self._detached

    def stop(self) -> None:
        """Cancel ticking permanently.  Safe to call more than once."""
        if self._detached:
            return
        self._detached = True
        self._qt_timer.stop()
        self._engine.running_changed.disconnect(self._on_running_changed)
        logger.debug("[TICKER] detached")

    def _on_running_changed(self, running: bool) -> None:
        if self._detached:
            return
        if running:
            self._qt_timer.start()
        else:
            self._qt_timer.stop()

    def _on_timeout(self) -> None:
        # A timeout already queued when the engine paused must not count.
        if self._detached or not self._engine.running:
            self._qt_timer.stop()
            return
        self._engine.tick()
