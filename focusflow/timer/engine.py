"""Pomodoro state machine for FocusFlow.

Phases
------
IDLE        Nothing running; remaining shows the next work length.
WORK        Work countdown.
BREAK       Break countdown.
COMPLETED   One full work + break cycle finished.  Terminal until
            ``reset()`` or ``start()``.

Transitions
-----------
IDLE | COMPLETED → WORK      (start)
WORK → BREAK                 (countdown hits 0, or skip)
BREAK → COMPLETED            (countdown hits 0)
BREAK → WORK                 (skip)
Any → IDLE                   (reset)

Pausing does not change the phase, it only clears ``running``.

The engine owns no timer.  Something else (``Ticker`` in the app, a plain
loop in tests) calls ``tick()`` once per elapsed second; ticks that arrive
while not running are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from loguru import logger
from PyQt6.QtCore import QObject, pyqtSignal

from .ports import (
    Clock,
    NotificationKind,
    NotificationSink,
    SessionConfig,
    SessionStore,
    SystemClock,
)


# ── enums / snapshots ─────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    WORK = "work"
    BREAK = "break"
    COMPLETED = "completed"


_COUNTING_PHASES = (Phase.WORK, Phase.BREAK)


@dataclass(frozen=True)
class TimerState:
    """Read-only view of the engine at one instant."""

    phase: Phase
    remaining_seconds: int
    active_config: SessionConfig | None
    running: bool


def format_remaining(seconds: int) -> str:
    """``1500`` → ``"25:00"``."""
    m, s = divmod(max(0, seconds), 60)
    return f"{m}:{s:02d}"


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Work/break countdown with injected store, notifier and clock.

    Signals
    -------
    remaining_changed(remaining_seconds: int)
        Emitted after every countdown change.
    phase_changed(new_phase: Phase)
        Emitted on every phase transition (including reset to IDLE).
    running_changed(running: bool)
        Emitted when the countdown starts or stops; tick sources follow it.
    session_completed(data: dict)
        Emitted on entering COMPLETED.  Keys: ``config_id``,
        ``config_name``, ``work_minutes``, ``break_minutes``,
        ``started_at``, ``completed_at``.
    """

    remaining_changed = pyqtSignal(int)
    phase_changed = pyqtSignal(object)
    running_changed = pyqtSignal(bool)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        store: SessionStore | None = None,
        notifier: NotificationSink | None = None,
        clock: Clock | None = None,
        parent: QObject | None = None,
        *,
        config: SessionConfig | None = None,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._store = store
        self._notifier = notifier
        self._clock: Clock = clock or SystemClock()

        # ── phase state ───────────────────────────────────────────────
        self._phase: Phase = Phase.IDLE
        self._running: bool = False
        self._config: SessionConfig | None = (
            config if config is not None else self._load_active_config()
        )

        # ── countdown state ───────────────────────────────────────────
        self._remaining: int = self._config.work_seconds if self._config else 0
        self._phase_total: int = self._remaining
        self._cycle_started_at: datetime | None = None
        self._cycle_work_seconds: int = 0

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def config(self) -> SessionConfig | None:
        return self._config

    @property
    def total_duration(self) -> int:
        """Length in seconds of the countdown currently shown."""
        return self._phase_total

    @property
    def progress(self) -> float:
        """0.0 → 1.0 through the current phase."""
        if self._phase is Phase.COMPLETED:
            return 1.0
        if self._phase_total <= 0:
            return 0.0
        return max(0.0, min(1.0, 1 - self._remaining / self._phase_total))

    def snapshot(self) -> TimerState:
        return TimerState(
            phase=self._phase,
            remaining_seconds=self._remaining,
            active_config=self._config,
            running=self._running,
        )

    def set_config(self, config: SessionConfig | None) -> None:
        """Swap the active preset.

        While IDLE or COMPLETED the countdown is resized to the new work
        length.  While WORK or BREAK the current countdown keeps its length;
        the new preset applies from the next phase on.
        """
        if config is None and self._phase is not Phase.IDLE:
            return
        self._config = config
        if self._phase in (Phase.IDLE, Phase.COMPLETED):
            self._remaining = config.work_seconds if config else 0
            self._phase_total = self._remaining
            self.remaining_changed.emit(self._remaining)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin a cycle from IDLE/COMPLETED, or resume a paused phase."""
        if self._phase in _COUNTING_PHASES:
            self.resume()
            return
        if self._config is None:
            self._config = self._load_active_config()
            if self._config is None:
                logger.debug("[TIMER] start ignored: no active session config")
                return
        self._cycle_started_at = self._clock.now()
        self._enter_phase(Phase.WORK, self._config.work_seconds, running=True)

    def pause(self) -> None:
        if self._phase not in _COUNTING_PHASES or not self._running:
            return
        self._set_running(False)

    def resume(self) -> None:
        if self._phase not in _COUNTING_PHASES or self._running:
            return
        self._set_running(True)

    def reset(self) -> None:
        """Stop and return to IDLE with a full work countdown."""
        self._cycle_started_at = None
        work = self._config.work_seconds if self._config else 0
        self._enter_phase(Phase.IDLE, work, running=False)

    def skip(self) -> None:
        """Jump WORK → BREAK or BREAK → WORK without notifying.

        The running flag is left alone, so a paused timer stays paused.
        """
        if self._phase is Phase.WORK:
            self._enter_phase(Phase.BREAK, self._config.break_seconds)
        elif self._phase is Phase.BREAK:
            self._cycle_started_at = self._clock.now()
            self._enter_phase(Phase.WORK, self._config.work_seconds)

    def tick(self) -> None:
        """Advance the countdown by one second (no-op unless running)."""
        if not self._running:
            return
        self._remaining = max(0, self._remaining - 1)
        if self._remaining > 0:
            self.remaining_changed.emit(self._remaining)
            return

        if self._phase is Phase.WORK:
            self._enter_phase(Phase.BREAK, self._config.break_seconds)
            self._notify(NotificationKind.WORK_COMPLETE)
        elif self._phase is Phase.BREAK:
            self._complete_cycle()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _enter_phase(
        self, phase: Phase, seconds: int, *, running: bool | None = None
    ) -> None:
        previous = self._phase
        was_running = self._running

        self._phase = phase
        self._remaining = max(0, seconds)
        self._phase_total = self._remaining
        if phase is Phase.WORK:
            self._cycle_work_seconds = self._remaining
        if running is not None:
            self._running = running

        logger.debug(
            f"[TIMER] {previous.value} -> {phase.value} "
            f"({self._remaining}s, running={self._running})"
        )
        self.phase_changed.emit(phase)
        self.remaining_changed.emit(self._remaining)
        if self._running != was_running:
            self.running_changed.emit(self._running)

    def _set_running(self, running: bool) -> None:
        self._running = running
        logger.debug(f"[TIMER] {'resumed' if running else 'paused'} in {self._phase.value}")
        self.running_changed.emit(running)

    def _complete_cycle(self) -> None:
        config = self._config
        data = {
            "config_id": config.id,
            "config_name": config.name,
            "work_minutes": self._cycle_work_seconds // 60,
            "break_minutes": self._phase_total // 60,
            "started_at": self._cycle_started_at,
            "completed_at": self._clock.now(),
        }
        # State is committed before any collaborator runs.
        self._enter_phase(Phase.COMPLETED, 0, running=False)
        self._notify(NotificationKind.BREAK_COMPLETE)
        self._persist(data)
        self.session_completed.emit(data)

    def _notify(self, kind: NotificationKind) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(kind)
        except Exception:
            logger.exception(f"[TIMER] notification {kind.value} failed")

    def _persist(self, data: dict) -> None:
        if self._store is None:
            return
        try:
            self._store.record_completed_session(
                data["work_minutes"],
                data["break_minutes"],
                config_id=data["config_id"],
                config_name=data["config_name"],
                started_at=data["started_at"],
                completed_at=data["completed_at"],
            )
        except Exception:
            logger.exception("[TIMER] recording completed session failed")

    def _load_active_config(self) -> SessionConfig | None:
        if self._store is None:
            return None
        try:
            return self._store.get_active_config()
        except Exception:
            logger.exception("[TIMER] loading active session config failed")
            return None
