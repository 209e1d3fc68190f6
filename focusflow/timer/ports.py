"""Collaborators the timer engine talks to.

The engine never reaches for a global: a store, a notification sink and a
clock are handed to it at construction.  Anything that quacks like the
protocols below will do (the SQLAlchemy ``SessionLibrary``, the Qt
``AlertNotifier``, or the fakes used in tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SessionConfig:
    """A named work/break pair, e.g. "Classic Pomodoro" 25/5."""

    id: int | None
    name: str
    work_minutes: int
    break_minutes: int

    def __post_init__(self) -> None:
        for label, value in (("work", self.work_minutes), ("break", self.break_minutes)):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(
                    f"{label.capitalize()} minutes must be a positive integer, got {value!r}."
                )

    @property
    def work_seconds(self) -> int:
        return self.work_minutes * 60

    @property
    def break_seconds(self) -> int:
        return self.break_minutes * 60

    @property
    def label(self) -> str:
        return f"{self.work_minutes}/{self.break_minutes}"


class NotificationKind(Enum):
    WORK_COMPLETE = "work_complete"
    BREAK_COMPLETE = "break_complete"


@runtime_checkable
class SessionStore(Protocol):
    """Source of the active preset and sink for finished cycles."""

    def get_active_config(self) -> SessionConfig | None: ...

    def record_completed_session(
        self,
        work_minutes: int,
        break_minutes: int,
        *,
        config_id: int | None = None,
        config_name: str | None = None,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
    ) -> None: ...


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, kind: NotificationKind) -> None: ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now()
