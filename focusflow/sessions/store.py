"""SQLAlchemy-backed session store.

``SessionLibrary`` is what the timer engine talks to as its
``SessionStore``: it hands out the active preset and records finished
cycles.  It also carries the preset management the UI needs (add, edit,
delete, pick).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from loguru import logger
from sqlalchemy import func

from ..database.db import get_session
from ..database.models import CompletedSession, SessionPreset
from ..timer.ports import SessionConfig


@dataclass(frozen=True)
class CompletedCycle:
    id: int
    config_id: int | None
    config_name: str | None
    work_minutes: int
    break_minutes: int
    started_at: datetime | None
    completed_at: datetime


def _to_config(row: SessionPreset) -> SessionConfig:
    return SessionConfig(
        id=row.id,
        name=row.name,
        work_minutes=row.work_minutes,
        break_minutes=row.break_minutes,
    )


def _to_cycle(row: CompletedSession) -> CompletedCycle:
    return CompletedCycle(
        id=row.id,
        config_id=row.config_id,
        config_name=row.config_name,
        work_minutes=row.work_minutes,
        break_minutes=row.break_minutes,
        started_at=row.started_at,
        completed_at=row.completed_at,
    )


def _validate(name: str | None, work_minutes: int | None, break_minutes: int | None) -> None:
    if name is not None and not name.strip():
        raise ValueError("Session name must not be empty.")
    for label, value in (("work", work_minutes), ("break", break_minutes)):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"{label.capitalize()} minutes must be a positive integer, got {value!r}.")


class SessionLibrary:
    """Presets and completed-cycle history in the app database."""

    # ── presets ───────────────────────────────────────────────────────

    def list_configs(self) -> list[SessionConfig]:
        with get_session() as db:
            rows = db.query(SessionPreset).order_by(SessionPreset.id).all()
            return [_to_config(r) for r in rows]

    def get_config(self, config_id: int) -> SessionConfig | None:
        with get_session() as db:
            row = db.get(SessionPreset, config_id)
            return _to_config(row) if row else None

    def find_config(self, name: str) -> SessionConfig | None:
        """Case-insensitive lookup by preset name."""
        wanted = name.strip().lower()
        for config in self.list_configs():
            if config.name.lower() == wanted:
                return config
        return None

    def add_config(self, name: str, work_minutes: int, break_minutes: int) -> SessionConfig:
        _validate(name, work_minutes, break_minutes)
        with get_session() as db:
            row = SessionPreset(
                name=name.strip(),
                work_minutes=work_minutes,
                break_minutes=break_minutes,
                is_active=db.query(SessionPreset).count() == 0,
            )
            db.add(row)
            db.flush()
            config = _to_config(row)
        logger.info(f"[SESSIONS] added preset {config.name!r} ({config.label})")
        return config

    def update_config(
        self,
        config_id: int,
        *,
        name: str | None = None,
        work_minutes: int | None = None,
        break_minutes: int | None = None,
    ) -> SessionConfig | None:
        """Edit a preset in place.  Returns ``None`` for an unknown id."""
        _validate(name, work_minutes, break_minutes)
        with get_session() as db:
            row = db.get(SessionPreset, config_id)
            if row is None:
                return None
            if name is not None:
                row.name = name.strip()
            if work_minutes is not None:
                row.work_minutes = work_minutes
            if break_minutes is not None:
                row.break_minutes = break_minutes
            config = _to_config(row)
        logger.info(f"[SESSIONS] updated preset {config.id} -> {config.name!r} ({config.label})")
        return config

    def delete_config(self, config_id: int) -> bool:
        """Delete a preset.  The last remaining preset cannot be deleted.

        If the active preset goes, the first remaining one becomes active.
        """
        with get_session() as db:
            if db.query(SessionPreset).count() <= 1:
                return False
            row = db.get(SessionPreset, config_id)
            if row is None:
                return False
            was_active = row.is_active
            db.delete(row)
            db.flush()
            if was_active:
                first = db.query(SessionPreset).order_by(SessionPreset.id).first()
                first.is_active = True
        logger.info(f"[SESSIONS] deleted preset {config_id}")
        return True

    def set_active(self, config_id: int) -> SessionConfig | None:
        with get_session() as db:
            row = db.get(SessionPreset, config_id)
            if row is None:
                return None
            db.query(SessionPreset).update({SessionPreset.is_active: False})
            row.is_active = True
            return _to_config(row)

    def get_active_config(self) -> SessionConfig | None:
        with get_session() as db:
            row = (
                db.query(SessionPreset)
                .filter(SessionPreset.is_active.is_(True))
                .first()
            )
            if row is None:
                row = db.query(SessionPreset).order_by(SessionPreset.id).first()
            return _to_config(row) if row else None

    # ── history ───────────────────────────────────────────────────────

    def record_completed_session(
        self,
        work_minutes: int,
        break_minutes: int,
        *,
        config_id: int | None = None,
        config_name: str | None = None,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
    ) -> None:
        with get_session() as db:
            db.add(CompletedSession(
                config_id=config_id,
                config_name=config_name,
                work_minutes=work_minutes,
                break_minutes=break_minutes,
                started_at=started_at,
                completed_at=completed_at or datetime.now(),
            ))
        logger.info(f"[SESSIONS] recorded cycle {work_minutes}/{break_minutes}")

    def history(self, limit: int | None = None) -> list[CompletedCycle]:
        """Completed cycles, newest first."""
        with get_session() as db:
            query = db.query(CompletedSession).order_by(
                CompletedSession.completed_at.desc(),
                CompletedSession.id.desc(),
            )
            if limit is not None:
                query = query.limit(limit)
            return [_to_cycle(r) for r in query.all()]

    def daily_summary(self, day: date) -> tuple[int, int]:
        """``(cycles, focus_minutes)`` completed on *day*."""
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        with get_session() as db:
            cycles, minutes = (
                db.query(
                    func.count(CompletedSession.id),
                    func.coalesce(func.sum(CompletedSession.work_minutes), 0),
                )
                .filter(CompletedSession.completed_at >= start)
                .filter(CompletedSession.completed_at < end)
                .one()
            )
        return int(cycles), int(minutes)
