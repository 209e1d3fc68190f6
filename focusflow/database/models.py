"""SQLAlchemy ORM models for FocusFlow."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SessionPreset(Base):
    """A named work/break preset the user can pick."""

    __tablename__ = "session_configs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    work_minutes = Column(Integer, nullable=False, default=25)
    break_minutes = Column(Integer, nullable=False, default=5)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<SessionPreset id={self.id} name={self.name!r} "
            f"{self.work_minutes}/{self.break_minutes} active={self.is_active}>"
        )


class CompletedSession(Base):
    """One finished work + break cycle.

    ``config_id`` is a loose reference: presets can be deleted while their
    history stays, so the name and lengths are copied in.
    """

    __tablename__ = "completed_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_id = Column(Integer, nullable=True)
    config_name = Column(String(120), nullable=True)
    work_minutes = Column(Integer, nullable=False)
    break_minutes = Column(Integer, nullable=False)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<CompletedSession id={self.id} "
            f"{self.work_minutes}/{self.break_minutes} at={self.completed_at}>"
        )
