"""Database connection and session management."""

from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..settings import APP_DIR
from .models import Base, SessionPreset

# ── paths ────────────────────────────────────────────────────────────────────

DB_PATH = APP_DIR / "focusflow.db"

# (name, work minutes, break minutes); the first one starts out active
DEFAULT_PRESETS = (
    ("Classic Pomodoro", 25, 5),
    ("Deep Work", 50, 10),
    ("Quick Focus", 15, 3),
)

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests (and ``--db``)
    to point somewhere other than the file in the app directory."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db() -> None:
    """Create all tables and seed the default presets."""
    engine = _get_engine()
    Base.metadata.create_all(engine)

    factory = _get_session_factory()
    with factory() as session:
        if session.query(SessionPreset).count() == 0:
            for index, (name, work, brk) in enumerate(DEFAULT_PRESETS):
                session.add(SessionPreset(
                    name=name,
                    work_minutes=work,
                    break_minutes=brk,
                    is_active=index == 0,
                ))
            session.commit()
            logger.info(f"[DB] seeded {len(DEFAULT_PRESETS)} default presets")


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
