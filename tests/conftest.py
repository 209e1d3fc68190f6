"""Shared pytest fixtures for FocusFlow tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from focusflow.database.db import configure_engine, init_db
from focusflow.timer.engine import TimerEngine
from focusflow.timer.ports import SessionConfig

from helpers import FakeClock, RecordingNotifier, RecordingStore


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def classic():
    return SessionConfig(id=1, name="Classic Pomodoro", work_minutes=25, break_minutes=5)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(classic):
    return RecordingStore(classic)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def engine(qapp, store, notifier, clock):
    """Fresh TimerEngine on a 25/5 preset with recording collaborators."""
    return TimerEngine(store=store, notifier=notifier, clock=clock)
