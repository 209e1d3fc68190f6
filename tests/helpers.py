"""Shared test helpers for FocusFlow."""

from datetime import datetime, timedelta

from focusflow.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2024, 3, 4, 9, 0, 0)):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += timedelta(seconds=seconds)


class RecordingStore:
    """In-memory SessionStore; optionally fails on record."""

    def __init__(self, config=None, *, fail_on_record=False, fail_on_load=False):
        self.config = config
        self.records: list[dict] = []
        self.fail_on_record = fail_on_record
        self.fail_on_load = fail_on_load

    def get_active_config(self):
        if self.fail_on_load:
            raise ConnectionError("store offline")
        return self.config

    def record_completed_session(self, work_minutes, break_minutes, **extra):
        if self.fail_on_record:
            raise ConnectionError("store offline")
        self.records.append({"work_minutes": work_minutes, "break_minutes": break_minutes, **extra})


class RecordingNotifier:
    def __init__(self, *, fail=False):
        self.kinds: list = []
        self.fail = fail

    def notify(self, kind):
        self.kinds.append(kind)
        if self.fail:
            raise RuntimeError("no audio device")


def run_ticks(engine: TimerEngine, count: int) -> None:
    for _ in range(count):
        engine.tick()
