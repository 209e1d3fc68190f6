"""Tests for settings persistence, logging setup and the CLI runner."""

from __future__ import annotations

import json
import time

import pytest
from loguru import logger

from focusflow import __main__ as cli
from focusflow.database.db import get_session
from focusflow.database.models import CompletedSession
from focusflow.log import setup_logging
from focusflow.sessions.store import SessionLibrary
from focusflow.settings import Settings, load_settings, save_settings


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("focusflow.settings.SETTINGS_PATH", path)
    return path


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_defaults(self):
        s = Settings()
        assert s.sound_enabled is True
        assert s.sound_volume == 70
        assert s.notifications_enabled is True
        assert s.do_not_disturb is False
        assert s.log_level == "INFO"


class TestSettingsPersistence:
    def test_round_trip(self, settings_path):
        save_settings(Settings(sound_volume=42, do_not_disturb=True))
        loaded = load_settings()
        assert loaded.sound_volume == 42
        assert loaded.do_not_disturb is True

    def test_missing_file_returns_defaults(self, settings_path):
        assert load_settings() == Settings()

    def test_invalid_json_returns_defaults(self, settings_path):
        settings_path.write_text("NOT VALID JSON", encoding="utf-8")
        assert load_settings() == Settings()

    def test_non_object_json_returns_defaults(self, settings_path):
        settings_path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_settings() == Settings()

    def test_extra_keys_ignored(self, settings_path):
        data = {"sound_volume": 15, "unknown_future_key": True}
        settings_path.write_text(json.dumps(data), encoding="utf-8")
        s = load_settings()
        assert s.sound_volume == 15
        assert not hasattr(s, "unknown_future_key")

    def test_save_creates_directory(self, tmp_path, monkeypatch):
        path = tmp_path / "nested" / "settings.json"
        monkeypatch.setattr("focusflow.settings.SETTINGS_PATH", path)
        save_settings(Settings())
        assert path.exists()


class TestSettingsSanitizing:
    def _load(self, settings_path, **data):
        settings_path.write_text(json.dumps(data), encoding="utf-8")
        return load_settings()

    def test_unknown_log_level_falls_back(self, settings_path):
        assert self._load(settings_path, log_level="LOUD").log_level == "INFO"

    def test_non_string_log_level_falls_back(self, settings_path):
        assert self._load(settings_path, log_level=7).log_level == "INFO"

    def test_log_level_is_normalized(self, settings_path):
        assert self._load(settings_path, log_level=" debug ").log_level == "DEBUG"

    @pytest.mark.parametrize("raw, expected", [
        (150, 100),
        (-5, 0),
        (42.9, 42),
        ("loud", 70),
        (None, 70),
        (True, 70),
    ])
    def test_sound_volume_clamped(self, settings_path, raw, expected):
        assert self._load(settings_path, sound_volume=raw).sound_volume == expected

    def test_valid_values_kept(self, settings_path):
        s = self._load(settings_path, log_level="WARNING", sound_volume=0)
        assert s.log_level == "WARNING"
        assert s.sound_volume == 0


# ═══════════════════════════════════════════════════════════════════════
#  LOGGING
# ═══════════════════════════════════════════════════════════════════════


class TestLogging:
    def test_writes_to_log_file(self, tmp_path):
        log_file = setup_logging("DEBUG", log_dir=tmp_path)
        try:
            logger.info("timer ready")
            logger.complete()
            assert log_file == tmp_path / "focusflow.log"
            assert "timer ready" in log_file.read_text(encoding="utf-8")
        finally:
            logger.remove()

    def test_level_filters(self, tmp_path):
        log_file = setup_logging("WARNING", log_dir=tmp_path)
        try:
            logger.info("quiet")
            logger.warning("loud")
            text = log_file.read_text(encoding="utf-8")
            assert "loud" in text
            assert "quiet" not in text
        finally:
            logger.remove()


# ═══════════════════════════════════════════════════════════════════════
#  CLI
# ═══════════════════════════════════════════════════════════════════════


@pytest.fixture
def quiet_cli(tmp_path, monkeypatch, settings_path):
    monkeypatch.setattr(
        cli, "setup_logging", lambda level: setup_logging(level, log_dir=tmp_path),
    )
    yield
    logger.remove()


@pytest.mark.usefixtures("quiet_cli")
class TestCli:
    def test_list_presets(self, capsys):
        assert cli.main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "* Classic Pomodoro" in out
        assert "Deep Work" in out
        assert "25/5" in out

    def test_unknown_session(self, capsys):
        assert cli.main(["--session", "Nope"]) == 2
        assert "Unknown session preset" in capsys.readouterr().err

    def test_session_selects_before_run(self, monkeypatch, capsys):
        seen = {}

        def fake_run(library, settings):
            seen["active"] = library.get_active_config().name
            return 0

        monkeypatch.setattr(cli, "_run_cycle", fake_run)
        assert cli.main(["--session", "deep work"]) == 0
        assert seen["active"] == "Deep Work"
        assert cli.main(["--list"]) == 0
        assert "* Deep Work" in capsys.readouterr().out

    def test_bad_log_level_in_settings_file(self, settings_path, capsys):
        settings_path.write_text(json.dumps({"log_level": "LOUD"}), encoding="utf-8")
        assert cli.main(["--list"]) == 0
        assert "Classic Pomodoro" in capsys.readouterr().out


class RecordingSounds:
    """Stands in for SoundManager; notes each cue with the time it played."""

    def __init__(self):
        self.played: list[tuple[str, float]] = []

    def play(self, name: str) -> None:
        self.played.append((name, time.monotonic()))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.played]


@pytest.mark.usefixtures("quiet_cli", "qapp")
class TestRunCycle:
    @pytest.fixture
    def library(self):
        library = SessionLibrary()
        tiny = library.add_config("Tiny", 1, 1)
        library.set_active(tiny.id)
        return library

    def test_full_cycle(self, library, capsys):
        sounds = RecordingSounds()
        rc = cli._run_cycle(library, Settings(), sounds=sounds, interval_ms=1, quit_delay_ms=0)

        assert rc == 0
        assert sounds.names == ["session_start", "work_complete", "break_complete"]
        with get_session() as db:
            rows = db.query(CompletedSession).all()
            assert len(rows) == 1
            assert (rows[0].work_minutes, rows[0].break_minutes) == (1, 1)
            assert rows[0].config_name == "Tiny"
        assert "Tiny (1/1)" in capsys.readouterr().out

    def test_loop_outlives_final_cue(self, library):
        sounds = RecordingSounds()
        rc = cli._run_cycle(library, Settings(), sounds=sounds, interval_ms=1, quit_delay_ms=300)
        returned = time.monotonic()

        assert rc == 0
        name, played_at = sounds.played[-1]
        assert name == "break_complete"
        assert returned - played_at >= 0.25

    def test_muted_cycle_still_records(self, library):
        sounds = RecordingSounds()
        settings = Settings(sound_enabled=False)
        rc = cli._run_cycle(library, settings, sounds=sounds, interval_ms=1, quit_delay_ms=0)

        assert rc == 0
        assert sounds.names == []
        assert len(library.history()) == 1
