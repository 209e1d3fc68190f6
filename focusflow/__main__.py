"""Run one FocusFlow pomodoro from the terminal: python -m focusflow."""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from .database.db import configure_engine, init_db
from .log import setup_logging
from .sessions.store import SessionLibrary
from .settings import load_settings
from .timer.engine import Phase, TimerEngine, format_remaining

# cue playback and the tray balloon get this long before the loop exits
QUIT_DELAY_MS = 1500


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="focusflow",
        description="Run one work + break pomodoro cycle.",
    )
    parser.add_argument("--list", action="store_true", help="list session presets and exit")
    parser.add_argument("--session", metavar="NAME", help="preset to run (default: the active one)")
    parser.add_argument("--db", metavar="URL", help="SQLAlchemy database URL override")
    return parser


def _print_presets(library: SessionLibrary) -> None:
    active = library.get_active_config()
    for config in library.list_configs():
        marker = "*" if active and config.id == active.id else " "
        print(f"{marker} {config.name:<24} {config.label}")


def _run_cycle(
    library: SessionLibrary,
    settings,
    *,
    sounds=None,
    interval_ms: int | None = None,
    quit_delay_ms: int = QUIT_DELAY_MS,
) -> int:
    from PyQt6.QtCore import QTimer
    from PyQt6.QtGui import QColor, QIcon, QPixmap, QPainter
    from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

    from .audio.sounds import SoundManager
    from .notifications import AlertNotifier
    from .timer.ticker import Ticker, TICK_INTERVAL_MS

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("FocusFlow")
    app.setOrganizationName("FocusFlow")
    app.setQuitOnLastWindowClosed(False)

    if sounds is None:
        sounds = SoundManager(parent=app)
        sounds.set_volume(settings.sound_volume)
        sounds.set_enabled(settings.sound_enabled)

    tray = None
    if QSystemTrayIcon.isSystemTrayAvailable():
        icon = QPixmap(64, 64)
        icon.fill(QColor(0, 0, 0, 0))
        p = QPainter(icon)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        p.setBrush(QColor("#3B82F6"))
        p.drawEllipse(4, 4, 56, 56)
        p.end()
        tray = QSystemTrayIcon(QIcon(icon), app)
        tray.show()

    notifier = AlertNotifier(
        sounds, settings, show_message=tray.showMessage if tray else None,
    )
    engine = TimerEngine(store=library, notifier=notifier, parent=app)
    ticker = Ticker(engine, parent=app, interval_ms=interval_ms or TICK_INTERVAL_MS)

    def on_remaining(remaining: int) -> None:
        label = engine.phase.value
        print(f"\r{label:>9}  {format_remaining(remaining)} ", end="", flush=True)
        if tray is not None:
            tray.setToolTip(f"FocusFlow: {label} {format_remaining(remaining)}")

    def on_phase(phase: Phase) -> None:
        notifier.on_phase_changed(phase)
        if phase is Phase.COMPLETED:
            print()

    def on_completed(_data: dict) -> None:
        # session_completed fires after the cue has started and the row is saved
        QTimer.singleShot(quit_delay_ms, app.quit)

    engine.remaining_changed.connect(on_remaining)
    engine.phase_changed.connect(on_phase)
    engine.session_completed.connect(on_completed)

    engine.start()
    if engine.phase is not Phase.WORK:
        logger.error("No session preset available to run")
        ticker.stop()
        return 1
    print(f"{engine.config.name} ({engine.config.label})")

    try:
        return app.exec()
    finally:
        ticker.stop()
        if tray is not None:
            tray.hide()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level)

    if args.db:
        configure_engine(args.db)
    init_db()
    library = SessionLibrary()

    if args.list:
        _print_presets(library)
        return 0

    if args.session:
        config = library.find_config(args.session)
        if config is None:
            print(f"Unknown session preset: {args.session}", file=sys.stderr)
            return 2
        library.set_active(config.id)

    return _run_cycle(library, settings)


if __name__ == "__main__":
    sys.exit(main())
