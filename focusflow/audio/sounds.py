"""Timer cues synthesized with numpy and played through QSoundEffect.

Each cue is rendered once as a 16-bit mono WAV (sine partials shaped by an
ADSR envelope) and cached on disk, so later launches only load files.

Cue names
---------
- ``session_start``   : two quick rising notes when a work phase begins
- ``work_complete``   : soft bell: work is over, take a break
- ``break_complete``  : bright arpeggio: the full cycle is done
"""

from __future__ import annotations

import io
import wave
from collections.abc import Callable
from pathlib import Path

import numpy as np

from loguru import logger
from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_DIR


SOUNDS_DIR = APP_DIR / "sounds"

SOUND_NAMES = (
    "session_start",
    "work_complete",
    "break_complete",
)

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(
    length: int,
    attack: int,
    decay: int,
    sustain_level: float,
    release: int,
) -> np.ndarray:
    """ADSR envelope; all durations in samples, clipped to *length*."""
    env = np.full(length, sustain_level, dtype=np.float64)
    a_end = min(attack, length)
    d_end = min(a_end + decay, length)
    r_start = max(length - release, d_end)
    if a_end > 0:
        env[:a_end] = np.linspace(0.0, 1.0, a_end)
    if d_end > a_end:
        env[a_end:d_end] = np.linspace(1.0, sustain_level, d_end - a_end)
    if r_start < length:
        env[r_start:] = np.linspace(sustain_level, 0.0, length - r_start)
    return env


def _tone(freq: float, seconds: float, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * seconds)) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * freq * t)


def _silence(seconds: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * seconds))


def _wav_bytes(samples: np.ndarray) -> bytes:
    """float samples in [-1, 1] → 16-bit PCM mono WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  CUE GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _render_start() -> bytes:
    """G4 → D5, short and light."""
    parts: list[np.ndarray] = []
    for freq in (392.00, 587.33):
        note = _tone(freq, 0.11, 0.45)
        parts.append(note * _envelope(len(note), 80, 200, 0.4, 400))
        parts.append(_silence(0.025))
    return _wav_bytes(np.concatenate(parts))


def _render_bell() -> bytes:
    """A4 with an octave overtone, slow attack and a long tail."""
    seconds = 1.1
    bell = _tone(440.0, seconds, 0.35) + _tone(880.0, seconds, 0.07)
    env = _envelope(
        len(bell),
        attack=int(SAMPLE_RATE * 0.06),
        decay=int(SAMPLE_RATE * 0.3),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 0.6),
    )
    return _wav_bytes(bell * env)


def _render_arpeggio() -> bytes:
    """C5 → E5 → G5 → C6, last note held."""
    notes = (523.25, 659.25, 783.99, 1046.50)
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        if i == len(notes) - 1:
            note = _tone(freq, 0.35)
            parts.append(note * _envelope(len(note), 80, 300, 0.5, 600))
        else:
            note = _tone(freq, 0.10)
            parts.append(note * _envelope(len(note), 60, 150, 0.3, 200))
            parts.append(_silence(0.02))
    return _wav_bytes(np.concatenate(parts))


_RENDERERS: dict[str, Callable[[], bytes]] = {
    "session_start": _render_start,
    "work_complete": _render_bell,
    "break_complete": _render_arpeggio,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Renders, caches and plays the timer cues.

    Usage::

        sounds = SoundManager(parent=app)
        sounds.set_volume(70)
        sounds.play("work_complete")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._write_missing_cues()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a cue by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _write_missing_cues(self) -> None:
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, render in _RENDERERS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(render())
                logger.debug(f"[SOUND] rendered {path}")

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
