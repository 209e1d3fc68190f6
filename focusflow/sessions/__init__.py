"""Session presets and history."""

from .store import CompletedCycle, SessionLibrary

__all__ = ["CompletedCycle", "SessionLibrary"]
