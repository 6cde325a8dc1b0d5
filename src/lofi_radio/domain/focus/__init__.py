"""Focus domain - countdown timer, presets and session history."""

from .history import FocusHistory
from .models import (
    CUSTOM_PRESET_LABEL,
    FocusPreset,
    FocusSession,
    FocusTimer,
    TimerState,
)
from .timer import COMPLETION_GRACE, TICK_INTERVAL, FocusTimerManager, Scheduler

__all__ = [
    # Models
    "FocusTimer",
    "FocusSession",
    "FocusPreset",
    "TimerState",
    "CUSTOM_PRESET_LABEL",
    # Timer
    "FocusTimerManager",
    "Scheduler",
    "TICK_INTERVAL",
    "COMPLETION_GRACE",
    # History
    "FocusHistory",
]
