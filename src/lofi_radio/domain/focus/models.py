"""
Focus timer domain models.

Contains the countdown state, the named presets, and the immutable
session records written when a timer stops or completes.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

CUSTOM_PRESET_LABEL = "Custom"


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class FocusPreset(Enum):
    """Named fixed-duration timer configurations: (label, minutes, description)."""

    POMODORO = ("Pomodoro", 25, "Focus for 25 minutes")
    STUDY = ("Study Session", 50, "Study session for 50 minutes")
    DEEP_WORK = ("Deep Work", 90, "Deep focus for 90 minutes")
    SLEEP = ("Sleep", 60, "Relax for 1 hour")
    MEDITATION = ("Meditation", 10, "Mindful break for 10 minutes")
    SHORT_BREAK = ("Short Break", 5, "Quick 5-minute break")

    def __init__(self, label: str, minutes: int, description: str):
        self.label = label
        self.minutes = minutes
        self.description = description

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return float(self.minutes * 60)

    @classmethod
    def from_name(cls, name: str) -> "FocusPreset":
        """Look up a preset by label ("Deep Work") or enum name ("deep_work").

        Raises:
            ValueError: If no preset matches
        """
        key = name.strip().casefold().replace("-", "_").replace(" ", "_")
        for preset in cls:
            if key in (preset.name.casefold(), preset.label.casefold().replace(" ", "_")):
                return preset
        valid = ", ".join(p.label for p in cls)
        raise ValueError(f"Unknown preset {name!r}. Valid presets are: {valid}")


@dataclass
class FocusTimer:
    """A single countdown. remaining only decreases while RUNNING."""

    duration: float
    remaining: float
    state: TimerState = TimerState.IDLE
    started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None

    @classmethod
    def create(cls, duration: float) -> "FocusTimer":
        if duration <= 0:
            raise ValueError(f"Timer duration must be > 0, got {duration}")
        return cls(duration=float(duration), remaining=float(duration))

    @property
    def elapsed(self) -> float:
        return max(0.0, self.duration - self.remaining)

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 0.0
        return 1.0 - (self.remaining / self.duration)

    @property
    def formatted_remaining(self) -> str:
        total = int(self.remaining)
        hours = total // 3600
        minutes = (total % 3600) // 60
        seconds = total % 60
        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


@dataclass(frozen=True)
class FocusSession:
    """Historical record of one stopped or completed timer."""

    preset: str
    duration: float  # Seconds actually run
    completed: bool  # True only if the timer reached zero on its own
    completed_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
