"""
Playback state and queue management for Lofi Radio

Transport state, repeat mode, and the playback queue with its
pre-shuffle snapshot.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from lofi_radio.domain.library.models import RadioStation, Track


class PlaybackState(str, Enum):
    """Transport state. Exactly one is active at a time."""

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    ERRORED = "errored"


class RepeatMode(str, Enum):
    OFF = "off"
    ALL = "repeat-all"
    ONE = "repeat-one"

    def cycled(self) -> "RepeatMode":
        """off -> repeat-all -> repeat-one -> off"""
        order = [RepeatMode.OFF, RepeatMode.ALL, RepeatMode.ONE]
        return order[(order.index(self) + 1) % len(order)]


class PlayerStatus(NamedTuple):
    """Immutable snapshot of the controller, handed to observers."""

    state: PlaybackState = PlaybackState.IDLE
    error: Optional[str] = None  # Set only when state is ERRORED
    current_track: Optional[Track] = None
    current_index: Optional[int] = None
    position: float = 0.0
    duration: float = 0.0
    is_playing: bool = False
    volume: float = 0.8
    is_shuffled: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    queue: tuple[Track, ...] = ()
    station: Optional[RadioStation] = None

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 0.0
        return min(1.0, self.position / self.duration)


@dataclass
class PlaybackQueue:
    """Ordered tracks plus a pointer to the one loaded in the renderer.

    `original` keeps the order the queue was set with so shuffle can be
    undone exactly.
    """

    tracks: list[Track] = field(default_factory=list)
    original: list[Track] = field(default_factory=list)
    current_index: Optional[int] = None
    is_shuffled: bool = False

    def __len__(self) -> int:
        return len(self.tracks)

    def replace(self, tracks: list[Track], start_index: Optional[int] = None) -> None:
        """Set a new queue and original-order snapshot, dropping shuffle."""
        self.tracks = list(tracks)
        self.original = list(tracks)
        self.is_shuffled = False
        if start_index is not None and 0 <= start_index < len(self.tracks):
            self.current_index = start_index
        else:
            self.current_index = None

    @property
    def current(self) -> Optional[Track]:
        if self.current_index is None:
            return None
        return self.tracks[self.current_index]

    @property
    def has_next(self) -> bool:
        return self.current_index is not None and self.current_index < len(self.tracks) - 1

    @property
    def has_previous(self) -> bool:
        return self.current_index is not None and self.current_index > 0

    def index_of(self, track: Track) -> Optional[int]:
        """Get the 0-based position of a track, or None if not queued."""
        try:
            return self.tracks.index(track)
        except ValueError:
            return None

    def shuffle(self, rng: random.Random) -> None:
        """Shuffle the queue keeping the current track loaded, moved to position 0."""
        self.is_shuffled = True
        if not self.tracks:
            return

        current = self.current
        if current is None:
            rng.shuffle(self.tracks)
            return

        remaining = self.tracks[: self.current_index] + self.tracks[self.current_index + 1 :]
        rng.shuffle(remaining)
        self.tracks = [current] + remaining
        self.current_index = 0

    def unshuffle(self, current: Optional[Track]) -> None:
        """Restore the original order and point at `current` in it.

        If `current` is not in the original order (the queue changed while
        shuffled), the pointer resets to the first track.
        """
        self.is_shuffled = False
        self.tracks = list(self.original)

        if not self.tracks or current is None:
            self.current_index = None
            return

        index = self.index_of(current)
        self.current_index = index if index is not None else 0
