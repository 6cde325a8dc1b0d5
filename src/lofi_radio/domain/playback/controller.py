"""
Playback controller for Lofi Radio

Owns the single "now playing" track, the queue and the transport state,
and bridges them to an AudioRenderer. Meant to be driven from one asyncio
event loop; it does no locking of its own.
"""

import math
import random
from typing import TYPE_CHECKING, Callable, Optional
from urllib.parse import urlparse

from loguru import logger

from lofi_radio.core.exceptions import InvalidStreamLocatorError, RendererError
from lofi_radio.domain.library.models import RadioStation, Track

from .renderer import AudioRenderer
from .state import PlaybackQueue, PlaybackState, PlayerStatus, RepeatMode

if TYPE_CHECKING:
    from lofi_radio.domain.catalog.library import CatalogLibrary

StatusCallback = Callable[[PlayerStatus], None]

DEFAULT_SKIP_SECONDS = 15.0

# previous() restarts the current track once this many seconds have played
RESTART_THRESHOLD = 3.0


def validate_stream_url(stream_url: str) -> None:
    """Reject locators no renderer could open.

    Raises:
        InvalidStreamLocatorError: If the URL has no usable scheme/host
    """
    if not stream_url or not stream_url.strip():
        raise InvalidStreamLocatorError(stream_url)

    parsed = urlparse(stream_url)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return
    if parsed.scheme == "file" and parsed.path:
        return
    if not parsed.scheme and stream_url.startswith("/"):
        return  # Absolute local path
    raise InvalidStreamLocatorError(stream_url)


def format_time(seconds: float) -> str:
    """Format time in seconds as M:SS."""
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    minutes = int(seconds) // 60
    secs = int(seconds) % 60
    return f"{minutes}:{secs:02d}"


class PlaybackController:
    """Transport, queue navigation, shuffle and repeat on top of a renderer."""

    def __init__(
        self,
        renderer: AudioRenderer,
        catalog: Optional["CatalogLibrary"] = None,
        volume: float = 0.8,
        restart_threshold: float = RESTART_THRESHOLD,
        skip_interval: float = DEFAULT_SKIP_SECONDS,
        rng: Optional[random.Random] = None,
    ):
        self.renderer = renderer
        self.catalog = catalog
        self.restart_threshold = restart_threshold
        self.skip_interval = skip_interval
        self.queue = PlaybackQueue()
        self.repeat_mode = RepeatMode.OFF

        self._rng = rng or random.Random()
        self._state = PlaybackState.IDLE
        self._error: Optional[str] = None
        self._current_track: Optional[Track] = None
        self._station: Optional[RadioStation] = None
        self._position = 0.0
        self._duration = 0.0
        self._is_playing = False
        self._volume = max(0.0, min(1.0, volume))
        self._has_session = False  # True once a stream has been handed to the renderer
        self._interrupted = False
        self._load_request_id = 0
        self._subscribers: list[StatusCallback] = []

        self.renderer.attach(self)

    # Observers

    def subscribe(self, callback: StatusCallback) -> Callable[[], None]:
        """Register a status observer. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def status(self) -> PlayerStatus:
        return PlayerStatus(
            state=self._state,
            error=self._error,
            current_track=self._current_track,
            current_index=self.queue.current_index,
            position=self._position,
            duration=self._duration,
            is_playing=self._is_playing,
            volume=self._volume,
            is_shuffled=self.queue.is_shuffled,
            repeat_mode=self.repeat_mode,
            queue=tuple(self.queue.tracks),
            station=self._station,
        )

    def _notify(self) -> None:
        snapshot = self.status()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception(f"Status subscriber {callback!r} failed")

    # Read-only accessors

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def current_track(self) -> Optional[Track]:
        return self._current_track

    @property
    def current_station(self) -> Optional[RadioStation]:
        return self._station

    @property
    def current_index(self) -> Optional[int]:
        return self.queue.current_index

    @property
    def position(self) -> float:
        return self._position

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def is_shuffled(self) -> bool:
        return self.queue.is_shuffled

    @property
    def has_next(self) -> bool:
        return self.queue.has_next

    @property
    def has_previous(self) -> bool:
        return self.queue.has_previous

    @property
    def progress(self) -> float:
        return self.status().progress

    @property
    def formatted_current_time(self) -> str:
        return format_time(self._position)

    @property
    def formatted_duration(self) -> str:
        return format_time(self._duration)

    # Queue

    def set_queue(self, tracks: list[Track], start_index: Optional[int] = None) -> None:
        """Replace the queue. The playing track keeps its index if it is still queued."""
        self.queue.replace(tracks, start_index)
        if start_index is None and self._current_track is not None:
            self.queue.current_index = self.queue.index_of(self._current_track)
        logger.debug(f"Queue set: {len(tracks)} tracks, index={self.queue.current_index}")
        self._notify()

    async def refresh_queue(self) -> None:
        """Reload the queue from the catalog (sample tracks if the fetch fails)."""
        if self.catalog is None:
            logger.warning("refresh_queue called without a catalog")
            return
        tracks = await self.catalog.refresh()
        self.set_queue(tracks)

    # Loading

    async def load_and_play(self, track: Track) -> None:
        """Load a track into the renderer and start it once ready.

        A failed load leaves the track set with state ERRORED. If another
        load starts before this one resolves, this one's result is dropped.
        """
        self._load_request_id += 1
        request_id = self._load_request_id

        self._current_track = track
        self._state = PlaybackState.LOADING
        self._error = None
        self._position = 0.0
        self._duration = track.duration
        self._is_playing = False
        self._interrupted = False
        logger.info(f"Loading: {track.artist} - {track.title}")

        try:
            validate_stream_url(track.stream_url)
        except InvalidStreamLocatorError as e:
            logger.warning(str(e))
            if self._has_session:
                self.renderer.pause()  # Silence the previous stream
            self._has_session = False
            self._set_error("Invalid URL")
            return

        self._has_session = True
        self._notify()

        try:
            duration = await self.renderer.load(track.stream_url)
        except RendererError as e:
            if request_id != self._load_request_id:
                logger.debug(f"Ignoring error from superseded load of {track.title}")
                return
            logger.warning(f"Failed to load {track.title}: {e.reason}")
            self._set_error(e.reason)
            return

        if request_id != self._load_request_id:
            logger.debug(f"Ignoring superseded load of {track.title}")
            return

        if duration > 0:
            self._duration = duration
        self.renderer.set_volume(self._volume)

        # Paused while loading: stay paused
        if self._state == PlaybackState.LOADING:
            self.renderer.play()
            self._state = PlaybackState.PLAYING
            self._is_playing = True
            logger.info(f"Now playing: {track.artist} - {track.title}")
        self._notify()

    def _set_error(self, reason: str) -> None:
        self._state = PlaybackState.ERRORED
        self._error = reason
        self._is_playing = False
        self._notify()

    async def play_track(self, track: Track) -> None:
        """Play a track, pointing the queue at it when it is queued."""
        index = self.queue.index_of(track)
        if index is not None:
            self.queue.current_index = index
        self._station = None
        await self.load_and_play(track)

    async def play_station(self, station: RadioStation) -> None:
        self._station = station
        await self.load_and_play(station.as_track())

    async def play_at(self, index: int) -> None:
        if not 0 <= index < len(self.queue):
            logger.debug(f"play_at({index}) ignored: queue has {len(self.queue)} tracks")
            return
        self.queue.current_index = index
        self._station = None
        await self.load_and_play(self.queue.tracks[index])

    # Transport

    def play(self) -> None:
        if not self._has_session:
            return
        if self._state in (PlaybackState.ERRORED, PlaybackState.LOADING):
            return
        self.renderer.play()
        self._is_playing = True
        self._state = PlaybackState.PLAYING
        self._notify()

    def pause(self) -> None:
        if not self._has_session:
            return
        if self._state not in (PlaybackState.PLAYING, PlaybackState.LOADING):
            return
        self.renderer.pause()
        self._is_playing = False
        self._state = PlaybackState.PAUSED
        self._notify()

    def toggle(self) -> None:
        if self._is_playing:
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        if not self._has_session:
            return
        self.renderer.pause()
        self.renderer.seek(0.0)
        self._is_playing = False
        self._state = PlaybackState.STOPPED
        self._position = 0.0
        self._notify()

    def seek(self, time: float) -> float:
        """Seek within the current track. Returns the clamped position."""
        if not self._has_session:
            return self._position
        target = max(0.0, min(time, self._duration))
        self.renderer.seek(target)
        self._position = target
        self._notify()
        return target

    def seek_to_progress(self, fraction: float) -> float:
        return self.seek(fraction * self._duration)

    def skip_forward(self, seconds: Optional[float] = None) -> float:
        step = self.skip_interval if seconds is None else seconds
        return self.seek(min(self._position + step, self._duration))

    def skip_backward(self, seconds: Optional[float] = None) -> float:
        step = self.skip_interval if seconds is None else seconds
        return self.seek(max(self._position - step, 0.0))

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, volume))
        self.renderer.set_volume(self._volume)
        self._notify()

    # Navigation

    async def next(self) -> None:
        if not self.queue.tracks:
            return

        if self.queue.current_index is None:
            await self.play_at(0)
            return

        if self.repeat_mode == RepeatMode.ONE:
            self.seek(0.0)
            self.play()
        elif self.repeat_mode == RepeatMode.ALL:
            await self.play_at((self.queue.current_index + 1) % len(self.queue))
        elif self.queue.has_next:
            await self.play_at(self.queue.current_index + 1)
        else:
            self.stop()

    async def previous(self) -> None:
        if self._position > self.restart_threshold:
            self.seek(0.0)
        elif self.queue.has_previous:
            await self.play_at(self.queue.current_index - 1)

    def toggle_shuffle(self) -> None:
        if self.queue.is_shuffled:
            # A station is never queued; keep the position of the queued track instead
            if self._station is not None:
                anchor = self.queue.current
            else:
                anchor = self._current_track or self.queue.current
            self.queue.unshuffle(anchor)
        else:
            self.queue.shuffle(self._rng)
        logger.debug(f"Shuffle {'on' if self.queue.is_shuffled else 'off'}")
        self._notify()

    def toggle_repeat_mode(self) -> RepeatMode:
        self.repeat_mode = self.repeat_mode.cycled()
        self._notify()
        return self.repeat_mode

    # Renderer events

    def on_time_update(self, current_time: float) -> None:
        if not self._has_session:
            return
        self._position = max(0.0, current_time)
        self._notify()

    async def on_finished(self) -> None:
        if not self._has_session:
            return
        logger.debug("Track finished")
        if self._station is not None or not self.queue.tracks:
            self._is_playing = False
            self._state = PlaybackState.STOPPED
            self._position = 0.0
            self._notify()
            return
        await self.next()

    def on_interrupted(self) -> None:
        if self._is_playing:
            self._interrupted = True
            self.pause()

    def on_resumed(self, should_resume: bool) -> None:
        if self._interrupted and should_resume:
            self.play()
        self._interrupted = False

    def close(self) -> None:
        self.renderer.attach(None)
        self.renderer.close()
        self._subscribers.clear()
