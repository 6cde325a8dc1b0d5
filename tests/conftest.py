"""Shared fixtures and test doubles for the Lofi Radio test suite."""

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from lofi_radio.core.exceptions import RendererError
from lofi_radio.domain.library import Track


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeRenderer:
    """In-memory AudioRenderer.

    `load` resolves with the track's configured duration, raises for URLs in
    `errors`, and blocks on any asyncio.Event registered in `gates`.
    """

    def __init__(self, default_duration: float = 180.0):
        self.default_duration = default_duration
        self.durations: dict[str, float] = {}
        self.errors: dict[str, str] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.listener = None
        self.loads: list[str] = []
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    def attach(self, listener) -> None:
        self.listener = listener

    async def load(self, stream_url: str) -> float:
        self.loads.append(stream_url)
        gate = self.gates.get(stream_url)
        if gate is not None:
            await gate.wait()
        if stream_url in self.errors:
            raise RendererError(self.errors[stream_url])
        return self.durations.get(stream_url, self.default_duration)

    def play(self) -> None:
        self.calls.append(("play", None))

    def pause(self) -> None:
        self.calls.append(("pause", None))

    def seek(self, position: float) -> None:
        self.calls.append(("seek", position))

    def set_volume(self, volume: float) -> None:
        self.calls.append(("set_volume", volume))

    def close(self) -> None:
        self.closed = True

    def calls_named(self, name: str) -> list[Any]:
        return [arg for call, arg in self.calls if call == name]


class FakeHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for loop.call_later driven by advance()."""

    def __init__(self):
        self.now = 0.0
        self._handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback, args)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Run every callback due within the next `seconds`, in time order."""
        end = self.now + seconds
        while True:
            due = [h for h in self._handles if not h.cancelled and h.when <= end]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = end


def make_track(name: str, duration: float = 180.0, stream_url: Optional[str] = None) -> Track:
    return Track(
        id=f"track-{name}",
        title=f"Track {name}",
        artist="Test Artist",
        stream_url=stream_url or f"https://cdn.example.com/{name}.mp3",
        duration=duration,
    )


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "lofi_radio.db"


@pytest.fixture
def abc_tracks() -> list[Track]:
    return [make_track("A"), make_track("B"), make_track("C")]


@pytest.fixture
def track_factory() -> Callable[..., Track]:
    return make_track
