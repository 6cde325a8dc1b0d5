"""Audio renderer interface.

The controller never produces sound itself; it drives a renderer and
listens for its events. `MpvRenderer` in player.py is the real
implementation, tests use an in-memory double.
"""

from typing import Optional, Protocol


class RendererListener(Protocol):
    """Callbacks a renderer delivers on the controller's event loop."""

    def on_time_update(self, current_time: float) -> None: ...

    async def on_finished(self) -> None: ...

    def on_interrupted(self) -> None: ...

    def on_resumed(self, should_resume: bool) -> None: ...


class AudioRenderer(Protocol):
    """External audio output engine.

    `load` resolves with the stream duration in seconds (0 for live or
    unknown) once the stream is ready, or raises RendererError.
    """

    def attach(self, listener: Optional[RendererListener]) -> None: ...

    async def load(self, stream_url: str) -> float: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, position: float) -> None: ...

    def set_volume(self, volume: float) -> None: ...

    def close(self) -> None: ...
