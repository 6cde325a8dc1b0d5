"""Playback domain - queue, transport state and renderer integration.

This domain handles:
- The playback controller (now playing, transport, next/previous)
- Shuffle and repeat modes over the playback queue
- The audio renderer interface and its MPV implementation
"""

from .controller import (
    DEFAULT_SKIP_SECONDS,
    RESTART_THRESHOLD,
    PlaybackController,
    format_time,
    validate_stream_url,
)
from .player import MpvRenderer, check_mpv_available
from .renderer import AudioRenderer, RendererListener
from .state import PlaybackQueue, PlaybackState, PlayerStatus, RepeatMode

__all__ = [
    # Controller
    "PlaybackController",
    "DEFAULT_SKIP_SECONDS",
    "RESTART_THRESHOLD",
    "format_time",
    "validate_stream_url",
    # State
    "PlaybackState",
    "RepeatMode",
    "PlayerStatus",
    "PlaybackQueue",
    # Renderer
    "AudioRenderer",
    "RendererListener",
    "MpvRenderer",
    "check_mpv_available",
]
