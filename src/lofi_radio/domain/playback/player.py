"""
MPV renderer with JSON IPC for Lofi Radio

Implements the AudioRenderer interface on top of an `mpv --idle` process.
Blocking socket round-trips run in worker threads; a polling task turns
mpv properties into time-update and end-of-track events.
"""

import asyncio
import json
import os
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from lofi_radio.core.exceptions import RendererError

from .renderer import RendererListener

# Seconds to wait for mpv to create its IPC socket
SOCKET_TIMEOUT = 5.0

# Minimum playback time before trusting end-of-file (seconds)
MIN_PLAYBACK_TIME = 3.0


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def _ipc_request(socket_path: Optional[str], command: dict[str, Any]) -> Optional[dict]:
    """Send one JSON IPC command and return the decoded reply."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(2.0)
            sock.connect(socket_path)
            sock.send((json.dumps(command) + "\n").encode("utf-8"))
            response = sock.recv(4096).decode("utf-8").strip()
    except (socket.error, OSError):
        return None

    # mpv may interleave event lines; the reply is the line with "error"
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "error" in data:
            return data
    return None


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    reply = _ipc_request(socket_path, command)
    return reply is not None and reply.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    reply = _ipc_request(socket_path, {"command": ["get_property", property_name]})
    if reply and reply.get("error") == "success":
        return reply.get("data")
    return None


class MpvRenderer:
    """AudioRenderer backed by an mpv subprocess."""

    def __init__(
        self,
        socket_path: Optional[str] = None,
        poll_interval: float = 0.5,
        load_timeout: float = 30.0,
    ):
        if socket_path is None:
            socket_path = str(Path(tempfile.gettempdir()) / f"lofi-mpv-{os.getpid()}")
        self.socket_path = socket_path
        self.poll_interval = poll_interval
        self.load_timeout = load_timeout
        self._process: Optional[subprocess.Popen] = None
        self._listener: Optional[RendererListener] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._loaded_at: Optional[float] = None
        self._load_generation = 0

    def attach(self, listener: Optional[RendererListener]) -> None:
        self._listener = listener

    def start(self, volume: float = 0.8) -> None:
        """Start MPV with JSON IPC.

        Raises:
            RendererError: If mpv cannot be started or its socket never appears
        """
        if self.is_running():
            return

        logger.info(f"Starting MPV player with socket: {self.socket_path}")

        if os.path.exists(self.socket_path):
            logger.debug(f"Removing existing socket: {self.socket_path}")
            os.unlink(self.socket_path)

        cmd = [
            "mpv",
            "--idle=yes",
            "--no-video",
            "--no-terminal",
            f"--input-ipc-server={self.socket_path}",
            f"--volume={int(volume * 100)}",
            "--keep-open=yes",
            "--load-scripts=no",
        ]

        try:
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise RendererError(f"Failed to start MPV: {e}") from e

        start_time = time.time()
        while not os.path.exists(self.socket_path):
            if time.time() - start_time > SOCKET_TIMEOUT:
                self._process.kill()
                self._process = None
                raise RendererError(f"MPV socket creation timeout after {SOCKET_TIMEOUT}s")
            time.sleep(0.1)

        logger.info("MPV started successfully")

    def is_running(self) -> bool:
        """Check if the MPV process is alive and its socket exists."""
        if not self._process or self._process.poll() is not None:
            return False
        return os.path.exists(self.socket_path)

    async def load(self, stream_url: str) -> float:
        """Load a stream and wait until mpv reports it playable.

        Returns:
            Duration in seconds, 0.0 for live streams

        Raises:
            RendererError: If mpv is down, rejects the file, times out, or a
                later load replaces this one before it is ready
        """
        if not self.is_running():
            raise RendererError("Player is not running")

        self._load_generation += 1
        generation = self._load_generation

        self._stop_polling()
        ok = await asyncio.to_thread(
            send_mpv_command,
            self.socket_path,
            {"command": ["loadfile", stream_url, "replace"]},
        )
        self._check_current_load(generation, stream_url)
        if not ok:
            raise RendererError(f"MPV rejected stream: {stream_url}")

        logger.debug(f"Loading stream: {stream_url}")
        deadline = time.monotonic() + self.load_timeout
        while time.monotonic() < deadline:
            position = await asyncio.to_thread(get_mpv_property, self.socket_path, "time-pos")
            self._check_current_load(generation, stream_url)
            if position is not None:
                duration = await asyncio.to_thread(
                    get_mpv_property, self.socket_path, "duration"
                )
                self._check_current_load(generation, stream_url)
                self._loaded_at = time.time()
                self._poll_task = asyncio.create_task(self._poll())
                logger.info(f"Stream ready: duration={duration}")
                return float(duration or 0.0)

            idle = await asyncio.to_thread(get_mpv_property, self.socket_path, "idle-active")
            self._check_current_load(generation, stream_url)
            if idle is True:
                raise RendererError(f"Failed to open stream: {stream_url}")
            await asyncio.sleep(0.05)
            self._check_current_load(generation, stream_url)

        raise RendererError(f"Timed out loading stream after {self.load_timeout}s")

    def _check_current_load(self, generation: int, stream_url: str) -> None:
        if generation != self._load_generation:
            logger.debug(f"Load of {stream_url} superseded")
            raise RendererError(f"Load superseded: {stream_url}")

    def play(self) -> None:
        send_mpv_command(self.socket_path, {"command": ["set_property", "pause", False]})

    def pause(self) -> None:
        send_mpv_command(self.socket_path, {"command": ["set_property", "pause", True]})

    def seek(self, position: float) -> None:
        send_mpv_command(self.socket_path, {"command": ["seek", position, "absolute"]})

    def set_volume(self, volume: float) -> None:
        level = max(0, min(100, int(round(volume * 100))))
        send_mpv_command(self.socket_path, {"command": ["set_property", "volume", level]})

    def close(self) -> None:
        """Stop MPV process and cleanup."""
        self._stop_polling()
        if self._process:
            try:
                self._process.kill()
                self._process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Process already terminated or couldn't be killed
            self._process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def _stop_polling(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    async def _poll(self) -> None:
        """Forward position updates and end-of-track to the listener."""
        while self.is_running():
            await asyncio.sleep(self.poll_interval)
            position = await asyncio.to_thread(get_mpv_property, self.socket_path, "time-pos")
            if position is not None and self._listener is not None:
                self._listener.on_time_update(float(position))

            if await asyncio.to_thread(self._is_track_finished):
                self._poll_task = None
                if self._listener is not None:
                    await self._listener.on_finished()
                return

    def _is_track_finished(self) -> bool:
        """End of track, ignoring spurious EOF right after a load."""
        if self._loaded_at is not None and time.time() - self._loaded_at < MIN_PLAYBACK_TIME:
            return False
        return get_mpv_property(self.socket_path, "eof-reached") is True
