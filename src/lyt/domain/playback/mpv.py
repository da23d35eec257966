"""
MPV streaming engine with JSON IPC for Lyt

Drives an idle mpv process over its IPC socket and polls playback properties
on a background thread, translating them into ready/stalled/failed events.
"""

import json
import os
import socket
import subprocess
import tempfile
import threading
import time
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from lyt.domain.radio.exceptions import EngineError

from .engine import EngineEvent, EngineEventHandler

# Seconds mpv may sit idle after loadfile before the load counts as failed
LOAD_GRACE_SECONDS = 5.0


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
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        sock.connect(socket_path)
        sock.send((json.dumps(command) + "\n").encode("utf-8"))
        response = sock.recv(4096).decode("utf-8").strip()
        sock.close()
    except (socket.error, OSError):
        return None

    # mpv may interleave async events; the reply is the line without "event"
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "event" not in data:
            return data
    return {} if not response else None


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    data = _ipc_request(socket_path, command)
    if data is None:
        return False
    return not data or data.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    data = _ipc_request(socket_path, {"command": ["get_property", property_name]})
    if data and data.get("error") == "success":
        return data.get("data")
    return None


class MpvEngine:
    """StreamingEngine backed by an mpv subprocess."""

    def __init__(
        self,
        socket_path: Optional[str] = None,
        volume: int = 70,
        poll_interval: float = 0.5,
    ) -> None:
        if not socket_path:
            socket_path = str(Path(tempfile.gettempdir()) / f"lyt-mpv-{os.getpid()}")
        self.socket_path = socket_path
        self.volume = volume
        self.poll_interval = poll_interval

        self._process: Optional[subprocess.Popen] = None
        self._handler: Optional[EngineEventHandler] = None
        self._lock = threading.Lock()
        self._url: Optional[str] = None
        self._loaded_at = 0.0
        self._status: Optional[str] = None  # last reported: ready/stalled/failed
        self._poller: Optional[threading.Thread] = None
        self._stop_polling = threading.Event()

    # -- process lifecycle -------------------------------------------------

    def start(self) -> None:
        """Start mpv with JSON IPC and the status poller.

        Raises:
            EngineError: If mpv cannot be started or does not answer on its socket
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
            f"--volume={self.volume}",
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
            raise EngineError(f"Failed to start MPV: {e}") from e

        timeout = 5.0
        start_time = time.time()
        while not os.path.exists(self.socket_path):
            if time.time() - start_time > timeout:
                self._process.kill()
                self._process = None
                raise EngineError(f"MPV socket creation timeout after {timeout}s")
            time.sleep(0.1)

        if get_mpv_property(self.socket_path, "idle-active") is None:
            self._process.kill()
            self._process = None
            raise EngineError("MPV socket connection test failed")

        self._stop_polling.clear()
        self._poller = threading.Thread(
            target=self._poll_loop, name="lyt-mpv-poller", daemon=True
        )
        self._poller.start()
        logger.info("MPV started successfully")

    def close(self) -> None:
        """Stop the poller and the mpv process."""
        self._stop_polling.set()
        if self._poller is not None:
            self._poller.join(timeout=2.0)
            self._poller = None

        if self._process:
            try:
                self._process.kill()
                self._process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Already gone
            self._process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def is_running(self) -> bool:
        if not self._process or self._process.poll() is not None:
            return False
        return os.path.exists(self.socket_path)

    # -- StreamingEngine ---------------------------------------------------

    def set_event_handler(self, handler: EngineEventHandler) -> None:
        self._handler = handler

    def load(self, url: str) -> None:
        if not self.is_running():
            raise EngineError("MPV is not running")
        with self._lock:
            self._url = url
            self._loaded_at = time.monotonic()
            self._status = None
        if not send_mpv_command(self.socket_path, {"command": ["loadfile", url, "replace"]}):
            with self._lock:
                self._url = None
            raise EngineError(f"MPV refused to load {url}")
        logger.debug(f"Loading stream: {url}")

    def play(self) -> None:
        self._command(["set_property", "pause", False])

    def pause(self) -> None:
        self._command(["set_property", "pause", True])

    def stop(self) -> None:
        with self._lock:
            self._url = None
            self._status = None
        if self.is_running():
            send_mpv_command(self.socket_path, {"command": ["stop"]})

    def seek(self, seconds: float) -> None:
        self._command(["seek", seconds, "absolute"])

    def set_volume(self, volume: float) -> None:
        self.volume = round(volume * 100)
        self._command(["set_property", "volume", self.volume])

    def _command(self, args: list) -> None:
        if not self.is_running():
            raise EngineError("MPV is not running")
        if not send_mpv_command(self.socket_path, {"command": args}):
            logger.warning(f"MPV command failed: {args}")

    # -- status polling ----------------------------------------------------

    def _poll_loop(self) -> None:
        while not self._stop_polling.wait(self.poll_interval):
            self.poll_once()

    def poll_once(self) -> Optional[EngineEvent]:
        """Read mpv's state once and emit an event if the status changed."""
        with self._lock:
            url = self._url
            loaded_at = self._loaded_at
            previous = self._status
        if url is None or previous == "failed":
            return None

        if self._process is not None and self._process.poll() is not None:
            event = EngineEvent.failed(url, "MPV exited")
        else:
            event = self._status_event(url, loaded_at, previous)
        if event is None:
            return None

        with self._lock:
            if self._url != url:
                return None  # Superseded while polling
            self._status = event.kind.value

        logger.debug(f"MPV {event.kind.value}: {url}")
        if self._handler is not None:
            self._handler(event)
        return event

    def _status_event(
        self, url: str, loaded_at: float, previous: Optional[str]
    ) -> Optional[EngineEvent]:
        idle = get_mpv_property(self.socket_path, "idle-active")
        if idle:
            # Idle after loadfile: either still opening, or mpv gave up
            if previous is not None or time.monotonic() - loaded_at > LOAD_GRACE_SECONDS:
                return EngineEvent.failed(url, "Failed to load audio")
            return None

        buffering = get_mpv_property(self.socket_path, "paused-for-cache")
        position = get_mpv_property(self.socket_path, "playback-time")

        if buffering:
            if previous == "ready":
                return EngineEvent.stalled(url)
            return None
        if position is not None and previous != "ready":
            return EngineEvent.ready(url)
        return None
