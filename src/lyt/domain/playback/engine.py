"""
Streaming engine contract.

The engine plays one URL at a time and reports status asynchronously. Every
event carries the URL it concerns so the controller can drop events that
belong to a load it has already abandoned.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol


class EngineEventKind(Enum):
    READY = "ready"
    FAILED = "failed"
    STALLED = "stalled"


@dataclass(frozen=True)
class EngineEvent:
    """Status report from the streaming engine."""

    kind: EngineEventKind
    url: str
    reason: Optional[str] = None  # Only set for FAILED

    @classmethod
    def ready(cls, url: str) -> "EngineEvent":
        return cls(EngineEventKind.READY, url)

    @classmethod
    def failed(cls, url: str, reason: str) -> "EngineEvent":
        return cls(EngineEventKind.FAILED, url, reason)

    @classmethod
    def stalled(cls, url: str) -> "EngineEvent":
        return cls(EngineEventKind.STALLED, url)


EngineEventHandler = Callable[[EngineEvent], None]


class StreamingEngine(Protocol):
    """Capability the playback controller drives.

    Commands return immediately; outcomes arrive through the event handler,
    possibly from another thread.
    """

    def set_event_handler(self, handler: EngineEventHandler) -> None: ...

    def load(self, url: str) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_volume(self, volume: float) -> None: ...
