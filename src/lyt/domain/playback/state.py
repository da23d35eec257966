"""
Playback session state for Lyt

The single source of truth for "what is playing", handed to observers as
immutable snapshots.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from lyt.domain.radio.models import Channel, Program, Track


class PlaybackPhase(Enum):
    STOPPED = "stopped"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class PlaybackSession:
    """Immutable playback snapshot.

    Invariant: a session without a channel is always stopped.
    """

    channel: Optional[Channel] = None
    program: Optional[Program] = None
    track: Optional[Track] = None
    phase: PlaybackPhase = PlaybackPhase.STOPPED
    last_error: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self.phase is PlaybackPhase.PLAYING

    @property
    def is_active(self) -> bool:
        """True while a channel is loading, playing or paused."""
        return self.phase in (
            PlaybackPhase.LOADING,
            PlaybackPhase.PLAYING,
            PlaybackPhase.PAUSED,
        )

    def with_phase(self, phase: PlaybackPhase) -> "PlaybackSession":
        return replace(self, phase=phase)

    def with_error(self, message: str) -> "PlaybackSession":
        return replace(self, phase=PlaybackPhase.ERROR, last_error=message)


STOPPED_SESSION = PlaybackSession()
