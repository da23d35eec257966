"""
Radio domain models.

Contains data structures for representing channels, scheduled programs,
stream assets, and the music tracks announced on a channel.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class Channel:
    """Represents a DR radio channel.

    Identity is the opaque ``id``; ``slug`` is the lowercase routing key used
    for stream and API lookups.
    """

    id: str
    slug: str = field(compare=False)
    title: str = field(compare=False)
    presentation_url: Optional[str] = field(default=None, compare=False)


@dataclass(frozen=True)
class AudioAsset:
    """A playable audio rendition attached to a program."""

    format: str  # 'HLS' | 'ICY' | other
    target: str  # 'Stream' | 'Progressive' | other
    url: str
    is_stream_live: Optional[bool] = None
    bitrate: Optional[int] = None  # Only reported for ICY streams


@dataclass(frozen=True)
class ImageAsset:
    """Artwork reference attached to a program (never fetched by the core)."""

    id: str
    target: str  # 'Default' | 'SquareImage' | 'Podcast'
    ratio: str  # '16:9' | '1:1'
    format: str
    blur_hash: Optional[str] = None


@dataclass(frozen=True)
class Program:
    """Represents one schedule entry (episode) on a channel.

    Created by decoding a schedule response and never mutated; a new fetch
    supersedes the whole list.
    """

    id: str
    channel: Channel
    title: str
    start_time: datetime
    end_time: datetime
    type: str  # 'Live' | other
    description: Optional[str] = None
    audio_assets: tuple[AudioAsset, ...] = ()
    image_assets: tuple[ImageAsset, ...] = ()

    @property
    def is_live(self) -> bool:
        return self.type == "Live"

    def is_currently_playing(self, now: datetime) -> bool:
        """Check if ``now`` falls within [start_time, end_time]."""
        return self.start_time <= now <= self.end_time


@dataclass(frozen=True)
class Track:
    """Music track announced on a channel (index point), independent of Program."""

    track_urn: str
    title: str
    artist_name: str
    played_time: datetime
    duration_ms: int

    @property
    def end_time(self) -> datetime:
        return self.played_time + timedelta(milliseconds=self.duration_ms)

    def is_currently_playing(self, now: datetime) -> bool:
        """Check if ``now`` falls within the track's airtime."""
        return self.played_time <= now <= self.end_time


@dataclass(frozen=True)
class ScheduleSnapshot:
    """Full schedule as fetched at ``fetched_at``. Replaced, never patched."""

    episodes: tuple[Program, ...]
    fetched_at: datetime

    def episodes_for(self, channel: Channel) -> list[Program]:
        """All episodes for a channel, in fetch order."""
        return [episode for episode in self.episodes if episode.channel.id == channel.id]
