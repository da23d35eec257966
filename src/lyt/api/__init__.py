"""DR radio API adapter: aiohttp client and pydantic wire models."""

from .client import DEFAULT_BASE_URL, DRClient
from .schemas import (
    AudioAssetSchema,
    ChannelSchema,
    EpisodeSchema,
    ImageAssetSchema,
    IndexPointsSchema,
    ScheduleSnapshotSchema,
    TrackSchema,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DRClient",
    "AudioAssetSchema",
    "ChannelSchema",
    "EpisodeSchema",
    "ImageAssetSchema",
    "IndexPointsSchema",
    "ScheduleSnapshotSchema",
    "TrackSchema",
]
