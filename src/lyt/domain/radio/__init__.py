"""
Radio domain module.

Channel, program and track models, stream URL resolution with a static
live-stream fallback table, and the time-bounded schedule cache.
"""

from .exceptions import (
    EngineError,
    FetchError,
    InvalidTransition,
    RadioError,
    ResolutionError,
)
from .models import AudioAsset, Channel, ImageAsset, Program, ScheduleSnapshot, Track
from .provider import RadioDataSource
from .schedule import CACHE_TTL_SECONDS, ScheduleCache, utc_now
from .stream_resolver import (
    FALLBACK_STREAM_BASE,
    FALLBACK_STREAM_URLS,
    fallback_stream_url,
    resolve_stream_url,
)

__all__ = [
    # Models
    "Channel",
    "AudioAsset",
    "ImageAsset",
    "Program",
    "Track",
    "ScheduleSnapshot",
    # Data source
    "RadioDataSource",
    # Errors
    "RadioError",
    "ResolutionError",
    "FetchError",
    "EngineError",
    "InvalidTransition",
    # Schedule cache
    "CACHE_TTL_SECONDS",
    "ScheduleCache",
    "utc_now",
    # Stream resolution
    "FALLBACK_STREAM_BASE",
    "FALLBACK_STREAM_URLS",
    "fallback_stream_url",
    "resolve_stream_url",
]
