"""
Schedule cache for DR radio programs.

Holds the last full schedule snapshot with its fetch time, answers freshness
and "what's on now" queries, and refreshes on demand. Concurrent refreshes
share a single in-flight fetch.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from loguru import logger

from .exceptions import FetchError
from .models import Channel, Program, ScheduleSnapshot

# Schedules are considered fresh for 10 minutes
CACHE_TTL_SECONDS = 600


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _retrieve_exception(future: "asyncio.Future[ScheduleSnapshot]") -> None:
    # Marks a failure as seen even when every waiter was cancelled
    if not future.cancelled():
        future.exception()


class ScheduleCache:
    """In-memory holder of the latest ScheduleSnapshot.

    The cache never schedules its own refreshes; callers trigger them via
    ``refresh()`` or implicitly through ``get_schedule()``.
    """

    def __init__(
        self,
        fetch_all_schedules: Callable[[], Awaitable[list[Program]]],
        ttl: timedelta = timedelta(seconds=CACHE_TTL_SECONDS),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._fetch_all_schedules = fetch_all_schedules
        self._ttl = ttl
        self._clock = clock
        self._snapshot: Optional[ScheduleSnapshot] = None
        self._inflight: Optional[asyncio.Future[ScheduleSnapshot]] = None
        self.last_error: Optional[str] = None

    @property
    def snapshot(self) -> Optional[ScheduleSnapshot]:
        return self._snapshot

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def is_fresh(self, now: Optional[datetime] = None) -> bool:
        """Check whether the current snapshot is younger than the TTL."""
        if self._snapshot is None:
            return False
        now = now or self._clock()
        return now - self._snapshot.fetched_at < self._ttl

    async def refresh(self) -> ScheduleSnapshot:
        """Fetch a new snapshot, joining any refresh already in flight.

        Returns:
            The newly stored snapshot

        Raises:
            FetchError: If the fetch failed; the previous snapshot is kept
        """
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._do_refresh())
            self._inflight.add_done_callback(_retrieve_exception)
        # Shielded so a cancelled caller doesn't cancel the shared fetch
        return await asyncio.shield(self._inflight)

    async def _do_refresh(self) -> ScheduleSnapshot:
        try:
            logger.debug("Refreshing schedule snapshot")
            try:
                episodes = await self._fetch_all_schedules()
            except FetchError as e:
                self.last_error = str(e)
                logger.warning(f"Schedule refresh failed, keeping previous data: {e}")
                raise

            snapshot = ScheduleSnapshot(
                episodes=tuple(episodes), fetched_at=self._clock()
            )
            self._snapshot = snapshot
            self.last_error = None
            logger.info(f"Schedule refreshed: {len(snapshot.episodes)} episodes")
            return snapshot
        finally:
            self._inflight = None

    async def get_schedule(self) -> ScheduleSnapshot:
        """Return the current snapshot, refreshing first if it is stale.

        A stale snapshot is returned as-is when the refresh fails; the
        failure is kept in ``last_error``.

        Raises:
            FetchError: If the refresh failed and there is no data at all
        """
        if self.is_fresh():
            return self._snapshot  # type: ignore[return-value]

        previous = self._snapshot
        try:
            return await self.refresh()
        except FetchError:
            if previous is None:
                raise
            logger.warning("Serving stale schedule snapshot")
            return previous

    def current_program(
        self, channel: Channel, now: Optional[datetime] = None
    ) -> Optional[Program]:
        """Find the program on air for a channel.

        Falls back to the first listed episode for the channel when none is
        currently playing (fetch order, not nearest in time).

        Args:
            channel: Channel to look up (matched by id)
            now: Reference time (defaults to the cache clock)

        Returns:
            Matching Program or None if the channel has no episodes
        """
        if self._snapshot is None:
            return None

        now = now or self._clock()
        episodes = self._snapshot.episodes_for(channel)
        for episode in episodes:
            if episode.is_currently_playing(now):
                return episode
        return episodes[0] if episodes else None

    def channels(self) -> list[Channel]:
        """Unique channels present in the snapshot, sorted by title."""
        if self._snapshot is None:
            return []
        unique = {episode.channel.id: episode.channel for episode in self._snapshot.episodes}
        return sorted(unique.values(), key=lambda channel: channel.title)

    def invalidate(self) -> None:
        """Drop the snapshot so the next get_schedule() refetches."""
        self._snapshot = None
        logger.debug("Schedule cache invalidated")
