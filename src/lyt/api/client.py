"""
DR radio API client.

Async HTTP access to the DR radio v4 API over aiohttp. Responses are decoded
through the pydantic wire models and converted to domain entities; every
transport or decoding failure surfaces as ``FetchError``.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Optional

import aiohttp
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from lyt.domain.radio.exceptions import FetchError
from lyt.domain.radio.models import Program, Track
from lyt.domain.radio.schedule import utc_now

from .schemas import EpisodeSchema, IndexPointsSchema, ScheduleSnapshotSchema

DEFAULT_BASE_URL = "https://api.dr.dk/radio/v4"

_episode_list = TypeAdapter(list[EpisodeSchema])


class DRClient:
    """RadioDataSource backed by the public DR API.

    Use as an async context manager, or call ``close()`` when done.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        user_agent: str = "Lyt/1.0 (Python)",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.headers = {"Accept": "application/json", "User-Agent": user_agent}
        self._clock = clock
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "DRClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout, headers=self.headers
            )
        return self._session

    async def _get_json(self, endpoint: str) -> Any:
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"Fetching from DR API: {url}")
        try:
            async with self._get_session().get(url) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise FetchError(f"HTTP {e.status}", endpoint) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise FetchError(f"Request failed: {e}", endpoint) from e
        except asyncio.TimeoutError as e:
            raise FetchError("Request timed out", endpoint) from e

    async def fetch_all_schedules(self) -> list[Program]:
        """Programs currently on air across all channels."""
        endpoint = "schedules/all/now"
        data = await self._get_json(endpoint)
        if isinstance(data, dict):
            data = data.get("schedules", data.get("items", []))
        try:
            episodes = _episode_list.validate_python(data)
        except ValidationError as e:
            raise FetchError(f"Invalid schedule payload: {e.error_count()} errors", endpoint) from e

        programs = [episode.to_domain() for episode in episodes]
        logger.info(f"Fetched {len(programs)} live programs")
        return programs

    async def fetch_schedule(self, slug: str) -> list[Program]:
        """Today's schedule for one channel."""
        endpoint = f"schedules/snapshot/{slug}"
        data = await self._get_json(endpoint)
        try:
            snapshot = ScheduleSnapshotSchema.model_validate(data)
        except ValidationError as e:
            raise FetchError(f"Invalid schedule payload: {e.error_count()} errors", endpoint) from e
        return [episode.to_domain() for episode in snapshot.items]

    async def fetch_current_track(self, slug: str) -> Optional[Track]:
        """The track on air right now, or None between tracks."""
        endpoint = f"indexpoints/live/{slug}"
        data = await self._get_json(endpoint)
        try:
            index_points = IndexPointsSchema.model_validate(data)
        except ValidationError as e:
            raise FetchError(f"Invalid index points payload: {e.error_count()} errors", endpoint) from e

        now = self._clock()
        for item in index_points.items:
            track = item.to_domain()
            if track.is_currently_playing(now):
                return track
        return None
