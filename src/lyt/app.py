"""Application context wiring the radio core together.

RadioContext owns one schedule cache, one playback controller and one
navigator, and exposes the operations a UI layer drives. Collaborators
(network source and streaming engine) are passed in so terminals, tests and
other front ends can supply their own.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from loguru import logger

from lyt.api.client import DRClient
from lyt.core.config import Config
from lyt.domain.navigation import (
    ChannelGroup,
    ChannelNavigator,
    ChannelRegion,
    NavigationState,
    organize_channels,
    regions_for_group,
)
from lyt.domain.playback import PlaybackController, PlaybackSession, StreamingEngine
from lyt.domain.radio import Channel, FetchError, Program, RadioDataSource, ScheduleCache


@dataclass
class RadioContext:
    """Owned state of one radio client.

    Attributes:
        config: Application configuration
        engine: Streaming engine driven by the controller
        source: Network capability (DR API client in production)
        schedule: Schedule cache fed by ``source``
        controller: Playback controller driving the engine
        navigator: Channel navigation state machine
    """

    config: Config
    engine: StreamingEngine
    source: RadioDataSource
    schedule: ScheduleCache
    controller: PlaybackController
    navigator: ChannelNavigator

    @classmethod
    def create(
        cls,
        config: Config,
        engine: StreamingEngine,
        source: Optional[RadioDataSource] = None,
    ) -> "RadioContext":
        """Build a context from configuration.

        Args:
            config: Application configuration
            engine: Streaming engine the controller drives
            source: Data source; defaults to a DRClient for ``config.api``

        Returns:
            New RadioContext with an empty cache and stopped session. The
            controller's event consumer starts with the first play() or
            toggle() and stops in close().
        """
        if source is None:
            source = DRClient(
                base_url=config.api.base_url,
                timeout_seconds=config.api.timeout_seconds,
                user_agent=config.api.user_agent,
            )

        schedule = ScheduleCache(
            source.fetch_all_schedules,
            ttl=timedelta(seconds=config.cache.ttl_seconds),
        )
        controller = PlaybackController(
            engine,
            schedule,
            source,
            fallback_urls=config.streams.fallback_urls,
            fallback_base=config.streams.fallback_base,
        )
        return cls(
            config=config,
            engine=engine,
            source=source,
            schedule=schedule,
            controller=controller,
            navigator=ChannelNavigator(),
        )

    # -- observable snapshots ----------------------------------------------

    @property
    def session(self) -> PlaybackSession:
        return self.controller.session

    @property
    def navigation(self) -> NavigationState:
        return self.navigator.state

    # -- playback ----------------------------------------------------------

    async def play(self, channel: Channel) -> PlaybackSession:
        """Play a channel; engine events are applied from here on."""
        self.controller.start()
        return await self.controller.play(channel)

    def pause(self) -> PlaybackSession:
        return self.controller.pause()

    def resume(self) -> PlaybackSession:
        return self.controller.resume()

    def stop(self) -> PlaybackSession:
        return self.controller.stop()

    async def toggle(self, channel: Channel) -> PlaybackSession:
        self.controller.start()
        return await self.controller.toggle(channel)

    def current_program(self, channel: Channel) -> Optional[Program]:
        return self.schedule.current_program(channel)

    # -- navigation --------------------------------------------------------

    def select_group(self, group: ChannelGroup) -> NavigationState:
        return self.navigator.select_group(group)

    def select_channel(self, channel: Channel) -> NavigationState:
        return self.navigator.select_channel(channel)

    def back(self) -> NavigationState:
        return self.navigator.back()

    # -- catalogue ---------------------------------------------------------

    async def channels(self) -> list[Channel]:
        """Channels on air, from the (possibly refreshed) schedule."""
        await self.schedule.get_schedule()
        return self.schedule.channels()

    async def channel_groups(self) -> list[ChannelGroup]:
        return organize_channels(await self.channels())

    def regions(self, group: ChannelGroup) -> list[ChannelRegion]:
        return regions_for_group(group)

    async def find_channel(self, slug: str) -> Optional[Channel]:
        """Look up a channel by slug among those currently on air."""
        slug = slug.lower()
        for channel in await self.channels():
            if channel.slug == slug:
                return channel
        return None

    async def channel_schedule(self, channel: Channel) -> list[Program]:
        """Today's full schedule for a channel, fetched on demand (not cached).

        Returns an empty list when the fetch fails.
        """
        try:
            return await self.source.fetch_schedule(channel.slug)
        except FetchError as e:
            logger.warning(f"Schedule for {channel.slug} unavailable: {e}")
            return []

    async def close(self) -> None:
        await self.controller.close()
        close = getattr(self.source, "close", None)
        if close is not None:
            await close()
