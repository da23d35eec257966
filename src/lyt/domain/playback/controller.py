"""
Playback controller for Lyt

Owns the PlaybackSession, drives the streaming engine, and folds the
engine's asynchronous status events back into the session. Events are
queued and applied by a single consumer so updates are never lost or
reordered.
"""

import asyncio
from dataclasses import replace
from typing import Callable, Mapping, Optional

from loguru import logger

from lyt.domain.radio.exceptions import (
    EngineError,
    FetchError,
    InvalidTransition,
    ResolutionError,
)
from lyt.domain.radio.models import Channel, Program, Track
from lyt.domain.radio.provider import RadioDataSource
from lyt.domain.radio.schedule import ScheduleCache
from lyt.domain.radio.stream_resolver import resolve_stream_url

from .engine import EngineEvent, EngineEventKind, StreamingEngine
from .state import STOPPED_SESSION, PlaybackPhase, PlaybackSession

SessionObserver = Callable[[PlaybackSession], None]


class PlaybackController:
    """Single writer of the playback session.

    ``play()`` calls supersede each other: every call bumps a generation
    counter, and work resumed after an await is dropped if the counter has
    moved on. Engine events are matched against the URL of the current load.
    """

    def __init__(
        self,
        engine: StreamingEngine,
        schedule: ScheduleCache,
        source: RadioDataSource,
        fallback_urls: Optional[Mapping[str, str]] = None,
        fallback_base: Optional[str] = None,
    ) -> None:
        self._engine = engine
        self._schedule = schedule
        self._source = source
        self._fallback_urls = fallback_urls
        self._fallback_base = fallback_base

        self._session = STOPPED_SESSION
        self._generation = 0
        self._stream_url: Optional[str] = None  # URL of the load events must match
        self._observers: list[SessionObserver] = []

        self._events: asyncio.Queue[EngineEvent] = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._consumer: Optional[asyncio.Task] = None

        engine.set_event_handler(self.post_event)

    # -- observation -------------------------------------------------------

    @property
    def session(self) -> PlaybackSession:
        return self._session

    @property
    def stream_url(self) -> Optional[str]:
        return self._stream_url

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register an observer of session changes; returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _set(self, session: PlaybackSession) -> None:
        if session == self._session:
            return
        self._session = session
        for observer in list(self._observers):
            try:
                observer(session)
            except Exception:
                logger.exception(f"Session observer {observer!r} failed")

    # -- commands ----------------------------------------------------------

    async def play(self, channel: Channel) -> PlaybackSession:
        """Start (or resume) playback of a channel.

        A paused session on the same channel resumes in place. Anything else
        tears down the current session and loads the channel from scratch.
        """
        if self._session.channel == channel and self._session.phase is PlaybackPhase.PAUSED:
            return self.resume()

        self._capture_loop()
        self._drop_pending_events()
        if self._session.channel is not None:
            try:
                self._engine.stop()
            except EngineError as e:
                logger.warning(f"Engine stop failed before loading {channel.slug}: {e}")

        self._generation += 1
        generation = self._generation
        self._stream_url = None
        self._set(PlaybackSession(channel=channel, phase=PlaybackPhase.LOADING))
        logger.info(f"Loading channel {channel.title} ({channel.slug})")

        program, track = await asyncio.gather(
            self._lookup_program(channel), self._lookup_track(channel)
        )
        if generation != self._generation:
            logger.debug(f"play({channel.slug}) superseded, dropping result")
            return self._session

        self._set(replace(self._session, program=program, track=track))

        try:
            url = self._resolve(program, channel)
        except ResolutionError as e:
            logger.warning(str(e))
            self._set(self._session.with_error(str(e)))
            return self._session

        self._stream_url = url
        try:
            self._engine.load(url)
            self._engine.play()
        except EngineError as e:
            logger.warning(f"Engine rejected {url}: {e}")
            self._stream_url = None
            self._set(self._session.with_error(str(e)))
            return self._session

        logger.info(f"Streaming {channel.slug} from {url}")
        return self._session

    def pause(self) -> PlaybackSession:
        """Pause playback; a no-op unless currently playing."""
        try:
            self._require(PlaybackPhase.PLAYING, "pause")
        except InvalidTransition as e:
            logger.debug(str(e))
            return self._session

        try:
            self._engine.pause()
        except EngineError as e:
            self._engine_failed("pause", e)
            return self._session
        self._set(self._session.with_phase(PlaybackPhase.PAUSED))
        return self._session

    def resume(self) -> PlaybackSession:
        """Resume a paused session without reloading the stream."""
        try:
            self._require(PlaybackPhase.PAUSED, "resume")
        except InvalidTransition as e:
            logger.debug(str(e))
            return self._session

        try:
            self._engine.play()
        except EngineError as e:
            self._engine_failed("resume", e)
            return self._session
        self._set(self._session.with_phase(PlaybackPhase.PLAYING))
        return self._session

    def stop(self) -> PlaybackSession:
        """Stop playback and clear the session. Always valid."""
        self._generation += 1
        self._stream_url = None
        self._drop_pending_events()
        if self._session.channel is not None:
            logger.info(f"Stopping {self._session.channel.slug}")
            try:
                self._engine.stop()
            except EngineError as e:
                logger.warning(f"Engine stop failed: {e}")
        self._set(STOPPED_SESSION)
        return self._session

    async def toggle(self, channel: Channel) -> PlaybackSession:
        """Pause/resume the active channel, or switch to a different one.

        On the active channel: playing pauses, paused resumes, error retries,
        loading is left alone.
        """
        if self._session.channel != channel:
            return await self.play(channel)

        phase = self._session.phase
        if phase is PlaybackPhase.PLAYING:
            return self.pause()
        if phase is PlaybackPhase.PAUSED:
            return self.resume()
        if phase is PlaybackPhase.ERROR:
            return await self.play(channel)
        return self._session

    def set_volume(self, volume: float) -> None:
        """Set engine volume, clamped to [0, 1]."""
        try:
            self._engine.set_volume(min(1.0, max(0.0, volume)))
        except EngineError as e:
            self._engine_failed("set_volume", e)

    def seek(self, seconds: float) -> None:
        if self._session.channel is None:
            logger.debug("seek ignored: nothing loaded")
            return
        try:
            self._engine.seek(seconds)
        except EngineError as e:
            self._engine_failed("seek", e)

    def _require(self, phase: PlaybackPhase, action: str) -> None:
        if self._session.phase is not phase:
            raise InvalidTransition(
                f"{action} ignored in phase {self._session.phase.value}"
            )

    def _engine_failed(self, action: str, error: EngineError) -> None:
        logger.warning(f"Engine {action} failed: {error}")
        if self._session.channel is None:
            return
        self._stream_url = None
        self._set(self._session.with_error(str(error)))

    def _resolve(self, program: Optional[Program], channel: Channel) -> str:
        url = resolve_stream_url(
            program, channel, self._fallback_urls, self._fallback_base
        )
        if url is None:
            raise ResolutionError(f"No stream URL available for {channel.title}")
        return url

    # -- lookups -----------------------------------------------------------

    async def _lookup_program(self, channel: Channel) -> Optional[Program]:
        try:
            await self._schedule.get_schedule()
        except FetchError as e:
            logger.warning(f"No schedule for {channel.slug}, using stream fallback: {e}")
            return None
        return self._schedule.current_program(channel)

    async def _lookup_track(self, channel: Channel) -> Optional[Track]:
        try:
            return await self._source.fetch_current_track(channel.slug)
        except FetchError as e:
            logger.warning(f"Current track lookup failed for {channel.slug}: {e}")
            return None

    # -- engine events -----------------------------------------------------

    def _capture_loop(self) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()

    def post_event(self, event: EngineEvent) -> None:
        """Queue an engine event. Safe to call from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            self._events.put_nowait(event)
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._events.put_nowait(event)
        else:
            loop.call_soon_threadsafe(self._events.put_nowait, event)

    def start(self) -> asyncio.Task:
        """Start the background consumer that applies queued engine events."""
        self._capture_loop()
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.create_task(self._consume_events())
        return self._consumer

    async def close(self) -> None:
        """Stop playback and the event consumer."""
        self.stop()
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None

    async def _consume_events(self) -> None:
        while True:
            event = await self._events.get()
            self._apply_event(event)

    def _drop_pending_events(self) -> None:
        dropped = 0
        while not self._events.empty():
            self._events.get_nowait()
            dropped += 1
        if dropped:
            logger.debug(f"Dropped {dropped} queued engine events from the previous load")

    def process_pending_events(self) -> int:
        """Apply every queued event now, in arrival order.

        Returns:
            Number of events processed
        """
        count = 0
        while True:
            try:
                event = self._events.get_nowait()
            except asyncio.QueueEmpty:
                return count
            self._apply_event(event)
            count += 1

    def _apply_event(self, event: EngineEvent) -> None:
        session = self._session
        if session.channel is None or event.url != self._stream_url:
            logger.debug(f"Discarding stale {event.kind.value} event for {event.url}")
            return

        if event.kind is EngineEventKind.READY:
            if session.phase is PlaybackPhase.LOADING:
                self._set(session.with_phase(PlaybackPhase.PLAYING))
                logger.info(f"Now playing {session.channel.title}")

        elif event.kind is EngineEventKind.FAILED:
            reason = event.reason or "Failed to load audio"
            logger.warning(f"Engine failed for {session.channel.slug}: {reason}")
            self._stream_url = None
            self._set(session.with_error(reason))

        elif event.kind is EngineEventKind.STALLED:
            if session.phase is PlaybackPhase.PLAYING:
                logger.debug(f"Stream stalled for {session.channel.slug}, buffering")
                self._set(session.with_phase(PlaybackPhase.LOADING))
