"""
Provider interface for radio schedule data.

Defines the contract the playback core needs from the network layer. The DR
API client in ``lyt.api`` implements it; tests substitute in-memory fakes.
"""

from typing import Optional, Protocol

from .models import Program, Track


class RadioDataSource(Protocol):
    """Async, fallible access to schedules and index points.

    Implementations raise ``FetchError`` for transport and decoding failures.
    """

    async def fetch_all_schedules(self) -> list[Program]:
        """Programs currently on air across all channels."""
        ...

    async def fetch_schedule(self, slug: str) -> list[Program]:
        """Today's schedule for one channel."""
        ...

    async def fetch_current_track(self, slug: str) -> Optional[Track]:
        """The music track currently announced on a channel, if any."""
        ...
