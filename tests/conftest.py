"""Shared fixtures for Lyt tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from lyt.domain.radio.models import AudioAsset, Channel, Program

NOW = datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def p1() -> Channel:
    return Channel(id="urn:dr:channel:p1", slug="p1", title="P1")


@pytest.fixture
def p3() -> Channel:
    return Channel(id="urn:dr:channel:p3", slug="p3", title="P3")


@pytest.fixture
def p4kbh() -> Channel:
    return Channel(id="urn:dr:channel:p4kbh", slug="p4kbh", title="P4 København")


@pytest.fixture
def p4fyn() -> Channel:
    return Channel(id="urn:dr:channel:p4fyn", slug="p4fyn", title="P4 Fyn")


def make_program(
    channel: Channel,
    title: str = "Morgen",
    start: datetime = NOW - timedelta(minutes=30),
    end: datetime = NOW + timedelta(minutes=30),
    type: str = "Live",
    assets: tuple = (),
) -> Program:
    return Program(
        id=f"{channel.slug}-{title}",
        channel=channel,
        title=title,
        start_time=start,
        end_time=end,
        type=type,
        audio_assets=assets,
    )


def live_asset(url: str) -> AudioAsset:
    return AudioAsset(format="HLS", target="Stream", url=url, is_stream_live=True)


@pytest.fixture
def engine() -> MagicMock:
    """Streaming engine double recording every command."""
    return MagicMock()


@pytest.fixture
def source() -> AsyncMock:
    """Data source double with an empty schedule and no track."""
    mock = AsyncMock()
    mock.fetch_all_schedules.return_value = []
    mock.fetch_schedule.return_value = []
    mock.fetch_current_track.return_value = None
    return mock


@pytest.fixture
def program_factory():
    """Factory for programs on a channel; defaults to one on air at NOW."""
    return make_program


@pytest.fixture
def live_asset_factory():
    return live_asset
