"""Tests for the lyt command line."""

import pytest

from lyt.app import RadioContext
from lyt.cli import build_parser, cmd_url
from lyt.core.config import Config
from lyt.domain.radio import FetchError
from lyt.domain.radio.stream_resolver import FALLBACK_STREAM_BASE


class TestParser:
    """Tests for argument parsing."""

    def test_play_with_volume(self) -> None:
        args = build_parser().parse_args(["play", "p3", "--volume", "40"])
        assert args.subcommand == "play"
        assert args.slug == "p3"
        assert args.volume == 40

    def test_subcommand_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestUrlCommand:
    """Tests for `lyt url`."""

    @pytest.mark.anyio
    async def test_prints_live_asset(
        self, engine, source, p3, program_factory, live_asset_factory, capsys
    ) -> None:
        """Test the live asset of the program on air is printed."""
        source.fetch_all_schedules.return_value = [
            program_factory(p3, assets=(live_asset_factory("https://live/p3.m3u8"),))
        ]
        ctx = RadioContext.create(Config(), engine, source)

        assert await cmd_url(ctx, "p3") == 0
        assert capsys.readouterr().out.strip() == "https://live/p3.m3u8"

    @pytest.mark.anyio
    async def test_unknown_channel_offline_uses_fallback(self, engine, source, capsys) -> None:
        """Test an unreachable API still prints a synthesized stream URL."""
        source.fetch_all_schedules.side_effect = FetchError("offline")
        ctx = RadioContext.create(Config(), engine, source)

        assert await cmd_url(ctx, "p9") == 0
        assert capsys.readouterr().out.splitlines()[-1] == f"{FALLBACK_STREAM_BASE}/P9"
