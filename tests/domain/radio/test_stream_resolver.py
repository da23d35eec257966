"""Tests for stream URL resolution."""

import itertools

import pytest

from lyt.domain.radio.models import AudioAsset, Channel
from lyt.domain.radio.stream_resolver import (
    FALLBACK_STREAM_BASE,
    FALLBACK_STREAM_URLS,
    fallback_stream_url,
    resolve_stream_url,
)

LIVE = AudioAsset(format="HLS", target="Stream", url="https://live/hls", is_stream_live=True)
STREAM = AudioAsset(format="ICY", target="Stream", url="https://ondemand/stream", bitrate=192)
PROGRESSIVE = AudioAsset(format="MP3", target="Progressive", url="https://ondemand/file.mp3")
OTHER = AudioAsset(format="HLS", target="Download", url="https://other", is_stream_live=False)


class TestLiveAssetPriority:
    """Live-flagged assets always win."""

    @pytest.mark.parametrize("order", list(itertools.permutations([LIVE, STREAM, PROGRESSIVE, OTHER])))
    def test_live_asset_wins_regardless_of_order(self, p1, program_factory, order) -> None:
        """Test the is_stream_live asset is picked at any position."""
        program = program_factory(p1, type="Podcast", assets=tuple(order))
        assert resolve_stream_url(program, p1) == "https://live/hls"

    def test_first_live_asset_is_used(self, p1, program_factory) -> None:
        """Test the first of several live assets is picked."""
        second = AudioAsset(format="ICY", target="Stream", url="https://live/icy", is_stream_live=True)
        program = program_factory(p1, assets=(OTHER, LIVE, second))
        assert resolve_stream_url(program, p1) == "https://live/hls"


class TestOnDemandAssets:
    """Non-live programs fall back to Stream then Progressive assets."""

    def test_stream_target_before_progressive(self, p1, program_factory) -> None:
        """Test Stream target is preferred over Progressive."""
        program = program_factory(p1, type="Podcast", assets=(PROGRESSIVE, STREAM))
        assert resolve_stream_url(program, p1) == "https://ondemand/stream"

    def test_progressive_when_no_stream(self, p1, program_factory) -> None:
        """Test Progressive target is used when no Stream target exists."""
        program = program_factory(p1, type="Podcast", assets=(OTHER, PROGRESSIVE))
        assert resolve_stream_url(program, p1) == "https://ondemand/file.mp3"

    def test_live_program_skips_on_demand_assets(self, p1, program_factory) -> None:
        """Test a live program without a live asset uses the fallback table."""
        program = program_factory(p1, type="Live", assets=(STREAM, PROGRESSIVE))
        assert resolve_stream_url(program, p1) == FALLBACK_STREAM_URLS["p1"]

    def test_unmatched_targets_use_fallback(self, p1, program_factory) -> None:
        """Test assets with other targets are not picked."""
        program = program_factory(p1, type="Podcast", assets=(OTHER,))
        assert resolve_stream_url(program, p1) == FALLBACK_STREAM_URLS["p1"]


class TestFallback:
    """Static table and synthesized URLs."""

    @pytest.mark.parametrize("slug", sorted(FALLBACK_STREAM_URLS))
    def test_table_lookup_without_program(self, slug: str) -> None:
        """Test every table slug resolves to its entry when no program is known."""
        channel = Channel(id=slug, slug=slug, title=slug.upper())
        assert resolve_stream_url(None, channel) == FALLBACK_STREAM_URLS[slug]

    def test_unknown_slug_is_synthesized(self) -> None:
        """Test an unknown slug yields base + '/' + uppercased slug."""
        channel = Channel(id="zz", slug="zz", title="ZZ")
        assert resolve_stream_url(None, channel) == f"{FALLBACK_STREAM_BASE}/ZZ"

    def test_empty_program_assets_use_fallback(self, p3, program_factory) -> None:
        """Test a program with no assets behaves like no program."""
        program = program_factory(p3, assets=())
        assert resolve_stream_url(program, p3) == FALLBACK_STREAM_URLS["p3"]

    def test_empty_slug_resolves_to_none(self) -> None:
        """Test a channel without a slug cannot be resolved."""
        channel = Channel(id="x", slug="", title="Nameless")
        assert resolve_stream_url(None, channel) is None

    def test_custom_table_and_base(self) -> None:
        """Test configured overrides win over the built-in table and base."""
        known = Channel(id="p1", slug="p1", title="P1")
        unknown = Channel(id="p9", slug="p9", title="P9")
        table = {"p1": "https://mirror/p1"}

        assert fallback_stream_url(known, table, "https://mirror/") == "https://mirror/p1"
        assert fallback_stream_url(unknown, table, "https://mirror/") == "https://mirror/P9"

    def test_overrides_keep_the_rest_of_the_table(self) -> None:
        """Test an override for one slug leaves the other table entries in place."""
        channel = Channel(id="p4s", slug="p4sjaelland", title="P4 Sjælland")
        overrides = {"p1": "https://mirror/p1"}

        assert fallback_stream_url(channel, overrides) == FALLBACK_STREAM_URLS["p4sjaelland"]
        assert fallback_stream_url(channel, {}) == "https://live-icy.gss.dr.dk/AACP4SJAEL"

    def test_slug_lookup_is_case_insensitive(self) -> None:
        """Test mixed-case slugs hit the lowercase table."""
        channel = Channel(id="p8", slug="P8Jazz", title="P8 Jazz")
        assert fallback_stream_url(channel) == FALLBACK_STREAM_URLS["p8jazz"]
