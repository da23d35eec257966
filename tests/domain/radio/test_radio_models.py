"""Tests for radio domain models."""

from datetime import timedelta

from lyt.domain.radio.models import Channel, ScheduleSnapshot, Track


class TestChannel:
    """Channel identity is its id."""

    def test_equality_ignores_metadata(self) -> None:
        a = Channel(id="urn:p1", slug="p1", title="P1")
        b = Channel(id="urn:p1", slug="p1", title="DR P1", presentation_url="https://dr.dk/p1")
        assert a == b
        assert len({a, b}) == 1

    def test_different_ids_differ(self) -> None:
        assert Channel(id="a", slug="p1", title="P1") != Channel(id="b", slug="p1", title="P1")


class TestTrack:
    def test_airtime_window(self, now) -> None:
        """Test a track plays from played_time for its duration."""
        track = Track("urn:t", "Song", "Artist", now, 60_000)
        assert track.end_time == now + timedelta(minutes=1)
        assert track.is_currently_playing(now + timedelta(seconds=30))
        assert not track.is_currently_playing(now + timedelta(seconds=61))


class TestScheduleSnapshot:
    def test_episodes_for_channel(self, now, p1, p3, program_factory) -> None:
        first = program_factory(p1, "A")
        other = program_factory(p3, "B")
        second = program_factory(p1, "C")
        snapshot = ScheduleSnapshot(episodes=(first, other, second), fetched_at=now)
        assert snapshot.episodes_for(p1) == [first, second]
