"""Tests for the mpv engine's status polling and commands."""

from unittest.mock import MagicMock, patch

import pytest

from lyt.domain.playback.engine import EngineEventKind
from lyt.domain.playback.mpv import MpvEngine
from lyt.domain.radio.exceptions import EngineError

URL = "https://live-icy.gss.dr.dk/AACP1"


def mpv_properties(**values):
    """get_mpv_property replacement answering from a dict."""
    mapping = {key.replace("_", "-"): value for key, value in values.items()}
    return lambda socket_path, name: mapping.get(name)


@pytest.fixture
def engine() -> MpvEngine:
    engine = MpvEngine(socket_path="/tmp/lyt-test-socket")
    engine._process = MagicMock()
    engine._process.poll.return_value = None
    engine.events = []
    engine.set_event_handler(engine.events.append)
    return engine


@pytest.fixture
def loaded(engine) -> MpvEngine:
    with patch.object(MpvEngine, "is_running", return_value=True), patch(
        "lyt.domain.playback.mpv.send_mpv_command", return_value=True
    ):
        engine.load(URL)
    return engine


class TestCommands:
    """Tests for engine commands."""

    def test_load_requires_running_mpv(self, engine) -> None:
        """Test load raises when mpv is not up."""
        with patch.object(MpvEngine, "is_running", return_value=False):
            with pytest.raises(EngineError):
                engine.load(URL)

    def test_load_sends_loadfile(self, engine) -> None:
        with patch.object(MpvEngine, "is_running", return_value=True), patch(
            "lyt.domain.playback.mpv.send_mpv_command", return_value=True
        ) as send:
            engine.load(URL)
        send.assert_called_once_with(
            engine.socket_path, {"command": ["loadfile", URL, "replace"]}
        )

    def test_refused_load_raises(self, engine) -> None:
        with patch.object(MpvEngine, "is_running", return_value=True), patch(
            "lyt.domain.playback.mpv.send_mpv_command", return_value=False
        ):
            with pytest.raises(EngineError):
                engine.load(URL)

    def test_volume_scaled_to_percent(self, engine) -> None:
        with patch.object(MpvEngine, "is_running", return_value=True), patch(
            "lyt.domain.playback.mpv.send_mpv_command", return_value=True
        ) as send:
            engine.set_volume(0.45)
        send.assert_called_once_with(
            engine.socket_path, {"command": ["set_property", "volume", 45]}
        )


class TestPolling:
    """Tests for translating mpv properties into engine events."""

    def test_nothing_loaded_emits_nothing(self, engine) -> None:
        assert engine.poll_once() is None
        assert engine.events == []

    def test_playback_time_means_ready(self, loaded) -> None:
        """Test ready fires once when playback starts."""
        with patch(
            "lyt.domain.playback.mpv.get_mpv_property",
            side_effect=mpv_properties(idle_active=False, playback_time=0.2),
        ):
            first = loaded.poll_once()
            second = loaded.poll_once()

        assert first.kind is EngineEventKind.READY
        assert first.url == URL
        assert second is None
        assert len(loaded.events) == 1

    def test_buffering_after_ready_means_stalled(self, loaded) -> None:
        """Test cache pauses after ready emit stalled, then ready again."""
        with patch(
            "lyt.domain.playback.mpv.get_mpv_property",
            side_effect=mpv_properties(idle_active=False, playback_time=1.0),
        ):
            loaded.poll_once()
        with patch(
            "lyt.domain.playback.mpv.get_mpv_property",
            side_effect=mpv_properties(idle_active=False, paused_for_cache=True, playback_time=1.0),
        ):
            stalled = loaded.poll_once()
        with patch(
            "lyt.domain.playback.mpv.get_mpv_property",
            side_effect=mpv_properties(idle_active=False, playback_time=3.0),
        ):
            recovered = loaded.poll_once()

        assert stalled.kind is EngineEventKind.STALLED
        assert recovered.kind is EngineEventKind.READY

    def test_idle_after_grace_means_failed(self, loaded) -> None:
        """Test mpv staying idle past the grace period fails the load."""
        with patch(
            "lyt.domain.playback.mpv.get_mpv_property",
            side_effect=mpv_properties(idle_active=True),
        ):
            assert loaded.poll_once() is None  # still within grace
            loaded._loaded_at -= 60
            failed = loaded.poll_once()

        assert failed.kind is EngineEventKind.FAILED
        assert failed.reason == "Failed to load audio"
        assert loaded.poll_once() is None  # reported once

    def test_exited_process_means_failed(self, loaded) -> None:
        loaded._process.poll.return_value = 1
        event = loaded.poll_once()
        assert event.kind is EngineEventKind.FAILED
        assert event.reason == "MPV exited"

    def test_stop_silences_polling(self, loaded) -> None:
        """Test no events are emitted after stop."""
        with patch.object(MpvEngine, "is_running", return_value=False):
            loaded.stop()
        assert loaded.poll_once() is None
