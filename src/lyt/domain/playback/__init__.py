"""
Playback domain module.

Session state, the streaming engine contract, the playback controller, the
mpv engine adapter and the remote-command bridge.
"""

from .controller import PlaybackController, SessionObserver
from .engine import EngineEvent, EngineEventHandler, EngineEventKind, StreamingEngine
from .mpv import MpvEngine, check_mpv_available
from .remote import REMOTE_COMMANDS, handle_remote_command, now_playing_info
from .state import STOPPED_SESSION, PlaybackPhase, PlaybackSession

__all__ = [
    # State
    "PlaybackPhase",
    "PlaybackSession",
    "STOPPED_SESSION",
    # Engine
    "EngineEvent",
    "EngineEventKind",
    "EngineEventHandler",
    "StreamingEngine",
    "MpvEngine",
    "check_mpv_available",
    # Controller
    "PlaybackController",
    "SessionObserver",
    # Remote
    "REMOTE_COMMANDS",
    "handle_remote_command",
    "now_playing_info",
]
