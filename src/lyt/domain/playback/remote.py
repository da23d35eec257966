"""
Now-playing info and remote commands.

Stateless bridge between the playback controller and system media controls
(media keys, lock screen, MPRIS and the like).
"""

from typing import Any, Optional

from loguru import logger

from lyt.domain.radio.models import Channel

from .controller import PlaybackController
from .state import PlaybackSession

REMOTE_COMMANDS = ("play", "pause", "stop", "toggle")


def now_playing_info(session: PlaybackSession) -> Optional[dict[str, Any]]:
    """Build the now-playing metadata for a session.

    Returns None when nothing is loaded. The title prefers the announced
    track, then the program, then the channel.
    """
    channel = session.channel
    if channel is None:
        return None

    program = session.program
    track = session.track

    if track is not None:
        title = track.title
        artist = track.artist_name
    elif program is not None:
        title = program.title
        artist = channel.title
    else:
        title = channel.title
        artist = None

    return {
        "title": title,
        "artist": artist,
        "album": program.title if program is not None else channel.title,
        "channel": channel.title,
        "channel_slug": channel.slug,
        "is_live": True if program is None else program.is_live,
        "phase": session.phase.value,
        "playback_rate": 1.0 if session.is_playing else 0.0,
    }


async def handle_remote_command(
    controller: PlaybackController,
    command: str,
    channel: Optional[Channel] = None,
) -> bool:
    """Forward a remote command into the controller.

    ``play`` and ``toggle`` act on ``channel``, defaulting to the session's
    channel. Returns False when the command could not be applied.
    """
    command = command.lower()
    if command not in REMOTE_COMMANDS:
        logger.warning(f"Unknown remote command: {command}")
        return False

    if command == "stop":
        controller.stop()
        return True
    if command == "pause":
        controller.pause()
        return True

    target = channel or controller.session.channel
    if target is None:
        logger.debug(f"Remote {command} ignored: no channel")
        return False

    if command == "play":
        await controller.play(target)
    else:
        await controller.toggle(target)
    return True
