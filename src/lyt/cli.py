"""
Lyt CLI - Entry point

Terminal front end for the radio core: list channels, show what's on air,
print the resolved stream URL, or play a channel through mpv.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.table import Table

from lyt.app import RadioContext
from lyt.core.config import Config, ensure_directories, get_data_dir, load_config
from lyt.core.output import get_console, log, setup_loguru
from lyt.domain.playback import (
    MpvEngine,
    PlaybackPhase,
    PlaybackSession,
    check_mpv_available,
    now_playing_info,
)
from lyt.domain.radio import Channel, EngineError, FetchError, resolve_stream_url


def _setup_logging(config: Config, verbose: bool) -> None:
    log_file = (
        Path(config.logging.log_file)
        if config.logging.log_file
        else get_data_dir() / "lyt.log"
    )
    setup_loguru(
        log_file,
        level="DEBUG" if verbose else config.logging.level,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        console_output=config.logging.console_output or verbose,
    )


def _create_context(config: Config) -> RadioContext:
    engine = MpvEngine(
        socket_path=config.player.mpv_socket_path,
        volume=config.player.volume,
        poll_interval=config.player.poll_interval,
    )
    return RadioContext.create(config, engine)


async def _lookup_channel(ctx: RadioContext, slug: str) -> Channel:
    """Find a channel on air, or stand in a bare one so the fallback table applies."""
    try:
        channel = await ctx.find_channel(slug)
    except FetchError as e:
        log(f"Schedule unavailable: {e}", level="warning")
        channel = None
    if channel is None:
        logger.debug(f"Channel {slug} not in schedule, using slug only")
        channel = Channel(id=slug.lower(), slug=slug.lower(), title=slug.upper())
    return channel


async def cmd_channels(ctx: RadioContext) -> int:
    try:
        groups = await ctx.channel_groups()
    except FetchError as e:
        log(f"Could not load channels: {e}", level="error")
        return 1

    table = Table(title="DR Radio")
    table.add_column("Group", style="bold")
    table.add_column("Channel")
    table.add_column("Slug", style="cyan")
    table.add_column("On air")

    for group in groups:
        if group.is_regional:
            for region in ctx.regions(group):
                program = ctx.current_program(region.channel)
                table.add_row(
                    group.name,
                    region.display_name,
                    region.channel.slug,
                    program.title if program else "",
                )
        else:
            for channel in group.display_channels:
                program = ctx.current_program(channel)
                table.add_row(
                    group.name, channel.title, channel.slug, program.title if program else ""
                )

    get_console().print(table)
    return 0


async def cmd_now(ctx: RadioContext, slug: str) -> int:
    channel = await _lookup_channel(ctx, slug)
    program = ctx.current_program(channel)
    console = get_console()

    if program is None:
        console.print(f"[bold]{channel.title}[/bold]: no program information")
    else:
        start = program.start_time.astimezone().strftime("%H:%M")
        end = program.end_time.astimezone().strftime("%H:%M")
        console.print(f"[bold]{channel.title}[/bold]: {program.title} ({start}-{end})")
        if program.description:
            console.print(f"  {program.description}", style="dim")

    try:
        track = await ctx.source.fetch_current_track(channel.slug)
    except FetchError as e:
        logger.warning(f"Track lookup failed: {e}")
        track = None
    if track is not None:
        console.print(f"  ♪ {track.artist_name}: {track.title}")
    return 0


async def cmd_schedule(ctx: RadioContext, slug: str) -> int:
    channel = await _lookup_channel(ctx, slug)
    programs = await ctx.channel_schedule(channel)
    if not programs:
        log(f"No schedule for {channel.slug}", level="warning")
        return 1

    table = Table(title=f"{channel.title} schedule")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Program")
    for program in programs:
        table.add_row(
            program.start_time.astimezone().strftime("%H:%M"),
            program.end_time.astimezone().strftime("%H:%M"),
            program.title,
        )
    get_console().print(table)
    return 0


async def cmd_url(ctx: RadioContext, slug: str) -> int:
    channel = await _lookup_channel(ctx, slug)
    url = resolve_stream_url(
        ctx.current_program(channel),
        channel,
        ctx.config.streams.fallback_urls,
        ctx.config.streams.fallback_base,
    )
    if url is None:
        log(f"No stream URL available for {channel.title}", level="error")
        return 1
    print(url)
    return 0


def _print_session(session: PlaybackSession) -> None:
    info = now_playing_info(session)
    if info is None:
        get_console().print("Stopped", style="dim")
        return
    if session.phase is PlaybackPhase.ERROR:
        log(f"{info['channel']}: {session.last_error}", level="error")
        return
    artist = f"{info['artist']} - " if info["artist"] else ""
    get_console().print(f"[{info['phase']}] {info['channel']}: {artist}{info['title']}")


async def cmd_play(ctx: RadioContext, slug: str, volume: Optional[int]) -> int:
    if not check_mpv_available():
        log("mpv is not installed or not on PATH", level="error")
        return 1

    engine = ctx.engine
    try:
        engine.start()
    except EngineError as e:
        log(str(e), level="error")
        return 1

    finished = asyncio.Event()

    def on_session(session: PlaybackSession) -> None:
        _print_session(session)
        if not session.is_active:
            finished.set()

    ctx.controller.subscribe(on_session)
    try:
        channel = await _lookup_channel(ctx, slug)
        if volume is not None:
            ctx.controller.set_volume(volume / 100)
        session = await ctx.play(channel)
        if session.phase is not PlaybackPhase.ERROR:
            await finished.wait()
        return 0 if ctx.session.phase is not PlaybackPhase.ERROR else 1
    finally:
        await ctx.controller.close()
        engine.close()


async def _run(args: argparse.Namespace, config: Config) -> int:
    ctx = _create_context(config)
    try:
        if args.subcommand == "channels":
            return await cmd_channels(ctx)
        if args.subcommand == "now":
            return await cmd_now(ctx, args.slug)
        if args.subcommand == "schedule":
            return await cmd_schedule(ctx, args.slug)
        if args.subcommand == "url":
            return await cmd_url(ctx, args.slug)
        if args.subcommand == "play":
            return await cmd_play(ctx, args.slug, args.volume)
        return 2
    finally:
        await ctx.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lyt",
        description="Lyt - DR radio in the terminal",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging to stderr"
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")
    subparsers.required = True

    subparsers.add_parser("channels", help="List channels grouped as in the app")

    now_parser = subparsers.add_parser("now", help="Show what is on air")
    now_parser.add_argument("slug", help="Channel slug, e.g. p1 or p4kbh")

    schedule_parser = subparsers.add_parser("schedule", help="Show today's schedule")
    schedule_parser.add_argument("slug", help="Channel slug")

    url_parser = subparsers.add_parser("url", help="Print the live stream URL")
    url_parser.add_argument("slug", help="Channel slug")

    play_parser = subparsers.add_parser("play", help="Play a channel through mpv")
    play_parser.add_argument("slug", help="Channel slug")
    play_parser.add_argument(
        "--volume", type=int, default=None, help="Volume 0-100"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the lyt command."""
    args = build_parser().parse_args(argv)
    config = load_config()
    ensure_directories()
    _setup_logging(config, args.verbose)

    try:
        sys.exit(asyncio.run(_run(args, config)))
    except KeyboardInterrupt:
        get_console().print("Stopped", style="dim")
        sys.exit(130)


if __name__ == "__main__":
    main()
