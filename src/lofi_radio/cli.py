"""
Lofi Radio CLI - Entry point

Browse the catalog, play a track or station through mpv, run focus
timers, and manage favorites from the terminal.
"""

import argparse
import asyncio
import sys
from typing import Optional

from loguru import logger
from rich.progress import BarColumn, Progress, TextColumn

from lofi_radio.app import Services, build_services
from lofi_radio.core.config import ensure_directories, load_config
from lofi_radio.core.console import get_console, print_table, safe_print
from lofi_radio.core.exceptions import RendererError
from lofi_radio.core.output import setup_from_config
from lofi_radio.domain.focus import CUSTOM_PRESET_LABEL, FocusPreset, FocusTimer, TimerState
from lofi_radio.domain.library import RadioStation, Track
from lofi_radio.domain.playback import (
    MpvRenderer,
    PlaybackState,
    PlayerStatus,
    check_mpv_available,
    format_time,
)


def _format_minutes(seconds: float) -> str:
    minutes = int(seconds // 60)
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60}m"
    return f"{minutes}m"


def _print_tracks(title: str, tracks: list[Track]) -> None:
    print_table(
        title,
        ["Title", "Artist", "Genre", "Length", "ID"],
        (
            (t.title, t.artist, t.genre, format_time(t.duration), t.id)
            for t in tracks
        ),
    )


def _find_track(services: Services, key: str) -> Optional[Track]:
    """Resolve a track by id or by 1-based position in the track list."""
    tracks = services.catalog.tracks
    if key.isdigit() and 1 <= int(key) <= len(tracks):
        return tracks[int(key) - 1]
    for track in tracks:
        if track.id == key:
            return track
    for track in services.favorites.favorite_tracks:
        if track.id == key:
            return track
    return None


def _find_station(services: Services, key: str) -> Optional[RadioStation]:
    stations = services.catalog.stations
    if key.isdigit() and 1 <= int(key) <= len(stations):
        return stations[int(key) - 1]
    for station in stations:
        if station.id == key:
            return station
    return None


def _report_catalog_error(services: Services) -> None:
    if services.catalog.error_message:
        safe_print(f"⚠ {services.catalog.error_message} (showing sample data)", "yellow")


# Commands


async def cmd_tracks(services: Services, args: argparse.Namespace) -> int:
    if args.genre:
        await services.catalog.refresh()
        tracks = await services.catalog.by_genre(args.genre)
        title = f"{args.genre} Tracks"
    else:
        tracks = await services.catalog.refresh()
        title = "Tracks"
    _report_catalog_error(services)
    _print_tracks(title, tracks)
    return 0


async def cmd_stations(services: Services, args: argparse.Namespace) -> int:
    stations = await services.catalog.refresh_stations()
    _report_catalog_error(services)
    print_table(
        "Radio Stations",
        ["Name", "Genre", "Description", "ID"],
        ((s.name, s.genre, s.description or "", s.id) for s in stations),
    )
    return 0


async def cmd_search(services: Services, args: argparse.Namespace) -> int:
    query = " ".join(args.query)
    await services.catalog.refresh()
    tracks = await services.catalog.search(query)
    _report_catalog_error(services)
    if not tracks:
        safe_print(f"No tracks match {query!r}", "yellow")
        return 0
    _print_tracks(f"Results for {query!r}", tracks)
    return 0


async def cmd_play(services: Services, args: argparse.Namespace) -> int:
    if not check_mpv_available():
        safe_print("❌ mpv is not installed or not on PATH", "red")
        return 1

    await services.catalog.refresh_all()
    player = services.player

    station = _find_station(services, args.item) if args.station else None
    track = None if args.station else _find_track(services, args.item)
    if station is None and track is None:
        safe_print(f"❌ Nothing found for {args.item!r}", "red")
        return 1

    renderer = services.renderer
    if isinstance(renderer, MpvRenderer):
        try:
            renderer.start(volume=player.volume)
        except RendererError as e:
            safe_print(f"❌ {e.reason}", "red")
            return 1

    done = asyncio.Event()
    last_track: list[Optional[Track]] = [None]

    def on_status(status: PlayerStatus) -> None:
        if status.current_track is not None and status.current_track != last_track[0]:
            last_track[0] = status.current_track
            safe_print(
                f"♪ {status.current_track.artist} - {status.current_track.title}", "cyan"
            )
        if status.state in (PlaybackState.STOPPED, PlaybackState.ERRORED):
            done.set()

    unsubscribe = player.subscribe(on_status)
    try:
        if station is not None:
            await player.play_station(station)
        else:
            player.set_queue(services.catalog.tracks)
            if args.shuffle:
                player.toggle_shuffle()
            await player.play_track(track)
        await done.wait()
    finally:
        unsubscribe()

    if player.state == PlaybackState.ERRORED:
        safe_print(f"❌ Playback failed: {player.error}", "red")
        return 1
    return 0


async def cmd_focus(services: Services, args: argparse.Namespace) -> int:
    timer = services.timer
    if args.minutes is not None:
        if args.minutes <= 0:
            safe_print("❌ Minutes must be greater than zero", "red")
            return 1
        label = CUSTOM_PRESET_LABEL
        started = timer.start(args.minutes * 60, None)
    else:
        try:
            preset = FocusPreset.from_name(args.preset or services.config.focus.default_preset)
        except ValueError as e:
            safe_print(f"❌ {e}", "red")
            return 1
        label = preset.label
        started = timer.start_preset(preset)

    if not started:
        safe_print("❌ A focus timer is already running", "red")
        return 1

    done = asyncio.Event()
    progress = Progress(
        TextColumn("[bold green]{task.description}"),
        BarColumn(),
        TextColumn("{task.fields[remaining]}"),
        console=get_console(),
    )
    task_id = progress.add_task(label, total=1.0, remaining=timer.current_timer.formatted_remaining)

    def on_timer(current: Optional[FocusTimer]) -> None:
        if current is None:
            done.set()
            return
        progress.update(task_id, completed=current.progress, remaining=current.formatted_remaining)
        if current.state == TimerState.COMPLETED:
            done.set()

    unsubscribe = timer.subscribe(on_timer)
    try:
        with progress:
            await done.wait()
    except asyncio.CancelledError:
        session = timer.stop()
        if session is not None:
            safe_print(f"Stopped after {_format_minutes(session.duration)}", "yellow")
        raise
    finally:
        unsubscribe()

    safe_print(f"✅ {label} complete!", "green")
    return 0


async def cmd_stats(services: Services, args: argparse.Namespace) -> int:
    history = services.history
    safe_print("Focus statistics", "bold")
    safe_print(f"  Today:              {_format_minutes(history.todays_focus_time())}")
    safe_print(f"  Total:              {_format_minutes(history.total_focus_time())}")
    safe_print(f"  Completed sessions: {history.completed_sessions_count()}")

    sessions = history.sessions(limit=args.limit)
    if sessions:
        print_table(
            "Recent Sessions",
            ["Preset", "Duration", "Completed", "When"],
            (
                (
                    s.preset,
                    _format_minutes(s.duration),
                    "yes" if s.completed else "no",
                    s.completed_at.strftime("%Y-%m-%d %H:%M"),
                )
                for s in sessions
            ),
        )
    return 0


async def cmd_favorites(services: Services, args: argparse.Namespace) -> int:
    favorites = services.favorites

    if args.action == "list":
        tracks = favorites.favorite_tracks
        if not tracks:
            safe_print("No favorites yet", "yellow")
        else:
            _print_tracks("Favorites", tracks)
        remaining = favorites.remaining_favorites
        if remaining is not None:
            safe_print(f"{remaining} favorite slots left on the free tier", "dim")
        return 0

    if args.action == "clear":
        favorites.clear_all()
        safe_print("Cleared all favorites", "green")
        return 0

    if not args.track:
        safe_print(f"❌ favorites {args.action} needs a track id", "red")
        return 1

    if args.action == "remove":
        favorites.remove_favorite(args.track)
        safe_print(f"Removed {args.track}", "green")
        return 0

    await services.catalog.refresh()
    track = _find_track(services, args.track)
    if track is None:
        safe_print(f"❌ No track {args.track!r}", "red")
        return 1
    if favorites.is_favorite(track.id):
        safe_print(f"{track.title} is already a favorite", "yellow")
        return 0
    if not favorites.add_favorite(track):
        safe_print(
            f"❌ Free tier is limited to {favorites.free_tier_limit} favorites", "red"
        )
        return 1
    safe_print(f"♥ Added {track.title}", "green")
    return 0


COMMANDS = {
    "tracks": cmd_tracks,
    "stations": cmd_stations,
    "search": cmd_search,
    "play": cmd_play,
    "focus": cmd_focus,
    "stats": cmd_stats,
    "favorites": cmd_favorites,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lofi-radio",
        description="Lofi Radio - music and focus timer for the terminal",
    )
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    tracks_parser = subparsers.add_parser("tracks", help="List catalog tracks")
    tracks_parser.add_argument("--genre", help="Only tracks in this genre")

    subparsers.add_parser("stations", help="List radio stations")

    search_parser = subparsers.add_parser("search", help="Search tracks by title or artist")
    search_parser.add_argument("query", nargs="+")

    play_parser = subparsers.add_parser("play", help="Play a track or station")
    play_parser.add_argument("item", help="Track/station id or list number")
    play_parser.add_argument("--station", action="store_true", help="Play a radio station")
    play_parser.add_argument("--shuffle", action="store_true", help="Shuffle the queue")

    focus_parser = subparsers.add_parser("focus", help="Run a focus timer")
    focus_parser.add_argument(
        "preset",
        nargs="?",
        help=f"One of: {', '.join(p.label for p in FocusPreset)}",
    )
    focus_parser.add_argument("--minutes", type=float, help="Custom duration in minutes")

    stats_parser = subparsers.add_parser("stats", help="Show focus statistics")
    stats_parser.add_argument("--limit", type=int, default=10, help="Recent sessions to show")

    favorites_parser = subparsers.add_parser("favorites", help="Manage favorite tracks")
    favorites_parser.add_argument(
        "action", nargs="?", default="list", choices=["list", "add", "remove", "clear"]
    )
    favorites_parser.add_argument("track", nargs="?", help="Track id or list number")

    return parser


async def run(args: argparse.Namespace) -> int:
    config = load_config()
    setup_from_config(config.logging)
    services = build_services(config)
    try:
        return await COMMANDS[args.subcommand](services, args)
    finally:
        services.close()


def main() -> None:
    """Main entry point for the lofi-radio command."""
    args = build_parser().parse_args()
    ensure_directories()

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
