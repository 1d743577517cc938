"""
Command-line interface for Vineyard Diary.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from vineyard_diary import __version__
from vineyard_diary.config import Settings, get_settings
from vineyard_diary.diary import DiaryStore
from vineyard_diary.exceptions import ConfigError, SnapshotError
from vineyard_diary.flows.backfill import backfill_weather
from vineyard_diary.gdd import (
    GDDMethod,
    StartRule,
    cumulative_series,
    daily_series,
    resolve_window,
    series_to_dict,
)
from vineyard_diary.log_setup import setup_logging
from vineyard_diary.store import WeatherCache, load_snapshot_file

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="vineyard-diary",
        description="Weather cache and growing degree day analytics for a vineyard diary",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    subparsers.add_parser("backfill", help="Fetch this year's weather for all blocks")

    gdd_parser = subparsers.add_parser("gdd", help="Print the daily and cumulative GDD series")
    gdd_parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Season year (default: current year)",
    )
    gdd_parser.add_argument("--block", type=str, default=None, help="Weather block to use")
    gdd_parser.add_argument("--variety", type=str, default=None, help="Variety for milestones")
    gdd_parser.add_argument(
        "--method",
        choices=[m.value for m in GDDMethod],
        default=GDDMethod.CLASSIC_BASE10.value,
        help="Heat accumulation model (default: classic-base-10)",
    )
    gdd_parser.add_argument(
        "--rule",
        choices=[r.value for r in StartRule],
        default=StartRule.FIXED.value,
        help="Start-of-season rule (default: fixed)",
    )
    gdd_parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Treat this ISO day as today (default: today)",
    )
    gdd_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    restore_parser = subparsers.add_parser(
        "restore-weather", help="Replace the weather cache with a snapshot file"
    )
    restore_parser.add_argument("file", type=str, help="Snapshot JSON to restore")

    return parser


def _open_cache(settings: Settings) -> WeatherCache:
    cache = WeatherCache(settings.weather_cache_path)
    cache.reload()
    return cache


def _open_diary(settings: Settings) -> DiaryStore:
    diary = DiaryStore(settings.diary_path, settings.settings_path)
    diary.load()
    return diary


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Weather cache: {settings.weather_cache_path}")
    print(f"Diary: {settings.diary_path}")
    return 0


def cmd_backfill(_args: argparse.Namespace) -> int:
    """Handle the 'backfill' command."""
    result = backfill_weather(timeout=get_settings().http_timeout_seconds)
    print(
        f"Fetched {result['blocks_fetched']}/{result['blocks_requested']} blocks, "
        f"{result['observations']} observations."
    )
    if not result["persisted"]:
        print("Warning: weather cache could not be saved.", file=sys.stderr)
        return 1
    return 0


def cmd_gdd(args: argparse.Namespace) -> int:
    """Handle the 'gdd' command."""
    settings = get_settings()
    cache = _open_cache(settings)
    diary = _open_diary(settings)

    today = args.as_of or date.today()
    year = args.year if args.year is not None else today.year
    method = GDDMethod(args.method)
    rule = StartRule(args.rule)

    window = resolve_window(diary.entries, year, rule, args.variety, today=today)
    daily = daily_series(
        diary.entries,
        cache,
        year,
        today=today,
        block=args.block,
        variety=args.variety,
        method=method,
        rule=rule,
        block_names=diary.settings.block_names,
    )
    cumulative = cumulative_series(daily)

    if args.json:
        print(json.dumps(series_to_dict(window, daily, cumulative), indent=2))
        return 0

    if not daily:
        print(f"No GDD data for {year} (window {window.start} .. {window.end}).")
        return 0

    print(f"{method.value} GDD, {window.start} .. {window.end}")
    for d, c in zip(daily, cumulative, strict=True):
        print(f"{d.day.isoformat()}  {d.value:6.1f}  {c.value:8.1f}")
    return 0


def cmd_restore_weather(args: argparse.Namespace) -> int:
    """Handle the 'restore-weather' command."""
    settings = get_settings()
    try:
        snapshot = load_snapshot_file(Path(args.file))
    except (OSError, SnapshotError) as exc:
        print(f"Error: cannot restore from {args.file}: {exc}", file=sys.stderr)
        return 1

    cache = WeatherCache(settings.weather_cache_path)
    if not cache.replace_all(snapshot):
        print("Error: restored data could not be saved.", file=sys.stderr)
        return 1

    print(f"Restored {len(cache)} observations for {len(cache.blocks())} blocks.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(debug=args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "backfill": cmd_backfill,
        "gdd": cmd_gdd,
        "restore-weather": cmd_restore_weather,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        if get_settings().debug:
            setup_logging(debug=True)
        return handler(args)
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
