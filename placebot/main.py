"""
Command-line entry point.

    placebot --refresh-token R --token T --pattern "patterns/logo.json 10 20 0" --pattern "..."

Tokens fall back to PLACE_REFRESH_TOKEN / PLACE_TOKEN.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from placebot import config
from placebot.client import PlaceClient
from placebot.cooldown import CooldownCalculator
from placebot.credentials import SessionCredentials
from placebot.errors import PlaceBotError
from placebot.exporter import SnapshotExporter
from placebot.loop import ControlLoop
from placebot.patterns import load_patterns
from placebot.placer import PixelPlacer

_log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="placebot", description="Keep pixel-art patterns painted on a shared canvas.")
    ap.add_argument("--refresh-token", default=config.PLACE_REFRESH_TOKEN)
    ap.add_argument("--token", default=config.PLACE_TOKEN)
    ap.add_argument(
        "--pattern",
        dest="patterns",
        action="append",
        default=[],
        help="'<path> <x> <y> <priority>' (repeatable; lower priority is served first)",
    )
    ap.add_argument("--base-url", default=config.PLACE_BASE_URL)
    ap.add_argument("--budget", type=int, default=config.MAX_PIXELS_PER_BATCH, help="pixels per cycle")
    ap.add_argument("--map-dir", type=Path, default=config.MAP_DIR)
    ap.add_argument("--no-export", action="store_true", help="do not write board snapshots")
    ap.add_argument("--once", action="store_true", help="run a single cycle and exit")
    return ap


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.DEBUG),
        format="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def build_loop(args: argparse.Namespace) -> ControlLoop:
    patterns = load_patterns(args.patterns)
    client = PlaceClient(base_url=args.base_url)
    credentials = SessionCredentials(refresh_token=args.refresh_token, token=args.token)
    placer = PixelPlacer(client, credentials, cooldown=CooldownCalculator())
    exporter = None if args.no_export else SnapshotExporter(args.map_dir)
    return ControlLoop(client, placer, patterns, exporter=exporter, budget=args.budget)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if not args.refresh_token or not args.token:
        ap.error("--refresh-token and --token are required (or set PLACE_REFRESH_TOKEN / PLACE_TOKEN)")
    if not args.patterns:
        ap.error("at least one --pattern is required")

    configure_logging()
    config.validate_config()
    _log.info("Starting Place client with %d pattern(s)", len(args.patterns))

    try:
        loop = build_loop(args)
        if args.once:
            report = loop.run_cycle()
            _log.info("Single cycle done: %d placed, next due %s", report.placed, report.next_due.isoformat())
        else:
            loop.run_forever()
    except (PlaceBotError, OSError) as e:
        _log.error("Fatal: %s", e)
        return 1
    except KeyboardInterrupt:
        _log.info("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
