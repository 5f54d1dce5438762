"""
Pattern loading: parse "--pattern '<path> <x> <y> <priority>'" arguments and read pattern files.

Pattern file format:
    {"pattern": [{"x": 0, "y": 0, "color": 5}, {"x": 1, "y": 0, "color": 5}, ...]}
x/y are offsets from the anchor given on the command line.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from placebot.errors import PatternError
from placebot.models import PatternFilePayload, PatternPixel, PatternSpec
from placebot.scheduler import order_by_priority

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternArg:
    path: Path
    x: int
    y: int
    priority: int


def parse_pattern_arg(text: str) -> PatternArg:
    parts = (text or "").split()
    if len(parts) != 4:
        raise PatternError(f"Invalid pattern arguments {text!r}: expected '<path> <x> <y> <priority>'")
    path, raw_x, raw_y, raw_priority = parts
    try:
        x = int(raw_x)
    except ValueError:
        raise PatternError(f"Invalid x coordinate: {raw_x}") from None
    try:
        y = int(raw_y)
    except ValueError:
        raise PatternError(f"Invalid y coordinate: {raw_y}") from None
    try:
        priority = int(raw_priority)
    except ValueError:
        raise PatternError(f"Invalid priority: {raw_priority}") from None
    if priority < 0:
        raise PatternError(f"Invalid priority: {raw_priority} (must be >= 0)")
    return PatternArg(path=Path(path), x=x, y=y, priority=priority)


def load_pattern_file(arg: PatternArg) -> PatternSpec:
    try:
        raw = arg.path.read_text(encoding="utf-8")
    except OSError as e:
        raise PatternError(f"Cannot read pattern file {arg.path}: {e}") from e
    try:
        payload = PatternFilePayload.model_validate_json(raw)
    except ValidationError as e:
        raise PatternError(f"Malformed pattern file {arg.path}: {e}") from e
    pixels = tuple(PatternPixel(dx=p.x, dy=p.y, color_id=p.color) for p in payload.pattern)
    _log.info(
        "Loaded pattern %s: %d pixel(s) at (%d, %d), priority %d",
        arg.path, len(pixels), arg.x, arg.y, arg.priority,
    )
    return PatternSpec(pattern=pixels, origin_x=arg.x, origin_y=arg.y, priority=arg.priority, name=str(arg.path))


def load_patterns(args: Iterable[str]) -> List[PatternSpec]:
    """Parse and load every --pattern argument, stably sorted by priority."""
    return order_by_priority(load_pattern_file(parse_pattern_arg(a)) for a in args)
