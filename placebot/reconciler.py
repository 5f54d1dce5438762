"""
Diff a desired pattern against a board snapshot. Pure: no I/O, deterministic.
"""
from __future__ import annotations

import logging
from typing import List

from placebot.board import Board
from placebot.models import Correction, PatternSpec

_log = logging.getLogger(__name__)


def reconcile(board: Board, spec: PatternSpec) -> List[Correction]:
    """
    Corrections for every in-bounds pattern pixel whose board color differs, in pattern order.
    Pixels that land outside the board are dropped with a diagnostic.
    """
    out: List[Correction] = []
    for p in spec.pattern:
        x = spec.origin_x + p.dx
        y = spec.origin_y + p.dy
        if not board.in_bounds(x, y):
            _log.error("Pattern point (%d, %d) out of bounds%s", x, y, f" in {spec.name}" if spec.name else "")
            continue
        current = board.color_at(x, y)
        if current == p.color_id:
            _log.debug("Pixel at (%d, %d) already has correct color %d", x, y, p.color_id)
            continue
        out.append(Correction(x=x, y=y, color_id=p.color_id))
    return out
