"""
Spend one shared per-cycle pixel budget across patterns in priority order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, List, Optional

from placebot import config
from placebot.board import Board
from placebot.models import BatchResult, PatternSpec
from placebot.placer import PixelPlacer
from placebot.reconciler import reconcile
from placebot.utils import min_duration

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _BatchState:
    remaining: int
    placed: int = 0
    cooldown: Optional[timedelta] = None


def order_by_priority(specs: Iterable[PatternSpec]) -> List[PatternSpec]:
    """Lower priority first; sorted() is stable so ties keep input order."""
    return sorted(specs, key=lambda s: s.priority)


def _serve_pattern(placer: PixelPlacer, board: Board, spec: PatternSpec, state: _BatchState) -> _BatchState:
    corrections = reconcile(board, spec)
    _log.info(
        "Pattern %s (priority %d): %d pixel(s) to fix, budget %d",
        spec.name or "<unnamed>", spec.priority, len(corrections), state.remaining,
    )
    remaining, placed, cooldown = state.remaining, state.placed, state.cooldown
    for cell in corrections:
        if remaining <= 0:
            break
        report = placer.place(cell)
        cooldown = min_duration(cooldown, report.cooldown)
        if report.placed:
            remaining -= 1
            placed += 1
    return _BatchState(remaining=remaining, placed=placed, cooldown=cooldown)


def run_batch(
    placer: PixelPlacer,
    board: Board,
    specs: Iterable[PatternSpec],
    budget: int = config.MAX_PIXELS_PER_BATCH,
) -> BatchResult:
    """
    Fold over the priority-ordered patterns carrying (remaining budget, tightest cooldown).
    Only successful placements consume budget. A rate limit on one pattern does not stop
    lower-priority patterns from getting their turn.
    """
    state = _BatchState(remaining=max(0, budget))
    for spec in order_by_priority(specs):
        if state.remaining <= 0:
            _log.info("Pixel budget exhausted, skipping remaining patterns")
            break
        state = _serve_pattern(placer, board, spec, state)

    _log.info("Placed %d pixels in total this batch", state.placed)
    return BatchResult(placed=state.placed, cooldown=state.cooldown)
