"""
Top-level driver: fetch -> schedule -> place whenever a cycle is due, idle otherwise.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from placebot import config
from placebot.client import PlaceClient
from placebot.exporter import TIMESTAMP_FORMAT, SnapshotExporter
from placebot.models import CycleReport, PatternSpec
from placebot.placer import PixelPlacer
from placebot.scheduler import order_by_priority, run_batch
from placebot.utils import format_duration, utcnow

_log = logging.getLogger(__name__)


class ControlLoop:
    def __init__(
        self,
        client: PlaceClient,
        placer: PixelPlacer,
        patterns: Sequence[PatternSpec],
        exporter: Optional[SnapshotExporter] = None,
        budget: int = config.MAX_PIXELS_PER_BATCH,
        default_delay: Optional[timedelta] = None,
        poll_interval: float = config.POLL_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.placer = placer
        self.patterns: List[PatternSpec] = order_by_priority(patterns)
        self.exporter = exporter
        self.budget = budget
        self.default_delay = default_delay if default_delay is not None else timedelta(minutes=config.BATCH_DELAY_MINUTES)
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep
        self.next_due = clock()

    def run_cycle(self) -> CycleReport:
        palette, board = self.client.get_board()
        if self.exporter is not None:
            self.exporter.export(palette, board, self.clock().astimezone().strftime(TIMESTAMP_FORMAT))

        result = run_batch(self.placer, board, self.patterns, self.budget)
        wait = result.cooldown if result.cooldown is not None else self.default_delay
        self.next_due = self.clock() + wait
        _log.info("Next cycle in %s", format_duration(wait))
        return CycleReport(placed=result.placed, cooldown=result.cooldown, next_due=self.next_due)

    def tick(self) -> Optional[CycleReport]:
        """Run a cycle if one is due, otherwise sleep one poll interval. Returns the report or None."""
        now = self.clock()
        if now >= self.next_due:
            return self.run_cycle()
        remaining = self.next_due - now
        _log.info("Remaining time: %s", format_duration(remaining))
        self.sleep(min(self.poll_interval, max(remaining.total_seconds(), 0.0)))
        return None

    def run_forever(self) -> None:
        _log.info("Starting control loop with %d pattern(s), budget %d per cycle", len(self.patterns), self.budget)
        while True:
            self.tick()
