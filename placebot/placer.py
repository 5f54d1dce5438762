"""
Place one pixel: a small bounded state machine around PlaceClient.send_placement.

    SENDING -> SUCCESS        placed; timers (if any) give the next cooldown
    SENDING -> NEEDS_REFRESH  credentials replaced in place, same cell re-sent, nothing counted
    SENDING -> RATE_LIMITED   cell left for next cycle, cooldown reported
    SENDING -> FAILED         counted; re-sent after a short delay until attempts run out
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from placebot import config
from placebot.client import PlaceClient
from placebot.cooldown import CooldownCalculator
from placebot.credentials import SessionCredentials
from placebot.errors import PlacementError
from placebot.models import Correction, PlacementOutcome, PlacementReport
from placebot.utils import format_duration

_log = logging.getLogger(__name__)


class PixelPlacer:
    def __init__(
        self,
        client: PlaceClient,
        credentials: SessionCredentials,
        cooldown: Optional[CooldownCalculator] = None,
        max_attempts: int = config.PLACE_MAX_ATTEMPTS,
        retry_delay: float = config.PLACE_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.credentials = credentials
        self.cooldown = cooldown or CooldownCalculator()
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.sleep = sleep

    def place(self, cell: Correction) -> PlacementReport:
        failures = 0
        refreshes = 0
        while True:
            try:
                resp = self.client.send_placement(self.credentials, cell.x, cell.y, cell.color_id)
            except PlacementError as e:
                failures += 1
                _log.error("Failed to place pixel at (%d, %d): %s", cell.x, cell.y, e)
                if failures >= self.max_attempts:
                    _log.error("Max retries reached for pixel (%d, %d), skipping", cell.x, cell.y)
                    return PlacementReport(
                        placed=False, cooldown=None, state=PlacementOutcome.FAILED,
                        failures=failures, refreshes=refreshes,
                    )
                self.sleep(self.retry_delay)
                continue

            if resp.outcome is PlacementOutcome.NEEDS_REFRESH:
                _log.info("Token refresh required, retrying with new tokens")
                if self.credentials.refresh(token=resp.token, refresh_token=resp.refresh_token):
                    refreshes += 1
                else:
                    # nothing new to send; do not re-send in a tight loop
                    self.sleep(self.retry_delay)
                continue

            if resp.outcome is PlacementOutcome.RATE_LIMITED:
                wait = self.cooldown.wait_for(resp.timers)
                _log.info("Too early for (%d, %d), waiting %s before retrying", cell.x, cell.y, format_duration(wait))
                return PlacementReport(
                    placed=False, cooldown=wait, state=PlacementOutcome.RATE_LIMITED,
                    failures=failures, refreshes=refreshes,
                )

            wait = self.cooldown.wait_for(resp.timers) if resp.timers else None
            if wait is not None:
                _log.info("Next pixel available in %s", format_duration(wait))
            _log.info("Successfully placed pixel at (%d, %d) with color id %d", cell.x, cell.y, cell.color_id)
            return PlacementReport(
                placed=True, cooldown=wait, state=PlacementOutcome.SUCCESS,
                failures=failures, refreshes=refreshes,
            )
