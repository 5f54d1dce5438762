"""
Turn server-supplied availability timestamps into a concrete wait.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from pydantic import AwareDatetime, TypeAdapter, ValidationError

from placebot import config
from placebot.utils import format_duration, utcnow

_log = logging.getLogger(__name__)

_TIMESTAMP = TypeAdapter(AwareDatetime)
# Lax datetime parsing also reads bare numbers as Unix time; timers are RFC 3339 only.
_RFC3339_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}")

# Added on top of the measured wait so the server-side cooldown has strictly elapsed.
SAFETY_BUFFER = timedelta(seconds=1)


def parse_timer(raw: object) -> Optional[datetime]:
    """RFC 3339 string -> aware UTC datetime, or None when it does not parse."""
    if not isinstance(raw, str) or not _RFC3339_PREFIX.match(raw.strip()):
        return None
    try:
        return _TIMESTAMP.validate_python(raw).astimezone(timezone.utc)
    except ValidationError:
        return None


class CooldownCalculator:
    """
    Earliest future timer wins: wait = (earliest - now) truncated to whole seconds, plus one.
    With no usable timer the fallback (the default batch interval) is returned; that value is a
    safety net, not a measurement.
    """

    def __init__(
        self,
        fallback: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.fallback = fallback if fallback is not None else timedelta(minutes=config.BATCH_DELAY_MINUTES)
        self.clock = clock

    def wait_for(self, timers: Iterable[object]) -> timedelta:
        now = self.clock()
        earliest: Optional[datetime] = None
        for raw in timers or ():
            ts = parse_timer(raw)
            if ts is None:
                _log.debug("Ignoring unparseable timer %r", raw)
                continue
            _log.info("Pixel will be available at: %s", ts.strftime("%H:%M:%S"))
            if ts <= now:
                continue
            if earliest is None or ts < earliest:
                earliest = ts

        if earliest is None:
            _log.info("No usable timer, falling back to %s", format_duration(self.fallback))
            return self.fallback

        wait = timedelta(seconds=int((earliest - now).total_seconds())) + SAFETY_BUFFER
        _log.info(
            "Current time: %s, target time: %s, need to wait %s",
            now.strftime("%H:%M:%S"),
            earliest.strftime("%H:%M:%S"),
            format_duration(wait),
        )
        return wait
