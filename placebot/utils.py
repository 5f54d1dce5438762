"""
Shared helpers: clock, duration formatting, secret masking.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_duration(d: timedelta) -> str:
    total = max(0, int(d.total_seconds()))
    return f"{total // 60}m {total % 60}s"


def min_duration(a: Optional[timedelta], b: Optional[timedelta]) -> Optional[timedelta]:
    """Tightest of two optional waits; None means 'no constraint observed'."""
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)


def mask_secret(s: str, keep: int = 6) -> str:
    s = s or ""
    if len(s) <= keep:
        return "*" * len(s)
    return s[:keep] + "..."
