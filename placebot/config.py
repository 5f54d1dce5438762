"""
Centralized configuration: environment variables, paths, and constants.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

_log = logging.getLogger(__name__)

PLACE_BASE_URL = (os.getenv("PLACE_BASE_URL", "https://ftplace.42lwatch.ch") or "").strip().rstrip("/")
BOARD_SIZE = int(os.getenv("BOARD_SIZE", "250"))

MAX_PIXELS_PER_BATCH = int(os.getenv("MAX_PIXELS_PER_BATCH", "10"))
BATCH_DELAY_MINUTES = float(os.getenv("BATCH_DELAY_MINUTES", "31"))

# Board fetch: connection errors and 5xx.
FETCH_MAX_RETRIES = int(os.getenv("FETCH_MAX_RETRIES", "10"))
FETCH_RETRY_DELAY_SECONDS = float(os.getenv("FETCH_RETRY_DELAY_SECONDS", "120"))

# Pixel placement: per cell, per cycle.
PLACE_MAX_ATTEMPTS = int(os.getenv("PLACE_MAX_ATTEMPTS", "3"))
PLACE_RETRY_DELAY_SECONDS = float(os.getenv("PLACE_RETRY_DELAY_SECONDS", "0.5"))

POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "10"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

MAP_DIR = Path(os.getenv("MAP_DIR", "map"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").strip().upper()

PLACE_REFRESH_TOKEN = os.getenv("PLACE_REFRESH_TOKEN", "").strip()
PLACE_TOKEN = os.getenv("PLACE_TOKEN", "").strip()

USER_AGENT = os.getenv("PLACE_USER_AGENT", "placebot/0.1").strip()


def validate_config() -> None:
    """Log warnings for missing/suspicious configuration. Called once at startup."""
    if not PLACE_BASE_URL.startswith(("http://", "https://")):
        _log.warning("PLACE_BASE_URL '%s' has no http(s) scheme; requests will fail.", PLACE_BASE_URL)
    if MAX_PIXELS_PER_BATCH <= 0:
        _log.warning(
            "MAX_PIXELS_PER_BATCH=%d - no pixel will ever be placed.", MAX_PIXELS_PER_BATCH
        )
    if PLACE_MAX_ATTEMPTS <= 0:
        _log.warning("PLACE_MAX_ATTEMPTS=%d - every placement will be abandoned.", PLACE_MAX_ATTEMPTS)
    if BATCH_DELAY_MINUTES < 1:
        _log.warning(
            "BATCH_DELAY_MINUTES=%s is shorter than any known server cooldown.", BATCH_DELAY_MINUTES
        )
    if FETCH_RETRY_DELAY_SECONDS < 1:
        _log.warning(
            "FETCH_RETRY_DELAY_SECONDS=%s - board fetch retries will hammer the server.", FETCH_RETRY_DELAY_SECONDS
        )
