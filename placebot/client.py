"""
HTTP client for the canvas server: board snapshots (GET /api/get) and single placements (POST /api/set).

The session is anything with a requests-style get/post (a requests.Session in production,
a FastAPI TestClient in tests). Responses are classified here, at the deserialization
boundary, so callers never look at status codes or message text.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Tuple

import requests
from pydantic import ValidationError

from placebot import config
from placebot.board import Board
from placebot.credentials import SessionCredentials
from placebot.errors import BoardFetchError, PlacementError
from placebot.models import (
    BoardPayload,
    Color,
    Palette,
    PlacementOutcome,
    PlacementResponse,
    SetPixelPayload,
    SetPixelResponsePayload,
)

_log = logging.getLogger(__name__)

CREDENTIALS_EXPIRED_STATUS = 426
TOO_EARLY_MESSAGE = "Too early"


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def decode_set_response(text: str) -> Optional[SetPixelResponsePayload]:
    if not (text or "").strip():
        return None
    try:
        return SetPixelResponsePayload.model_validate_json(text)
    except ValidationError:
        return None


def classify_set_response(response: Any) -> PlacementResponse:
    """Map one /api/set response onto a PlacementOutcome; unexpected ones raise PlacementError."""
    status = int(response.status_code)

    if status == CREDENTIALS_EXPIRED_STATUS:
        return PlacementResponse(
            outcome=PlacementOutcome.NEEDS_REFRESH,
            status_code=status,
            token=response.cookies.get("token"),
            refresh_token=response.cookies.get("refresh"),
        )

    payload = decode_set_response(response.text)

    if _is_success(status):
        return PlacementResponse(
            outcome=PlacementOutcome.SUCCESS,
            status_code=status,
            timers=list(payload.timers) if payload else [],
            message=(payload.message or "") if payload else "",
        )

    if payload is not None and payload.message == TOO_EARLY_MESSAGE:
        return PlacementResponse(
            outcome=PlacementOutcome.RATE_LIMITED,
            status_code=status,
            timers=list(payload.timers),
            message=payload.message,
        )

    raise PlacementError(
        f"Request failed with status: {status} - {(response.text or '')[:200]}",
        status_code=status,
    )


class PlaceClient:
    def __init__(
        self,
        base_url: str = config.PLACE_BASE_URL,
        session: Any = None,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        fetch_max_retries: int = config.FETCH_MAX_RETRIES,
        fetch_retry_delay: float = config.FETCH_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.fetch_max_retries = fetch_max_retries
        self.fetch_retry_delay = fetch_retry_delay
        self.sleep = sleep
        _log.info("HTTP client initialized for %s", self.base_url)

    # --- board snapshot ---

    def _backoff(self, retries: int, reason: str) -> int:
        if retries >= self.fetch_max_retries:
            _log.error("Max retries (%d) reached fetching the board: %s", self.fetch_max_retries, reason)
            raise BoardFetchError(f"Failed to fetch board after {self.fetch_max_retries} retries: {reason}")
        retries += 1
        _log.warning(
            "%s (attempt %d/%d), waiting %s seconds before retry",
            reason, retries, self.fetch_max_retries, self.fetch_retry_delay,
        )
        self.sleep(self.fetch_retry_delay)
        return retries

    def get_board(self) -> Tuple[Palette, Board]:
        """Fetch palette + canonical board. Connection errors and 5xx are retried with a fixed delay."""
        url = f"{self.base_url}/api/get"
        retries = 0
        while True:
            _log.debug("Requesting board from URL: %s?type=board", url)
            try:
                r = self.session.get(url, params={"type": "board"}, timeout=self.timeout)
            except requests.RequestException as e:
                retries = self._backoff(retries, f"Connection error: {e}")
                continue

            _log.debug("Response status: %s", r.status_code)
            if r.status_code >= 500:
                retries = self._backoff(retries, f"Received {r.status_code} from board endpoint")
                continue
            if not _is_success(r.status_code):
                raise BoardFetchError(f"Board request failed with status: {r.status_code}")

            try:
                payload = BoardPayload.model_validate_json(r.text)
                palette = {
                    c.id: Color(id=c.id, name=c.name, red=c.red, green=c.green, blue=c.blue)
                    for c in payload.colors
                }
                board = Board.from_server([[cell.color_id for cell in row] for row in payload.board])
            except ValueError as e:
                raise BoardFetchError(f"Malformed board response: {e}") from e

            _log.debug("Loaded %d color definitions", len(palette))
            if board.size != config.BOARD_SIZE:
                _log.warning("Board is %dx%d, expected %d", board.size, board.size, config.BOARD_SIZE)
            _log.info("Board matrix constructed successfully")
            return palette, board

    # --- placement ---

    def send_placement(self, credentials: SessionCredentials, x: int, y: int, color_id: int) -> PlacementResponse:
        """One POST /api/set with the current credentials. Raises PlacementError on failure."""
        url = f"{self.base_url}/api/set"
        body = SetPixelPayload(x=x, y=y, color=str(color_id))
        headers = {
            "Accept": "application/json",
            "Origin": self.base_url,
            "Referer": f"{self.base_url}/?x={x}&y={y}&scale=1",
            "Cookie": credentials.cookie_header(),
            "User-Agent": config.USER_AGENT,
        }
        _log.debug("Placing pixel at (%d, %d) with color id %d", x, y, color_id)
        try:
            r = self.session.post(url, json=body.model_dump(), headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise PlacementError(f"Transport error: {e}") from e
        return classify_set_response(r)
