"""
Session credentials: one mutable token pair per run, refreshed in place when the server says so.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from placebot.utils import mask_secret

_log = logging.getLogger(__name__)


@dataclass
class SessionCredentials:
    refresh_token: str
    token: str
    refresh_count: int = 0

    def cookie_header(self) -> str:
        return f"refresh={self.refresh_token}; token={self.token}"

    def refresh(self, token: Optional[str] = None, refresh_token: Optional[str] = None) -> bool:
        """
        Overwrite whichever values the expiry response delivered; missing ones are kept.
        Returns False (and counts nothing) when the response delivered nothing new.
        """
        changed = False
        if token and token != self.token:
            self.token = token
            changed = True
        if refresh_token and refresh_token != self.refresh_token:
            self.refresh_token = refresh_token
            changed = True
        if not changed:
            _log.warning("Expiry response carried no new token/refresh cookies; retrying with current pair")
            return False
        self.refresh_count += 1
        _log.debug(
            "New tokens: refresh=%s, token=%s",
            mask_secret(self.refresh_token),
            mask_secret(self.token),
        )
        return True

    def __repr__(self) -> str:
        return (
            f"SessionCredentials(refresh_token={mask_secret(self.refresh_token)!r}, "
            f"token={mask_secret(self.token)!r}, refresh_count={self.refresh_count})"
        )
