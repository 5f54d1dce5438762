"""Tests for the shared credential pair."""
from __future__ import annotations

from placebot.credentials import SessionCredentials


def test_cookie_header():
    c = SessionCredentials(refresh_token="R", token="T")
    assert c.cookie_header() == "refresh=R; token=T"


def test_refresh_updates_in_place():
    c = SessionCredentials(refresh_token="R", token="T")
    same = c
    c.refresh(token="T2", refresh_token="R2")
    assert same is c
    assert (c.refresh_token, c.token) == ("R2", "T2")
    assert c.refresh_count == 1


def test_partial_refresh_keeps_missing_value():
    c = SessionCredentials(refresh_token="R", token="T")
    assert c.refresh(token="T2") is True
    assert (c.refresh_token, c.token) == ("R", "T2")
    assert c.refresh_count == 1


def test_refresh_without_new_values_is_not_counted(caplog):
    c = SessionCredentials(refresh_token="R", token="T")
    with caplog.at_level("WARNING", logger="placebot.credentials"):
        assert c.refresh() is False
        assert c.refresh(token="T", refresh_token="R") is False
    assert (c.refresh_token, c.token) == ("R", "T")
    assert c.refresh_count == 0
    assert len([r for r in caplog.records if r.levelname == "WARNING"]) == 2


def test_repr_masks_tokens():
    c = SessionCredentials(refresh_token="a-very-long-refresh-token", token="a-very-long-access-token")
    assert "a-very-long-refresh-token" not in repr(c)
    assert "a-very-long-access-token" not in repr(c)
