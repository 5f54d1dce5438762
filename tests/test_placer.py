"""Tests for the single-pixel placement state machine."""
from __future__ import annotations

from datetime import timedelta

from placebot.models import Correction, PlacementOutcome
from fakeplace import SetReply

CELL = Correction(x=1, y=2, color_id=3)


def test_success_without_timers(placer, fake, sleeps):
    report = placer.place(CELL)
    assert report.placed is True
    assert report.state is PlacementOutcome.SUCCESS
    assert report.cooldown is None
    assert report.failures == 0
    assert len(fake.set_calls) == 1
    assert sleeps == []


def test_success_records_next_cooldown(placer, fake):
    fake.set_replies = [SetReply("ok", timers=["2025-01-01T12:00:40Z"])]
    report = placer.place(CELL)
    assert report.placed is True
    assert report.cooldown == timedelta(seconds=41)


def test_expiry_refreshes_and_retries_same_cell(placer, fake, credentials, sleeps):
    fake.set_replies = [SetReply("expired", token="token-1", refresh="refresh-1"), SetReply("ok")]
    report = placer.place(CELL)

    assert report.placed is True
    assert report.failures == 0
    assert report.refreshes == 1
    assert (credentials.refresh_token, credentials.token) == ("refresh-1", "token-1")
    assert credentials.refresh_count == 1
    assert [c["body"] for c in fake.set_calls] == [{"x": 1, "y": 2, "color": "3"}] * 2
    assert fake.set_calls[1]["cookies"] == {"refresh": "refresh-1", "token": "token-1"}
    assert sleeps == []


def test_repeated_expiry_never_exhausts_attempts(placer, fake):
    fake.set_replies = [SetReply("expired", token=f"t{i}", refresh=f"r{i}") for i in range(5)] + [SetReply("ok")]
    report = placer.place(CELL)
    assert report.placed is True
    assert report.refreshes == 5
    assert report.failures == 0


def test_rate_limited_reports_cooldown_without_error(placer, fake, sleeps):
    fake.set_replies = [SetReply("too_early", timers=["2025-01-01T12:01:00Z", "bogus"])]
    report = placer.place(CELL)
    assert report.placed is False
    assert report.state is PlacementOutcome.RATE_LIMITED
    assert report.cooldown == timedelta(seconds=61)
    assert report.failures == 0
    assert len(fake.set_calls) == 1
    assert sleeps == []


def test_rate_limited_without_timers_uses_fallback(placer, fake):
    fake.set_replies = [SetReply("too_early")]
    report = placer.place(CELL)
    assert report.cooldown == timedelta(minutes=31)


def test_failures_are_bounded(placer, fake, sleeps):
    fake.set_replies = [SetReply("error", status=500)] * 5
    report = placer.place(CELL)
    assert report.placed is False
    assert report.state is PlacementOutcome.FAILED
    assert report.cooldown is None
    assert report.failures == 3
    assert len(fake.set_calls) == 3
    assert sleeps == [0.5, 0.5]


def test_failure_then_success(placer, fake, sleeps):
    fake.set_replies = [SetReply("garbage", status=502), SetReply("ok")]
    report = placer.place(CELL)
    assert report.placed is True
    assert report.failures == 1
    assert sleeps == [0.5]


def test_expiry_does_not_reset_failure_count(placer, fake):
    fake.set_replies = [
        SetReply("error", status=400),
        SetReply("expired", token="t1", refresh="r1"),
        SetReply("error", status=400),
        SetReply("error", status=400),
    ]
    report = placer.place(CELL)
    assert report.state is PlacementOutcome.FAILED
    assert report.failures == 3
    assert report.refreshes == 1


def test_expiry_without_new_cookies_waits_and_is_not_a_refresh(placer, fake, credentials, sleeps, caplog):
    fake.set_replies = [SetReply("expired"), SetReply("expired"), SetReply("ok")]
    with caplog.at_level("WARNING", logger="placebot.credentials"):
        report = placer.place(CELL)
    assert report.placed is True
    assert report.refreshes == 0
    assert report.failures == 0
    assert credentials.refresh_count == 0
    assert (credentials.refresh_token, credentials.token) == ("refresh-0", "token-0")
    assert sleeps == [0.5, 0.5]
    assert len([r for r in caplog.records if r.levelname == "WARNING"]) == 2
