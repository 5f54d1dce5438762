"""
Shared fixtures. HTTP goes to an in-process fake canvas server; every sleep is recorded, never slept.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from fakeplace import FakePlace, create_app
from placebot.client import PlaceClient
from placebot.cooldown import CooldownCalculator
from placebot.credentials import SessionCredentials
from placebot.placer import PixelPlacer

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
BASE_URL = "http://testserver"


class FakeClock:
    def __init__(self, start: datetime = NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def fake() -> FakePlace:
    return FakePlace(raw=[[0] * 5 for _ in range(5)])


@pytest.fixture
def http(fake) -> TestClient:
    return TestClient(create_app(fake))


@pytest.fixture
def client(http, sleeps) -> PlaceClient:
    return PlaceClient(
        base_url=BASE_URL,
        session=http,
        fetch_max_retries=3,
        fetch_retry_delay=120,
        sleep=sleeps.append,
    )


@pytest.fixture
def credentials() -> SessionCredentials:
    return SessionCredentials(refresh_token="refresh-0", token="token-0")


@pytest.fixture
def placer(client, credentials, clock, sleeps) -> PixelPlacer:
    return PixelPlacer(
        client,
        credentials,
        cooldown=CooldownCalculator(fallback=timedelta(minutes=31), clock=clock),
        max_attempts=3,
        retry_delay=0.5,
        sleep=sleeps.append,
    )
