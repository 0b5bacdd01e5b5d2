"""Fixtures for crypto price tests."""

import time

import pytest

from app.crypto.aggregator import PriceAggregator


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now_ms: int) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_707_580_800_000)


@pytest.fixture
def aggregator(clock: FakeClock) -> PriceAggregator:
    return PriceAggregator(clock=clock)


@pytest.fixture
def now_ms() -> int:
    return int(time.time() * 1000)
