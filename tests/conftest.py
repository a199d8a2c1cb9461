"""Shared fixtures: fake clock, SDK over memory storage, market builders."""

import asyncio

import pytest

from predictsdk.core import PredictSDK
from predictsdk.models import Market, Outcome
from predictsdk.storage import MemoryStorage

T0 = 1_700_000_000_000  # ms epoch
HOUR_MS = 3_600_000


class FakeClock:
    """Settable ms clock."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def run(coro):
    return asyncio.run(coro)


def make_market(stakes: dict[str, float], fee_rate: float = 0.02, **kwargs) -> Market:
    """Market whose outcome ids/labels are the keys of stakes."""
    outcomes = [
        Outcome(id=label, label=label, total_bets=amount, bet_count=1 if amount else 0)
        for label, amount in stakes.items()
    ]
    defaults = dict(
        id="mkt_test",
        app_id="test-app",
        question="Will it happen?",
        outcomes=outcomes,
        total_pool=sum(stakes.values()),
        fee_rate=fee_rate,
        created_at=T0,
        closes_at=T0 + HOUR_MS,
    )
    defaults.update(kwargs)
    return Market(**defaults)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def sdk(clock, storage):
    return PredictSDK({"app_id": "test-app", "default_fee_rate": 0.02}, storage=storage, clock=clock)


@pytest.fixture
def recorded(sdk):
    """List of every event the sdk emits, in order."""
    events = []
    sdk.on_any(events.append)
    return events
