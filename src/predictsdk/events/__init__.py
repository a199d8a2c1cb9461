"""Domain events and the per-SDK emitter."""

from predictsdk.events.emitter import EventCallback, EventEmitter
from predictsdk.events.types import (
    EVENT_TYPES,
    BetConfirmed,
    BetLost,
    BetPlaced,
    BetRefunded,
    BetWon,
    EventType,
    MarketCancelled,
    MarketClosed,
    MarketCreated,
    MarketResolved,
    MarketUpdated,
    SDKEvent,
    UserBalanceChanged,
    UserCreated,
)

__all__ = [
    "EVENT_TYPES",
    "EventCallback",
    "EventEmitter",
    "EventType",
    "SDKEvent",
    "MarketCreated",
    "MarketUpdated",
    "MarketClosed",
    "MarketResolved",
    "MarketCancelled",
    "BetPlaced",
    "BetConfirmed",
    "BetWon",
    "BetLost",
    "BetRefunded",
    "UserCreated",
    "UserBalanceChanged",
]
