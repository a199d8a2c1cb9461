"""Domain event payloads, discriminated by `type`."""

from __future__ import annotations

from typing import Annotated, Final, Literal, Union

from pydantic import BaseModel, Field

from predictsdk.models import Bet, Market, User


class MarketCreated(BaseModel):
    type: Literal["market:created"] = "market:created"
    market: Market


class MarketUpdated(BaseModel):
    type: Literal["market:updated"] = "market:updated"
    market: Market


class MarketClosed(BaseModel):
    type: Literal["market:closed"] = "market:closed"
    market: Market


class MarketResolved(BaseModel):
    type: Literal["market:resolved"] = "market:resolved"
    market: Market
    winning_outcome_id: str


class MarketCancelled(BaseModel):
    type: Literal["market:cancelled"] = "market:cancelled"
    market: Market


class BetPlaced(BaseModel):
    type: Literal["bet:placed"] = "bet:placed"
    bet: Bet
    market: Market


class BetConfirmed(BaseModel):
    type: Literal["bet:confirmed"] = "bet:confirmed"
    bet: Bet
    market: Market


class BetWon(BaseModel):
    type: Literal["bet:won"] = "bet:won"
    bet: Bet
    market: Market


class BetLost(BaseModel):
    type: Literal["bet:lost"] = "bet:lost"
    bet: Bet
    market: Market


class BetRefunded(BaseModel):
    type: Literal["bet:refunded"] = "bet:refunded"
    bet: Bet
    market: Market


class UserCreated(BaseModel):
    type: Literal["user:created"] = "user:created"
    user: User


class UserBalanceChanged(BaseModel):
    type: Literal["user:balanceChanged"] = "user:balanceChanged"
    user: User
    balance: float


SDKEvent = Annotated[
    Union[
        MarketCreated,
        MarketUpdated,
        MarketClosed,
        MarketResolved,
        MarketCancelled,
        BetPlaced,
        BetConfirmed,
        BetWon,
        BetLost,
        BetRefunded,
        UserCreated,
        UserBalanceChanged,
    ],
    Field(discriminator="type"),
]

EventType = Literal[
    "market:created",
    "market:updated",
    "market:closed",
    "market:resolved",
    "market:cancelled",
    "bet:placed",
    "bet:confirmed",
    "bet:won",
    "bet:lost",
    "bet:refunded",
    "user:created",
    "user:balanceChanged",
]

EVENT_TYPES: Final[tuple[str, ...]] = EventType.__args__
