"""Bet - a stake on one outcome of a market."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BetStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    WON = "won"
    LOST = "lost"
    REFUNDED = "refunded"


class Bet(BaseModel):
    """Immutable except status/payout, which change at resolution or cancellation."""

    id: str
    market_id: str
    bettor_id: str
    outcome_id: str
    amount: float = Field(..., gt=0)
    potential_payout: float = 0.0
    status: BetStatus = BetStatus.CONFIRMED
    payout: float | None = None
    odds_at_bet: float = 0.0
    created_at: int  # ms epoch
