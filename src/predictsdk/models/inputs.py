"""Operation inputs accepted by the SDK facade (model instance or plain dict)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from predictsdk.models.market import OutcomeType


class OutcomeSpec(BaseModel):
    """Outcome given with an explicit id (otherwise a plain label string is used)."""

    id: str | None = None
    label: str


class CreateMarketInput(BaseModel):
    question: str
    description: str | None = None
    outcomes: list[str | OutcomeSpec] = Field(default_factory=list)
    closes_at: int | datetime  # ms epoch or datetime
    outcome_type: OutcomeType = OutcomeType.BINARY
    fee_rate: float | None = None
    metadata: dict[str, Any] | None = None
    allowed_bettors: list[str] | None = None
    min_bet: float | None = None
    max_bet: float | None = None

    @property
    def closes_at_ms(self) -> int:
        if isinstance(self.closes_at, datetime):
            return int(self.closes_at.timestamp() * 1000)
        return int(self.closes_at)


class PlaceBetInput(BaseModel):
    market_id: str
    bettor_id: str
    outcome_id: str
    amount: float


class ResolveMarketInput(BaseModel):
    market_id: str
    winning_outcome_id: str
    proof: str | dict[str, Any] | None = None
