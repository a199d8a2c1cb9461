"""Market, Outcome - canonical entities."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MarketStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"


class OutcomeType(str, Enum):
    BINARY = "binary"
    MULTIPLE = "multiple"
    SCALAR = "scalar"


class Outcome(BaseModel):
    """Single outcome bettors can back. odds/probability are derived, recomputed on read."""

    id: str
    label: str
    total_bets: float = Field(0.0, ge=0, description="Cumulative stake on this outcome")
    bet_count: int = Field(0, ge=0)
    odds: float = 0.0
    probability: float = 0.0


class Market(BaseModel):
    """Parimutuel market. total_pool == sum of non-refunded bet amounts."""

    id: str
    app_id: str
    question: str
    description: str | None = None
    outcomes: list[Outcome] = Field(default_factory=list)
    outcome_type: OutcomeType = OutcomeType.BINARY
    status: MarketStatus = MarketStatus.OPEN
    total_pool: float = 0.0
    fee_rate: float = 0.0
    created_at: int  # ms epoch
    closes_at: int  # ms epoch
    resolved_at: int | None = None  # ms epoch
    winning_outcome_id: str | None = None
    metadata: dict[str, Any] | None = None
    allowed_bettors: list[str] | None = None
    min_bet: float | None = None
    max_bet: float | None = None

    def get_outcome(self, outcome_id: str) -> Outcome | None:
        for outcome in self.outcomes:
            if outcome.id == outcome_id:
                return outcome
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status in (MarketStatus.RESOLVED, MarketStatus.CANCELLED)


class OutcomeStats(BaseModel):
    id: str
    label: str
    total_bets: float
    bet_count: int
    odds: float
    probability: float


class MarketStats(BaseModel):
    """Aggregate view of one market with live odds."""

    total_pool: float
    total_bets: int
    outcome_stats: list[OutcomeStats] = Field(default_factory=list)
