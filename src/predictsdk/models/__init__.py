"""Canonical schema (Pydantic) - Market, Outcome, Bet, User, inputs, snapshot."""

from predictsdk.models.bet import Bet, BetStatus
from predictsdk.models.inputs import CreateMarketInput, OutcomeSpec, PlaceBetInput, ResolveMarketInput
from predictsdk.models.market import Market, MarketStats, MarketStatus, Outcome, OutcomeStats, OutcomeType
from predictsdk.models.snapshot import StorageSnapshot
from predictsdk.models.user import User

__all__ = [
    "Market",
    "MarketStatus",
    "MarketStats",
    "Outcome",
    "OutcomeStats",
    "OutcomeType",
    "Bet",
    "BetStatus",
    "User",
    "CreateMarketInput",
    "OutcomeSpec",
    "PlaceBetInput",
    "ResolveMarketInput",
    "StorageSnapshot",
]
