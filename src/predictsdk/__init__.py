"""predict-sdk - parimutuel prediction-market bookkeeping."""

from predictsdk.config import SDKConfig
from predictsdk.core import PredictSDK
from predictsdk.errors import ErrorCode, PredictSDKError
from predictsdk.events import EVENT_TYPES, EventEmitter
from predictsdk.models import (
    Bet,
    BetStatus,
    CreateMarketInput,
    Market,
    MarketStats,
    MarketStatus,
    Outcome,
    OutcomeType,
    PlaceBetInput,
    ResolveMarketInput,
    StorageSnapshot,
    User,
)
from predictsdk.storage import DuckDBStorage, MemoryStorage, StorageAdapter
from predictsdk.utils.ids import generate_bet_id, generate_market_id, generate_outcome_id
from predictsdk.utils.odds import (
    calculate_odds,
    calculate_payouts,
    calculate_potential_payout,
    format_odds,
    kelly_bet,
)

__version__ = "0.1.0"

__all__ = [
    "PredictSDK",
    "SDKConfig",
    "PredictSDKError",
    "ErrorCode",
    "EventEmitter",
    "EVENT_TYPES",
    "Market",
    "MarketStatus",
    "MarketStats",
    "Outcome",
    "OutcomeType",
    "Bet",
    "BetStatus",
    "User",
    "CreateMarketInput",
    "PlaceBetInput",
    "ResolveMarketInput",
    "StorageSnapshot",
    "StorageAdapter",
    "MemoryStorage",
    "DuckDBStorage",
    "calculate_odds",
    "calculate_potential_payout",
    "calculate_payouts",
    "format_odds",
    "kelly_bet",
    "generate_market_id",
    "generate_bet_id",
    "generate_outcome_id",
]
