"""Precondition checks run before any mutation. Each raises PredictSDKError with a distinct code."""

from __future__ import annotations

import math

from predictsdk.errors import ErrorCode, PredictSDKError
from predictsdk.models import (
    CreateMarketInput,
    Market,
    MarketStatus,
    OutcomeSpec,
    PlaceBetInput,
    ResolveMarketInput,
)
from predictsdk.utils.clock import now_ms

MAX_FEE_RATE = 0.5


def _config_error(message: str) -> PredictSDKError:
    return PredictSDKError(ErrorCode.INVALID_CONFIG, message)


def _input_error(message: str) -> PredictSDKError:
    return PredictSDKError(ErrorCode.INVALID_INPUT, message)


def validate_create_market_input(data: CreateMarketInput, now: int | None = None) -> None:
    if not data.question or not data.question.strip():
        raise _config_error("Question is required and must be a non-empty string")

    if len(data.outcomes) < 2:
        raise _config_error("At least 2 outcomes are required")

    labels = [o if isinstance(o, str) else o.label for o in data.outcomes]
    if any(not label.strip() for label in labels):
        raise _config_error("Outcome labels must be non-empty")

    explicit_ids = [o.id for o in data.outcomes if isinstance(o, OutcomeSpec) and o.id]
    if len(explicit_ids) != len(set(explicit_ids)):
        raise _config_error("Outcome ids must be unique")

    now = now_ms() if now is None else now
    if data.closes_at_ms <= now:
        raise _config_error("closes_at must be a valid future timestamp")

    if data.fee_rate is not None and not (0 <= data.fee_rate <= MAX_FEE_RATE):
        raise _config_error(f"fee_rate must be a number between 0 and {MAX_FEE_RATE}")

    if data.min_bet is not None and data.max_bet is not None and data.min_bet > data.max_bet:
        raise _config_error("min_bet must be less than or equal to max_bet")

    if data.min_bet is not None and data.min_bet < 0:
        raise _config_error("min_bet must be non-negative")

    if data.max_bet is not None and data.max_bet < 0:
        raise _config_error("max_bet must be non-negative")


def validate_place_bet(data: PlaceBetInput, market: Market, now: int | None = None) -> None:
    if market.status != MarketStatus.OPEN:
        raise _input_error(f"Market is not open (status {market.status.value})")

    now = now_ms() if now is None else now
    if now > market.closes_at:
        raise _input_error("Market is past its close time")

    if market.get_outcome(data.outcome_id) is None:
        raise _input_error(f"Outcome {data.outcome_id} not found")

    validate_amount(data.amount)

    if market.min_bet is not None and data.amount < market.min_bet:
        raise _input_error(f"Amount must be greater than or equal to {market.min_bet}")

    if market.max_bet is not None and data.amount > market.max_bet:
        raise _input_error(f"Amount must be less than or equal to {market.max_bet}")

    if market.allowed_bettors is not None and data.bettor_id not in market.allowed_bettors:
        raise _input_error(f"Bettor {data.bettor_id} is not allowed to bet on this market")


def validate_resolve_market(data: ResolveMarketInput, market: Market) -> None:
    """Market must still be open or closed, and the winning outcome must be one of its outcomes."""
    if market.is_terminal:
        raise PredictSDKError(
            ErrorCode.CONFLICT,
            f"Market {market.id} is already {market.status.value}",
        )

    if market.get_outcome(data.winning_outcome_id) is None:
        raise _input_error(f"Outcome {data.winning_outcome_id} not found")


def validate_amount(amount: float) -> None:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise _input_error("Amount must be a number")
    if not math.isfinite(amount) or amount <= 0:
        raise _input_error("Amount must be a positive number")
