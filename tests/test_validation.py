"""Precondition checks and their error codes."""

from datetime import datetime, timedelta, timezone

import pytest

from predictsdk.errors import ErrorCode, PredictSDKError
from predictsdk.models import CreateMarketInput, MarketStatus, OutcomeSpec, PlaceBetInput, ResolveMarketInput
from predictsdk.utils.validation import (
    validate_amount,
    validate_create_market_input,
    validate_place_bet,
    validate_resolve_market,
)
from tests.conftest import HOUR_MS, T0, make_market


def _create(**overrides) -> CreateMarketInput:
    data = dict(question="Will it rain?", outcomes=["Yes", "No"], closes_at=T0 + HOUR_MS)
    data.update(overrides)
    return CreateMarketInput(**data)


def _bet(**overrides) -> PlaceBetInput:
    data = dict(market_id="mkt_test", bettor_id="alice", outcome_id="A", amount=10)
    data.update(overrides)
    return PlaceBetInput(**data)


def _code(fn, *args, **kwargs) -> ErrorCode:
    with pytest.raises(PredictSDKError) as exc:
        fn(*args, **kwargs)
    return exc.value.code


def test_valid_create_input_passes():
    validate_create_market_input(_create(), now=T0)


def test_create_accepts_future_datetime():
    closes = datetime.fromtimestamp(T0 / 1000, tz=timezone.utc) + timedelta(days=1)
    validate_create_market_input(_create(closes_at=closes), now=T0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"question": ""},
        {"question": "   "},
        {"outcomes": ["Only"]},
        {"outcomes": []},
        {"outcomes": ["Yes", " "]},
        {"outcomes": [OutcomeSpec(id="x", label="Yes"), OutcomeSpec(id="x", label="No")]},
        {"closes_at": T0},
        {"closes_at": T0 - 1},
        {"fee_rate": 0.6},
        {"fee_rate": -0.01},
        {"min_bet": 10, "max_bet": 5},
        {"min_bet": -1},
        {"max_bet": -1},
    ],
)
def test_invalid_create_input(overrides):
    assert _code(validate_create_market_input, _create(**overrides), now=T0) == ErrorCode.INVALID_CONFIG


def test_fee_rate_bounds_inclusive():
    validate_create_market_input(_create(fee_rate=0), now=T0)
    validate_create_market_input(_create(fee_rate=0.5), now=T0)


def test_valid_bet_passes():
    validate_place_bet(_bet(), make_market({"A": 0, "B": 0}), now=T0)


@pytest.mark.parametrize(
    "bet_overrides,market_overrides,now",
    [
        ({}, {"status": MarketStatus.CLOSED}, T0),
        ({}, {"status": MarketStatus.RESOLVED}, T0),
        ({}, {}, T0 + HOUR_MS + 1),
        ({"outcome_id": "Z"}, {}, T0),
        ({"amount": 0}, {}, T0),
        ({"amount": -5}, {}, T0),
        ({"amount": 4}, {"min_bet": 5}, T0),
        ({"amount": 51}, {"max_bet": 50}, T0),
        ({"bettor_id": "mallory"}, {"allowed_bettors": ["alice", "bob"]}, T0),
    ],
)
def test_invalid_bet(bet_overrides, market_overrides, now):
    market = make_market({"A": 0, "B": 0}, **market_overrides)
    assert _code(validate_place_bet, _bet(**bet_overrides), market, now=now) == ErrorCode.INVALID_INPUT


def test_bet_at_exact_close_time_is_accepted():
    validate_place_bet(_bet(), make_market({"A": 0, "B": 0}), now=T0 + HOUR_MS)


def test_bet_limits_inclusive():
    market = make_market({"A": 0, "B": 0}, min_bet=5, max_bet=50)
    validate_place_bet(_bet(amount=5), market, now=T0)
    validate_place_bet(_bet(amount=50), market, now=T0)


def test_allowlisted_bettor_passes():
    market = make_market({"A": 0, "B": 0}, allowed_bettors=["alice"])
    validate_place_bet(_bet(), market, now=T0)


def test_resolve_open_or_closed_market():
    data = ResolveMarketInput(market_id="mkt_test", winning_outcome_id="A")
    validate_resolve_market(data, make_market({"A": 1, "B": 1}))
    validate_resolve_market(data, make_market({"A": 1, "B": 1}, status=MarketStatus.CLOSED))


@pytest.mark.parametrize("status", [MarketStatus.RESOLVED, MarketStatus.CANCELLED])
def test_resolve_terminal_market_conflicts(status):
    data = ResolveMarketInput(market_id="mkt_test", winning_outcome_id="A")
    market = make_market({"A": 1, "B": 1}, status=status)
    assert _code(validate_resolve_market, data, market) == ErrorCode.CONFLICT


def test_resolve_unknown_outcome():
    data = ResolveMarketInput(market_id="mkt_test", winning_outcome_id="Z")
    assert _code(validate_resolve_market, data, make_market({"A": 1, "B": 1})) == ErrorCode.INVALID_INPUT


@pytest.mark.parametrize("amount", [0, -1, float("nan"), float("inf"), True, "10"])
def test_validate_amount_rejects(amount):
    assert _code(validate_amount, amount) == ErrorCode.INVALID_INPUT


def test_error_shape():
    err = PredictSDKError(ErrorCode.CONFLICT, "nope", details={"x": 1})
    assert err.to_dict() == {"code": "CONFLICT", "message": "nope", "details": {"x": 1}}
    assert str(err) == "[CONFLICT] nope"
    assert PredictSDKError("MARKET_NOT_FOUND", "m").code is ErrorCode.MARKET_NOT_FOUND
