"""Parimutuel odds and payout math.

Every function here is pure: no I/O, no logging, no storage access.

Terminology:

* ``pool``        - sum of all stakes on the market.
* ``payout pool`` - ``pool * (1 - fee_rate)``, the amount shared among winners.
* ``odds``        - decimal odds, payout pool per unit staked on an outcome.

Rounding is half-up at the stated number of decimal places, so ``0.125``
rounds to ``0.13`` rather than to the nearest even digit.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Final, Protocol

from predictsdk.models.market import Market, Outcome

#: Denominators tried when approximating fractional odds.
FRACTIONAL_DENOMINATORS: Final[tuple[int, ...]] = (1, 2, 3, 4, 5, 6, 8, 10)

#: Default Kelly multiplier (quarter Kelly).
DEFAULT_KELLY_FRACTION: Final[float] = 0.25

ODDS_FORMATS: Final[tuple[str, ...]] = ("decimal", "american", "fractional")


class StakeView(Protocol):
    """Minimal bet view used for payout distribution."""

    bettor_id: str
    outcome_id: str
    amount: float


def round_half_up(value: float, places: int) -> float:
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def payout_pool(market: Market, extra_stake: float = 0.0) -> float:
    """Pool after the fee is retained."""
    return (market.total_pool + extra_stake) * (1 - market.fee_rate)


def calculate_odds(market: Market) -> list[Outcome]:
    """Return outcomes with odds/probability recomputed from current stakes.

    Outcomes with no stake (or a market with an empty pool) get the uniform
    prior: odds = outcome count, probability = 1 / outcome count.
    """
    count = len(market.outcomes)
    pool = market.total_pool
    distributable = payout_pool(market)
    result: list[Outcome] = []
    for outcome in market.outcomes:
        if outcome.total_bets == 0 or pool == 0:
            result.append(outcome.model_copy(update={"odds": float(count), "probability": 1 / count}))
            continue
        result.append(
            outcome.model_copy(
                update={
                    "odds": round_half_up(distributable / outcome.total_bets, 2),
                    "probability": round_half_up(outcome.total_bets / pool, 3),
                }
            )
        )
    return result


def calculate_potential_payout(amount: float, outcome_id: str, market: Market) -> float:
    """Simulate adding amount to outcome and pool; return new outcome stake / new payout pool.

    Returns 0 for an unknown outcome or an empty payout pool.
    """
    outcome = market.get_outcome(outcome_id)
    if outcome is None:
        return 0.0
    distributable = payout_pool(market, extra_stake=amount)
    if distributable <= 0:
        return 0.0
    return round_half_up((outcome.total_bets + amount) / distributable, 2)


def calculate_bet_payout(market: Market, winning_outcome_id: str, amount: float) -> float:
    """Share of the payout pool one winning stake of `amount` receives (0 if not computable)."""
    winner = market.get_outcome(winning_outcome_id)
    if winner is None or winner.total_bets == 0:
        return 0.0
    return round_half_up(amount / winner.total_bets * payout_pool(market), 2)


def is_refund_all(market: Market, winning_outcome_id: str) -> bool:
    """True when the winning outcome is unknown or attracted no stake: everyone gets their stake back."""
    winner = market.get_outcome(winning_outcome_id)
    return winner is None or winner.total_bets == 0


def calculate_payouts(
    market: Market,
    winning_outcome_id: str,
    bets: Iterable[StakeView],
) -> dict[str, float]:
    """Map bettor_id -> total payout.

    Zero-stake winner: every bettor is refunded their full stake.
    Otherwise each winning stake gets its proportional share of the payout
    pool, accumulated per bettor.
    """
    payouts: dict[str, float] = {}
    if is_refund_all(market, winning_outcome_id):
        for bet in bets:
            payouts[bet.bettor_id] = payouts.get(bet.bettor_id, 0.0) + bet.amount
        return payouts
    for bet in bets:
        if bet.outcome_id != winning_outcome_id:
            continue
        share = calculate_bet_payout(market, winning_outcome_id, bet.amount)
        payouts[bet.bettor_id] = payouts.get(bet.bettor_id, 0.0) + share
    return payouts


def _fractional(odds: float) -> str:
    fraction = odds - 1
    best_num = round_half_up(fraction, 0)
    best_den = 1
    best_diff = abs(fraction - best_num)
    for den in FRACTIONAL_DENOMINATORS:
        num = round_half_up(fraction * den, 0)
        diff = abs(fraction - num / den)
        if diff < best_diff:
            best_num, best_den, best_diff = num, den, diff
    return f"{int(best_num)}/{best_den}"


def format_odds(odds: float, fmt: str = "decimal") -> str:
    """Render decimal odds as decimal ("2.50"), American ("+150" / "-200") or fractional ("3/2").

    Raises:
        ValueError: American format requested for odds <= 1 (no American equivalent).
    """
    if fmt == "american":
        if odds >= 2:
            return f"+{int(round_half_up((odds - 1) * 100, 0))}"
        if odds <= 1:
            raise ValueError(f"Decimal odds {odds!r} have no American equivalent (must be > 1).")
        return f"-{int(round_half_up(100 / (odds - 1), 0))}"
    if fmt == "fractional":
        return _fractional(odds)
    return f"{odds:.2f}"


def kelly_bet(
    probability: float,
    odds: float,
    bankroll: float,
    fraction: float = DEFAULT_KELLY_FRACTION,
) -> float:
    """Fractional-Kelly stake for decimal `odds` and win `probability`. 0 when the edge is negative."""
    b = odds - 1
    if b <= 0:
        return 0.0
    q = 1 - probability
    kelly = (b * probability - q) / b
    if kelly < 0:
        return 0.0
    return round_half_up(kelly * fraction * bankroll, 2)
