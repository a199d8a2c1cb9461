"""PredictSDK - market, bet and user lifecycle over a storage adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from predictsdk.config.settings import SDKConfig
from predictsdk.errors import ErrorCode, PredictSDKError, market_not_found
from predictsdk.events import (
    BetLost,
    BetPlaced,
    BetRefunded,
    BetWon,
    EventCallback,
    EventEmitter,
    MarketCancelled,
    MarketClosed,
    MarketCreated,
    MarketResolved,
    MarketUpdated,
    SDKEvent,
    UserBalanceChanged,
    UserCreated,
)
from predictsdk.models import (
    Bet,
    BetStatus,
    CreateMarketInput,
    Market,
    MarketStats,
    MarketStatus,
    Outcome,
    OutcomeSpec,
    OutcomeStats,
    PlaceBetInput,
    ResolveMarketInput,
    StorageSnapshot,
    User,
)
from predictsdk.storage import MemoryStorage, StorageAdapter
from predictsdk.utils.clock import Clock, now_ms
from predictsdk.utils.ids import generate_bet_id, generate_market_id, generate_outcome_id, is_valid_id
from predictsdk.utils.odds import (
    calculate_bet_payout,
    calculate_odds,
    calculate_potential_payout,
    is_refund_all,
)
from predictsdk.utils.validation import (
    validate_amount,
    validate_create_market_input,
    validate_place_bet,
    validate_resolve_market,
)

log = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

_LIVE_BET_STATUSES = (BetStatus.PENDING, BetStatus.CONFIRMED)


def _coerce(model: type[M], data: M | dict[str, Any], code: ErrorCode) -> M:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PredictSDKError(code, f"Invalid {model.__name__}", details=e.errors(include_url=False)) from e


class PredictSDK:
    """Facade over storage, odds math, validation and events.

    Nothing is cached between calls: every operation re-reads from storage.
    Mutations run one at a time (SDK-wide asyncio lock) inside a storage
    transaction. Events raised by a mutation are delivered after it commits;
    a failed mutation is rolled back and emits nothing.
    """

    def __init__(
        self,
        config: SDKConfig | dict[str, Any],
        storage: StorageAdapter | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.config = SDKConfig.build(config)
        self.storage = storage if storage is not None else MemoryStorage()
        self.events = EventEmitter()
        self._clock = clock
        self._write_lock = asyncio.Lock()
        if self.config.debug:
            self.events.on_any(self._log_event)

    def _log_event(self, event: SDKEvent) -> None:
        log.info("sdk_event", app_id=self.config.app_id, event_type=event.type)

    # --- events ---

    def on(self, event_type: str, callback: EventCallback) -> Callable[[], None]:
        return self.events.on(event_type, callback)

    def once(self, event_type: str, callback: EventCallback) -> None:
        self.events.once(event_type, callback)

    def off(self, event_type: str, callback: EventCallback) -> None:
        self.events.off(event_type, callback)

    def on_any(self, callback: EventCallback) -> Callable[[], None]:
        return self.events.on_any(callback)

    @asynccontextmanager
    async def _write(self) -> AsyncIterator[list[SDKEvent]]:
        """Single-writer section + storage transaction. Yields the pending event list."""
        async with self._write_lock:
            pending: list[SDKEvent] = []
            async with self.storage.transaction():
                yield pending
            for event in pending:
                self.events.emit(event)

    @staticmethod
    def _queue(pending: list[SDKEvent], event: SDKEvent) -> None:
        # Copy so later mutations in the same operation don't leak into the payload.
        pending.append(event.model_copy(deep=True))

    async def _require_market(self, market_id: str) -> Market:
        market = await self.storage.get_market(market_id)
        if market is None:
            raise market_not_found(market_id)
        return market

    # --- markets ---

    async def create_market(self, data: CreateMarketInput | dict[str, Any]) -> Market:
        """Validate, assign uniform initial odds, persist, emit market:created."""
        inp = _coerce(CreateMarketInput, data, ErrorCode.INVALID_CONFIG)
        now = self._clock()
        validate_create_market_input(inp, now)

        count = len(inp.outcomes)
        outcomes = []
        for spec in inp.outcomes:
            if isinstance(spec, OutcomeSpec):
                outcome_id, label = spec.id or generate_outcome_id(), spec.label
            else:
                outcome_id, label = generate_outcome_id(), spec
            outcomes.append(Outcome(id=outcome_id, label=label, odds=float(count), probability=1 / count))

        market = Market(
            id=generate_market_id(),
            app_id=self.config.app_id,
            question=inp.question,
            description=inp.description,
            outcomes=outcomes,
            outcome_type=inp.outcome_type,
            status=MarketStatus.OPEN,
            total_pool=0.0,
            fee_rate=inp.fee_rate if inp.fee_rate is not None else self.config.default_fee_rate,
            created_at=now,
            closes_at=inp.closes_at_ms,
            metadata=inp.metadata,
            allowed_bettors=inp.allowed_bettors,
            min_bet=inp.min_bet,
            max_bet=inp.max_bet,
        )
        async with self._write() as pending:
            await self.storage.save_market(market)
            self._queue(pending, MarketCreated(market=market))
        log.info("market_created", market_id=market.id, outcomes=count, closes_at=market.closes_at)
        return market

    async def get_market(self, market_id: str) -> Market | None:
        """Market with odds recomputed from current stakes, or None."""
        market = await self.storage.get_market(market_id)
        if market is None:
            return None
        market.outcomes = calculate_odds(market)
        return market

    async def get_all_markets(
        self,
        status: MarketStatus | str | None = None,
        app_id: str | None = None,
    ) -> list[Market]:
        wanted = None
        if status is not None:
            try:
                wanted = MarketStatus(status)
            except ValueError as e:
                raise PredictSDKError(ErrorCode.INVALID_INPUT, f"Unknown market status {status!r}") from e
        markets = await self.storage.get_all_markets()
        if wanted is not None:
            markets = [m for m in markets if m.status == wanted]
        if app_id is not None:
            markets = [m for m in markets if m.app_id == app_id]
        for m in markets:
            m.outcomes = calculate_odds(m)
        return markets

    async def close_market(self, market_id: str) -> Market:
        """Stop accepting bets. Closing a CLOSED market is a no-op; terminal markets raise CONFLICT."""
        async with self._write() as pending:
            market = await self._require_market(market_id)
            if market.is_terminal:
                raise PredictSDKError(
                    ErrorCode.CONFLICT,
                    f"Cannot close market {market_id}: it is already {market.status.value}",
                )
            if market.status == MarketStatus.CLOSED:
                market.outcomes = calculate_odds(market)
                return market
            market.status = MarketStatus.CLOSED
            await self.storage.save_market(market)
            self._queue(pending, MarketClosed(market=market))
        log.info("market_closed", market_id=market_id)
        return market

    async def resolve_market(self, data: ResolveMarketInput | dict[str, Any]) -> Market:
        """Fix the winner, settle every live bet, credit winners, emit per-bet events then market:resolved.

        If the winning outcome attracted no stake, every bet is refunded instead.
        """
        inp = _coerce(ResolveMarketInput, data, ErrorCode.INVALID_INPUT)
        async with self._write() as pending:
            market = await self._require_market(inp.market_id)
            validate_resolve_market(inp, market)
            winner_id = inp.winning_outcome_id
            bets = [b for b in await self.storage.get_bets_by_market(market.id) if b.status in _LIVE_BET_STATUSES]
            refund_all = is_refund_all(market, winner_id)

            # Bet payouts are computed against the pool as it stood at resolution.
            settlement = market.model_copy(deep=True)
            market.status = MarketStatus.RESOLVED
            market.resolved_at = self._clock()
            market.winning_outcome_id = winner_id
            if inp.proof is not None:
                market.metadata = {**(market.metadata or {}), "resolution_proof": inp.proof}
            market.outcomes = calculate_odds(market)
            await self.storage.save_market(market)

            for bet in bets:
                if refund_all:
                    await self._refund_bet(market, bet, pending)
                elif bet.outcome_id == winner_id:
                    payout = calculate_bet_payout(settlement, winner_id, bet.amount)
                    bet.status = BetStatus.WON
                    bet.payout = payout
                    await self.storage.save_bet(bet)
                    user = await self._load_or_create_user(bet.bettor_id, pending)
                    await self._adjust_user(user, pending, delta=payout, won=payout)
                    self._queue(pending, BetWon(bet=bet, market=market))
                else:
                    bet.status = BetStatus.LOST
                    bet.payout = 0.0
                    await self.storage.save_bet(bet)
                    user = await self._load_or_create_user(bet.bettor_id, pending)
                    await self._adjust_user(user, pending, lost=bet.amount)
                    self._queue(pending, BetLost(bet=bet, market=market))

            if refund_all:
                market.outcomes = calculate_odds(market)
                await self.storage.save_market(market)
            self._queue(pending, MarketResolved(market=market, winning_outcome_id=winner_id))
        log.info(
            "market_resolved",
            market_id=market.id,
            winning_outcome_id=winner_id,
            bets=len(bets),
            refund_all=refund_all,
            total_paid=round(sum(b.payout or 0.0 for b in bets if b.status == BetStatus.WON), 2),
        )
        return market

    async def cancel_market(self, market_id: str, reason: str | None = None) -> Market:
        """Refund every live bet and mark the market CANCELLED. Terminal markets raise CONFLICT."""
        async with self._write() as pending:
            market = await self._require_market(market_id)
            if market.status == MarketStatus.RESOLVED:
                raise PredictSDKError(ErrorCode.CONFLICT, "Cannot cancel a resolved market")
            if market.status == MarketStatus.CANCELLED:
                raise PredictSDKError(ErrorCode.CONFLICT, f"Market {market_id} is already cancelled")

            bets = [b for b in await self.storage.get_bets_by_market(market.id) if b.status in _LIVE_BET_STATUSES]
            for bet in bets:
                await self._refund_bet(market, bet, pending)

            market.status = MarketStatus.CANCELLED
            if reason:
                market.metadata = {**(market.metadata or {}), "cancel_reason": reason}
            market.outcomes = calculate_odds(market)
            await self.storage.save_market(market)
            self._queue(pending, MarketCancelled(market=market))
        log.info("market_cancelled", market_id=market_id, refunded_bets=len(bets), reason=reason)
        return market

    async def _refund_bet(self, market: Market, bet: Bet, pending: list[SDKEvent]) -> None:
        """Return the stake and take it out of the pool (pool == sum of non-refunded stakes)."""
        bet.status = BetStatus.REFUNDED
        bet.payout = bet.amount
        await self.storage.save_bet(bet)

        outcome = market.get_outcome(bet.outcome_id)
        if outcome is not None:
            outcome.total_bets = max(0.0, outcome.total_bets - bet.amount)
            outcome.bet_count = max(0, outcome.bet_count - 1)
        market.total_pool = max(0.0, market.total_pool - bet.amount)

        user = await self._load_or_create_user(bet.bettor_id, pending)
        await self._adjust_user(user, pending, delta=bet.amount, wagered=-bet.amount)
        self._queue(pending, BetRefunded(bet=bet, market=market))

    async def get_market_stats(self, market_id: str) -> MarketStats:
        market = await self._require_market(market_id)
        outcomes = calculate_odds(market)
        return MarketStats(
            total_pool=market.total_pool,
            total_bets=sum(o.bet_count for o in outcomes),
            outcome_stats=[OutcomeStats(**o.model_dump()) for o in outcomes],
        )

    async def check_and_close_expired_markets(self) -> list[Market]:
        """Close every OPEN market whose close time has passed. Returns the markets closed."""
        closed: list[Market] = []
        async with self._write() as pending:
            now = self._clock()
            for market in await self.storage.get_all_markets():
                if market.status == MarketStatus.OPEN and now >= market.closes_at:
                    market.status = MarketStatus.CLOSED
                    await self.storage.save_market(market)
                    self._queue(pending, MarketClosed(market=market))
                    closed.append(market)
        if closed:
            log.info("expired_markets_closed", count=len(closed), market_ids=[m.id for m in closed])
        return closed

    # --- bets ---

    async def place_bet(self, data: PlaceBetInput | dict[str, Any]) -> Bet:
        """Validate, debit the bettor, add the stake to outcome and pool, emit bet:placed and market:updated."""
        inp = _coerce(PlaceBetInput, data, ErrorCode.INVALID_INPUT)
        async with self._write() as pending:
            market = await self._require_market(inp.market_id)
            now = self._clock()
            validate_place_bet(inp, market, now)

            user = await self._load_or_create_user(inp.bettor_id, pending)
            if user.balance < inp.amount:
                raise PredictSDKError(
                    ErrorCode.INSUFFICIENT_BALANCE,
                    f"Insufficient balance. Have: {user.balance}, Need: {inp.amount}",
                    details={"balance": user.balance, "amount": inp.amount},
                )

            odds_at_bet = next((o.odds for o in calculate_odds(market) if o.id == inp.outcome_id), 0.0)
            bet = Bet(
                id=generate_bet_id(),
                market_id=market.id,
                bettor_id=inp.bettor_id,
                outcome_id=inp.outcome_id,
                amount=inp.amount,
                potential_payout=calculate_potential_payout(inp.amount, inp.outcome_id, market),
                status=BetStatus.CONFIRMED,
                created_at=now,
                odds_at_bet=odds_at_bet,
            )

            outcome = market.get_outcome(inp.outcome_id)
            outcome.total_bets += inp.amount
            outcome.bet_count += 1
            market.total_pool += inp.amount
            market.outcomes = calculate_odds(market)

            await self._adjust_user(user, pending, delta=-inp.amount, wagered=inp.amount)
            await self.storage.save_bet(bet)
            await self.storage.save_market(market)
            self._queue(pending, BetPlaced(bet=bet, market=market))
            self._queue(pending, MarketUpdated(market=market))
        log.info(
            "bet_placed",
            bet_id=bet.id,
            market_id=market.id,
            bettor_id=bet.bettor_id,
            outcome_id=bet.outcome_id,
            amount=bet.amount,
        )
        return bet

    async def get_bet(self, bet_id: str) -> Bet | None:
        return await self.storage.get_bet(bet_id)

    async def get_bets_by_market(self, market_id: str) -> list[Bet]:
        return await self.storage.get_bets_by_market(market_id)

    async def get_bets_by_user(self, user_id: str) -> list[Bet]:
        return await self.storage.get_bets_by_user(user_id)

    async def calculate_payout(self, market_id: str, outcome_id: str, amount: float) -> float:
        """Potential payout of a hypothetical bet against the current pool."""
        market = await self._require_market(market_id)
        return calculate_potential_payout(amount, outcome_id, market)

    # --- users ---

    async def _load_or_create_user(self, user_id: str, pending: list[SDKEvent]) -> User:
        user = await self.storage.get_user(user_id)
        if user is None:
            if not is_valid_id(user_id):
                raise PredictSDKError(ErrorCode.INVALID_INPUT, "User id must be a non-empty string")
            user = User(id=user_id, balance=self.config.initial_balance, created_at=self._clock())
            await self.storage.save_user(user)
            self._queue(pending, UserCreated(user=user))
            log.debug("user_created", user_id=user_id, balance=user.balance)
        return user

    async def _adjust_user(
        self,
        user: User,
        pending: list[SDKEvent],
        *,
        delta: float = 0.0,
        wagered: float = 0.0,
        won: float = 0.0,
        lost: float = 0.0,
    ) -> User:
        user.balance += delta
        user.total_bets += wagered
        user.total_won += won
        user.total_lost += lost
        await self.storage.save_user(user)
        if delta:
            self._queue(pending, UserBalanceChanged(user=user, balance=user.balance))
        return user

    async def get_or_create_user(self, user_id: str) -> User:
        async with self._write() as pending:
            user = await self._load_or_create_user(user_id, pending)
        return user

    async def get_user(self, user_id: str) -> User | None:
        return await self.storage.get_user(user_id)

    async def add_funds(self, user_id: str, amount: float) -> User:
        """Credit a user's balance. Non-positive amounts raise INVALID_INPUT."""
        validate_amount(amount)
        async with self._write() as pending:
            user = await self._load_or_create_user(user_id, pending)
            await self._adjust_user(user, pending, delta=amount)
        log.info("funds_added", user_id=user_id, amount=amount, balance=user.balance)
        return user

    # --- misc ---

    def get_config(self) -> SDKConfig:
        return self.config.model_copy()

    def export_data(self) -> StorageSnapshot:
        return self.storage.export_data()

    async def import_data(self, data: StorageSnapshot | dict[str, Any]) -> dict[str, int]:
        snapshot = _coerce(StorageSnapshot, data, ErrorCode.INVALID_INPUT)
        async with self._write():
            self.storage.import_data(snapshot)
        log.info(
            "data_imported",
            markets=len(snapshot.markets),
            bets=len(snapshot.bets),
            users=len(snapshot.users),
        )
        return self.storage.get_stats()

    def get_storage_stats(self) -> dict[str, int]:
        return self.storage.get_stats()

    async def clear(self) -> None:
        async with self._write():
            await self.storage.clear()
        log.info("storage_cleared", app_id=self.config.app_id)
