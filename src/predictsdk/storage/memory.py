"""In-memory storage - dicts keyed by id. Default backend; nothing survives the process."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from predictsdk.models import Bet, Market, StorageSnapshot, User
from predictsdk.storage.base import StorageAdapter

_ABSENT = object()


class MemoryStorage(StorageAdapter):
    """Stored entities are replaced on save, never mutated in place.

    Inside a transaction every first write to a key records the previous
    value in an undo journal, so rollback only touches the keys written.
    """

    def __init__(self) -> None:
        self._markets: dict[str, Market] = {}
        self._bets: dict[str, Bet] = {}
        self._users: dict[str, User] = {}
        self._undo: dict[tuple[str, str], Any] | None = None

    def _table(self, name: str) -> dict[str, Any]:
        return {"markets": self._markets, "bets": self._bets, "users": self._users}[name]

    def _put(self, name: str, key: str, value: Any) -> None:
        table = self._table(name)
        if self._undo is not None:
            self._undo.setdefault((name, key), table.get(key, _ABSENT))
        table[key] = value

    def _drop(self, name: str, key: str) -> None:
        table = self._table(name)
        if key not in table:
            return
        if self._undo is not None:
            self._undo.setdefault((name, key), table[key])
        del table[key]

    async def get_market(self, market_id: str) -> Market | None:
        market = self._markets.get(market_id)
        return market.model_copy(deep=True) if market else None

    async def get_all_markets(self) -> list[Market]:
        return [m.model_copy(deep=True) for m in self._markets.values()]

    async def save_market(self, market: Market) -> None:
        self._put("markets", market.id, market.model_copy(deep=True))

    async def delete_market(self, market_id: str) -> None:
        self._drop("markets", market_id)

    async def get_bet(self, bet_id: str) -> Bet | None:
        bet = self._bets.get(bet_id)
        return bet.model_copy(deep=True) if bet else None

    async def get_all_bets(self) -> list[Bet]:
        return [b.model_copy(deep=True) for b in self._bets.values()]

    async def save_bet(self, bet: Bet) -> None:
        self._put("bets", bet.id, bet.model_copy(deep=True))

    async def delete_bet(self, bet_id: str) -> None:
        self._drop("bets", bet_id)

    async def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_all_users(self) -> list[User]:
        return [u.model_copy(deep=True) for u in self._users.values()]

    async def save_user(self, user: User) -> None:
        self._put("users", user.id, user.model_copy(deep=True))

    async def clear(self) -> None:
        for name in ("markets", "bets", "users"):
            for key in list(self._table(name)):
                self._drop(name, key)

    def get_stats(self) -> dict[str, int]:
        return {"markets": len(self._markets), "bets": len(self._bets), "users": len(self._users)}

    def export_data(self) -> StorageSnapshot:
        return StorageSnapshot(
            markets=[m.model_copy(deep=True) for m in self._markets.values()],
            bets=[b.model_copy(deep=True) for b in self._bets.values()],
            users=[u.model_copy(deep=True) for u in self._users.values()],
        )

    def import_data(self, data: StorageSnapshot) -> None:
        for market in data.markets:
            self._put("markets", market.id, market.model_copy(deep=True))
        for bet in data.bets:
            self._put("bets", bet.id, bet.model_copy(deep=True))
        for user in data.users:
            self._put("users", user.id, user.model_copy(deep=True))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._undo is not None:
            # nested: the outer transaction owns the journal
            yield
            return
        self._undo = {}
        try:
            yield
        except BaseException:
            self._rollback()
            raise
        finally:
            self._undo = None

    def _rollback(self) -> None:
        journal, self._undo = self._undo, None
        for (name, key), previous in reversed(list(journal.items())):
            table = self._table(name)
            if previous is _ABSENT:
                table.pop(key, None)
            else:
                table[key] = previous
