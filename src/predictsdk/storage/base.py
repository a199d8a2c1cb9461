"""Abstract storage adapter. Any conforming implementation can back the SDK."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from predictsdk.models import Bet, Market, StorageSnapshot, User


class StorageAdapter(ABC):
    """CRUD for markets, bets and users, plus bulk export/import and a transaction boundary.

    Adapters return copies: mutating a returned entity never changes stored state
    until it is saved again.
    """

    @abstractmethod
    async def get_market(self, market_id: str) -> Market | None: ...

    @abstractmethod
    async def get_all_markets(self) -> list[Market]: ...

    @abstractmethod
    async def save_market(self, market: Market) -> None: ...

    @abstractmethod
    async def delete_market(self, market_id: str) -> None: ...

    @abstractmethod
    async def get_bet(self, bet_id: str) -> Bet | None: ...

    @abstractmethod
    async def get_all_bets(self) -> list[Bet]: ...

    @abstractmethod
    async def save_bet(self, bet: Bet) -> None: ...

    @abstractmethod
    async def delete_bet(self, bet_id: str) -> None: ...

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    async def get_all_users(self) -> list[User]: ...

    @abstractmethod
    async def save_user(self, user: User) -> None: ...

    @abstractmethod
    async def clear(self) -> None: ...

    @abstractmethod
    def get_stats(self) -> dict[str, int]:
        """Entity counts: {markets, bets, users}."""
        ...

    @abstractmethod
    def export_data(self) -> StorageSnapshot: ...

    @abstractmethod
    def import_data(self, data: StorageSnapshot) -> None:
        """Upsert every entity in data. Existing entities not in data are kept."""
        ...

    async def get_bets_by_market(self, market_id: str) -> list[Bet]:
        return [b for b in await self.get_all_bets() if b.market_id == market_id]

    async def get_bets_by_user(self, user_id: str) -> list[Bet]:
        return [b for b in await self.get_all_bets() if b.bettor_id == user_id]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """All writes inside the block are kept on success and undone on error.

        Default: snapshot before, restore the snapshot on error. Adapters with
        native transactions override this.
        """
        snapshot = self.export_data()
        try:
            yield
        except BaseException:
            await self.clear()
            self.import_data(snapshot)
            raise
