"""Persistent key-value storage over DuckDB - one JSON row per entity, namespaced by prefix."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from predictsdk.models import Bet, Market, StorageSnapshot, User
from predictsdk.storage.base import StorageAdapter
from predictsdk.storage.db import MEMORY_DB, get_connection, init_schema

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)

DEFAULT_PREFIX = "predict-sdk"


class DuckDBStorage(StorageAdapter):
    """Stores markets, bets and users in a DuckDB file. Synchronous DuckDB calls behind the async API."""

    def __init__(
        self,
        db_path: str | Path = MEMORY_DB,
        prefix: str = DEFAULT_PREFIX,
        conn: DuckDBPyConnection | None = None,
    ) -> None:
        self.db_path = str(db_path)
        self.prefix = prefix
        self._owns_conn = conn is None
        self._conn = conn if conn is not None else get_connection(db_path)
        init_schema(self._conn)

    # --- helpers ---

    def _payloads(self, sql: str, params: list) -> list[str]:
        return [r[0] for r in self._conn.execute(sql, params).fetchall()]

    def _one(self, table: str, entity_id: str) -> str | None:
        row = self._conn.execute(
            f"SELECT payload FROM {table} WHERE namespace = ? AND id = ?",
            [self.prefix, entity_id],
        ).fetchone()
        return row[0] if row else None

    def _all(self, table: str) -> list[str]:
        return self._payloads(
            f"SELECT payload FROM {table} WHERE namespace = ? ORDER BY created_at, id",
            [self.prefix],
        )

    def _delete(self, table: str, entity_id: str) -> None:
        self._conn.execute(f"DELETE FROM {table} WHERE namespace = ? AND id = ?", [self.prefix, entity_id])

    def _upsert_market(self, market: Market) -> None:
        self._conn.execute(
            """
            INSERT INTO markets (namespace, id, app_id, status, created_at, payload)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT (namespace, id) DO UPDATE SET
                app_id = excluded.app_id,
                status = excluded.status,
                created_at = excluded.created_at,
                payload = excluded.payload
            """,
            [self.prefix, market.id, market.app_id, market.status.value, market.created_at, market.model_dump_json()],
        )

    def _upsert_bet(self, bet: Bet) -> None:
        self._conn.execute(
            """
            INSERT INTO bets (namespace, id, market_id, bettor_id, created_at, payload)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT (namespace, id) DO UPDATE SET
                market_id = excluded.market_id,
                bettor_id = excluded.bettor_id,
                created_at = excluded.created_at,
                payload = excluded.payload
            """,
            [self.prefix, bet.id, bet.market_id, bet.bettor_id, bet.created_at, bet.model_dump_json()],
        )

    def _upsert_user(self, user: User) -> None:
        self._conn.execute(
            """
            INSERT INTO users (namespace, id, created_at, payload)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (namespace, id) DO UPDATE SET
                created_at = excluded.created_at,
                payload = excluded.payload
            """,
            [self.prefix, user.id, user.created_at, user.model_dump_json()],
        )

    def _count(self, table: str) -> int:
        return self._conn.execute(f"SELECT COUNT(*) FROM {table} WHERE namespace = ?", [self.prefix]).fetchone()[0]

    # --- markets ---

    async def get_market(self, market_id: str) -> Market | None:
        payload = self._one("markets", market_id)
        return Market.model_validate_json(payload) if payload else None

    async def get_all_markets(self) -> list[Market]:
        return [Market.model_validate_json(p) for p in self._all("markets")]

    async def save_market(self, market: Market) -> None:
        self._upsert_market(market)

    async def delete_market(self, market_id: str) -> None:
        self._delete("markets", market_id)

    # --- bets ---

    async def get_bet(self, bet_id: str) -> Bet | None:
        payload = self._one("bets", bet_id)
        return Bet.model_validate_json(payload) if payload else None

    async def get_all_bets(self) -> list[Bet]:
        return [Bet.model_validate_json(p) for p in self._all("bets")]

    async def get_bets_by_market(self, market_id: str) -> list[Bet]:
        rows = self._payloads(
            "SELECT payload FROM bets WHERE namespace = ? AND market_id = ? ORDER BY created_at, id",
            [self.prefix, market_id],
        )
        return [Bet.model_validate_json(p) for p in rows]

    async def get_bets_by_user(self, user_id: str) -> list[Bet]:
        rows = self._payloads(
            "SELECT payload FROM bets WHERE namespace = ? AND bettor_id = ? ORDER BY created_at, id",
            [self.prefix, user_id],
        )
        return [Bet.model_validate_json(p) for p in rows]

    async def save_bet(self, bet: Bet) -> None:
        self._upsert_bet(bet)

    async def delete_bet(self, bet_id: str) -> None:
        self._delete("bets", bet_id)

    # --- users ---

    async def get_user(self, user_id: str) -> User | None:
        payload = self._one("users", user_id)
        return User.model_validate_json(payload) if payload else None

    async def get_all_users(self) -> list[User]:
        return [User.model_validate_json(p) for p in self._all("users")]

    async def save_user(self, user: User) -> None:
        self._upsert_user(user)

    # --- bulk ---

    async def clear(self) -> None:
        for table in ("markets", "bets", "users"):
            self._conn.execute(f"DELETE FROM {table} WHERE namespace = ?", [self.prefix])

    def get_stats(self) -> dict[str, int]:
        return {"markets": self._count("markets"), "bets": self._count("bets"), "users": self._count("users")}

    def export_data(self) -> StorageSnapshot:
        return StorageSnapshot(
            markets=[Market.model_validate_json(p) for p in self._all("markets")],
            bets=[Bet.model_validate_json(p) for p in self._all("bets")],
            users=[User.model_validate_json(p) for p in self._all("users")],
        )

    def import_data(self, data: StorageSnapshot) -> None:
        for market in data.markets:
            self._upsert_market(market)
        for bet in data.bets:
            self._upsert_bet(bet)
        for user in data.users:
            self._upsert_user(user)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        self._conn.begin()
        try:
            yield
        except BaseException:
            self._conn.rollback()
            log.warning("storage_transaction_rolled_back", db_path=self.db_path, prefix=self.prefix)
            raise
        self._conn.commit()

    def close(self) -> None:
        if self._owns_conn:
            self._conn.close()
