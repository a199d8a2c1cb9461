"""Storage adapters: memory and DuckDB share one contract."""

import pytest

from predictsdk.models import Bet, BetStatus, StorageSnapshot, User
from predictsdk.storage import DuckDBStorage, MemoryStorage
from predictsdk.storage.db import get_connection, init_schema
from tests.conftest import T0, make_market, run


@pytest.fixture(params=["memory", "duckdb"])
def store(request):
    if request.param == "memory":
        yield MemoryStorage()
    else:
        s = DuckDBStorage(":memory:")
        yield s
        s.close()


def _bet(bet_id, market_id="mkt_a", bettor_id="alice", amount=10.0, created_at=T0):
    return Bet(
        id=bet_id,
        market_id=market_id,
        bettor_id=bettor_id,
        outcome_id="A",
        amount=amount,
        created_at=created_at,
    )


def _user(user_id, balance=100.0):
    return User(id=user_id, balance=balance, created_at=T0)


def test_market_round_trip(store):
    market = make_market({"A": 10, "B": 5}, id="mkt_a", metadata={"source": "test"})

    async def scenario():
        assert await store.get_market("mkt_a") is None
        await store.save_market(market)
        loaded = await store.get_market("mkt_a")
        assert loaded == market
        await store.delete_market("mkt_a")
        assert await store.get_market("mkt_a") is None

    run(scenario())


def test_returned_entities_are_copies(store):
    async def scenario():
        await store.save_user(_user("alice", 100))
        user = await store.get_user("alice")
        user.balance = 0
        assert (await store.get_user("alice")).balance == 100

    run(scenario())


def test_save_overwrites(store):
    async def scenario():
        await store.save_bet(_bet("bet_1"))
        bet = await store.get_bet("bet_1")
        bet.status = BetStatus.WON
        bet.payout = 19.6
        await store.save_bet(bet)
        loaded = await store.get_bet("bet_1")
        assert loaded.status == BetStatus.WON
        assert loaded.payout == 19.6
        assert store.get_stats()["bets"] == 1

    run(scenario())


def test_bets_by_market_and_user(store):
    async def scenario():
        await store.save_bet(_bet("bet_1", market_id="mkt_a", bettor_id="alice", created_at=T0))
        await store.save_bet(_bet("bet_2", market_id="mkt_a", bettor_id="bob", created_at=T0 + 1))
        await store.save_bet(_bet("bet_3", market_id="mkt_b", bettor_id="alice", created_at=T0 + 2))
        assert [b.id for b in await store.get_bets_by_market("mkt_a")] == ["bet_1", "bet_2"]
        assert [b.id for b in await store.get_bets_by_user("alice")] == ["bet_1", "bet_3"]
        assert len(await store.get_all_bets()) == 3
        await store.delete_bet("bet_2")
        assert [b.id for b in await store.get_bets_by_market("mkt_a")] == ["bet_1"]

    run(scenario())


def test_stats_clear(store):
    async def scenario():
        await store.save_market(make_market({"A": 0, "B": 0}, id="mkt_a"))
        await store.save_bet(_bet("bet_1"))
        await store.save_user(_user("alice"))
        await store.save_user(_user("bob"))
        assert store.get_stats() == {"markets": 1, "bets": 1, "users": 2}
        assert len(await store.get_all_users()) == 2
        await store.clear()
        assert store.get_stats() == {"markets": 0, "bets": 0, "users": 0}

    run(scenario())


def test_export_import_between_backends(store):
    async def scenario():
        await store.save_market(make_market({"A": 10, "B": 0}, id="mkt_a"))
        await store.save_bet(_bet("bet_1"))
        await store.save_user(_user("alice", 90))
        snapshot = store.export_data()
        assert isinstance(snapshot, StorageSnapshot)

        other = MemoryStorage()
        other.import_data(StorageSnapshot.model_validate_json(snapshot.model_dump_json()))
        assert other.get_stats() == {"markets": 1, "bets": 1, "users": 1}
        assert (await other.get_user("alice")).balance == 90
        assert (await other.get_market("mkt_a")).total_pool == 10

    run(scenario())


def test_import_upserts_and_keeps_others(store):
    async def scenario():
        await store.save_user(_user("alice", 1))
        await store.save_user(_user("bob", 2))
        store.import_data(StorageSnapshot(users=[_user("alice", 50)]))
        assert (await store.get_user("alice")).balance == 50
        assert (await store.get_user("bob")).balance == 2

    run(scenario())


def test_transaction_commits(store):
    async def scenario():
        async with store.transaction():
            await store.save_user(_user("alice", 10))
        assert (await store.get_user("alice")).balance == 10

    run(scenario())


def test_transaction_rolls_back_on_error(store):
    async def scenario():
        await store.save_user(_user("alice", 10))
        with pytest.raises(RuntimeError):
            async with store.transaction():
                await store.save_user(_user("alice", 0))
                await store.save_user(_user("bob", 5))
                raise RuntimeError("boom")
        assert (await store.get_user("alice")).balance == 10
        assert await store.get_user("bob") is None

    run(scenario())


def test_duckdb_prefixes_are_isolated():
    conn = get_connection(":memory:")
    init_schema(conn)
    app_a = DuckDBStorage(prefix="app-a", conn=conn)
    app_b = DuckDBStorage(prefix="app-b", conn=conn)

    async def scenario():
        await app_a.save_user(_user("alice", 1))
        await app_b.save_user(_user("alice", 2))
        assert (await app_a.get_user("alice")).balance == 1
        assert (await app_b.get_user("alice")).balance == 2
        await app_a.clear()
        assert await app_a.get_user("alice") is None
        assert app_b.get_stats()["users"] == 1

    try:
        run(scenario())
    finally:
        conn.close()


def test_duckdb_persists_to_file(tmp_path):
    path = tmp_path / "sub" / "predict.duckdb"

    async def write():
        s = DuckDBStorage(path)
        await s.save_user(_user("alice", 42))
        s.close()

    async def read():
        s = DuckDBStorage(path)
        user = await s.get_user("alice")
        s.close()
        return user

    run(write())
    assert run(read()).balance == 42


def test_rollback_restores_deleted_and_cleared_entities(store):
    async def scenario():
        await store.save_market(make_market({"A": 0, "B": 0}, id="mkt_a"))
        await store.save_bet(_bet("bet_1"))
        await store.save_user(_user("alice", 10))
        before = store.export_data()
        with pytest.raises(RuntimeError):
            async with store.transaction():
                await store.delete_bet("bet_1")
                await store.save_user(_user("alice", 0))
                await store.clear()
                await store.save_user(_user("bob", 5))
                raise RuntimeError("boom")
        assert store.export_data() == before
        assert await store.get_user("bob") is None

    run(scenario())


def test_memory_transaction_journals_only_written_keys():
    store = MemoryStorage()

    async def scenario():
        for i in range(50):
            await store.save_user(_user(f"u{i}", i))
        async with store.transaction():
            await store.save_user(_user("u1", 100))
            await store.save_user(_user("u1", 200))
            await store.save_user(_user("new", 1))
            assert set(store._undo) == {("users", "u1"), ("users", "new")}
            # the first write wins: rollback would restore the value from before the transaction
            assert store._undo[("users", "u1")].balance == 1
        assert store._undo is None
        assert (await store.get_user("u1")).balance == 200

    run(scenario())
