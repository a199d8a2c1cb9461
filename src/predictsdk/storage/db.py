"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

MEMORY_DB = ":memory:"

SCHEMA_SQL = """
-- Entities are stored as JSON payloads, indexed columns mirror the fields we filter on.
-- namespace separates several apps sharing one database file.
CREATE TABLE IF NOT EXISTS markets (
    namespace       VARCHAR NOT NULL,
    id              VARCHAR NOT NULL,
    app_id          VARCHAR NOT NULL,
    status          VARCHAR NOT NULL,
    created_at      BIGINT NOT NULL,
    payload         JSON NOT NULL,
    PRIMARY KEY (namespace, id)
);

CREATE TABLE IF NOT EXISTS bets (
    namespace       VARCHAR NOT NULL,
    id              VARCHAR NOT NULL,
    market_id       VARCHAR NOT NULL,
    bettor_id       VARCHAR NOT NULL,
    created_at      BIGINT NOT NULL,
    payload         JSON NOT NULL,
    PRIMARY KEY (namespace, id)
);

CREATE TABLE IF NOT EXISTS users (
    namespace       VARCHAR NOT NULL,
    id              VARCHAR NOT NULL,
    created_at      BIGINT NOT NULL,
    payload         JSON NOT NULL,
    PRIMARY KEY (namespace, id)
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close it.
    db_path ':memory:' gives a private in-process database."""
    if str(db_path) == MEMORY_DB:
        return duckdb.connect(MEMORY_DB)
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise
