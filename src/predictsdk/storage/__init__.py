"""Storage adapters - in-memory and DuckDB."""

from predictsdk.storage.base import StorageAdapter
from predictsdk.storage.duckdb_store import DuckDBStorage
from predictsdk.storage.memory import MemoryStorage

__all__ = ["StorageAdapter", "MemoryStorage", "DuckDBStorage"]
