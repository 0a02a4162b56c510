"""
SQLite storage implementation using aiosqlite.
"""

from pathlib import Path

import aiosqlite

from talkgraph.core.storage.base import StorageBackend, check_key
from talkgraph.utils.exceptions import NotFoundError, StoreError


class SQLiteStorage(StorageBackend):
    """
    SQLite-based key-value store for saved graphs.

    Features:
    - Single-file local storage
    - Atomic writes through transactions
    """

    def __init__(self, db_path: str = "data/talkgraph.db"):
        """
        Initialize SQLite storage.

        Args:
            db_path: Path to SQLite database file (":memory:" for a private in-memory database)
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS records (
                key TEXT PRIMARY KEY,
                data BLOB NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """
        )
        await self.connection.commit()

    async def _conn(self) -> aiosqlite.Connection:
        if self.connection is None:
            await self.initialize()
        return self.connection

    async def put(self, key: str, data: bytes) -> None:
        check_key(key)
        conn = await self._conn()
        try:
            await conn.execute(
                """
                INSERT INTO records (key, data) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET data = excluded.data,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, data),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to write {key}: {e}", context={"key": key}) from e

    async def get(self, key: str) -> bytes:
        check_key(key)
        conn = await self._conn()
        try:
            async with conn.execute("SELECT data FROM records WHERE key = ?", (key,)) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read {key}: {e}", context={"key": key}) from e

        if row is None:
            raise NotFoundError(f"Saved graph not found: {key}", context={"key": key})
        return bytes(row[0])

    async def list_keys(self) -> list[str]:
        conn = await self._conn()
        try:
            async with conn.execute("SELECT key FROM records ORDER BY key") as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to list saved graphs: {e}") from e
        return [row[0] for row in rows]

    async def exists(self, key: str) -> bool:
        try:
            check_key(key)
        except NotFoundError:
            return False

        conn = await self._conn()
        try:
            async with conn.execute("SELECT 1 FROM records WHERE key = ?", (key,)) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read {key}: {e}", context={"key": key}) from e
        return row is not None

    async def delete(self, key: str) -> None:
        check_key(key)
        conn = await self._conn()
        try:
            cursor = await conn.execute("DELETE FROM records WHERE key = ?", (key,))
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to delete {key}: {e}", context={"key": key}) from e

        if cursor.rowcount == 0:
            raise NotFoundError(f"Saved graph not found: {key}", context={"key": key})

    async def close(self) -> None:
        """Close database connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None
