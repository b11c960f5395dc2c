"""Key-value repository backed by the kv_store table."""

from typing import Optional

import aiosqlite
import structlog

log = structlog.get_logger(__name__)


class KeyValueRepository:
    """Repository for whole-value reads and writes keyed by name."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        return row[0] if row else None

    async def put(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "INSERT INTO kv_store (key, value, updated_at) "
                "VALUES (?, ?, datetime('now')) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value = excluded.value, updated_at = excluded.updated_at",
                (key, value),
            )
            await db.commit()

        log.debug("kv_value_stored", key=key, size=len(value))

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if a row was removed."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await db.commit()
            return cursor.rowcount > 0
