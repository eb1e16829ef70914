"""Index store contract and implementations.

- MemoryIndexStore: dict-backed, process-local (tests, local runs)
- PostgresIndexStore: asyncpg pool over the `indices` table
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

import asyncpg

from price_escalation.db.seed_data import seed_records
from price_escalation.models import EscalationConfig, IndexRecord, IndexType

from .memory import MemoryIndexStore
from .postgres import PostgresIndexStore


class IndexStore(Protocol):
    """Key-value contract consumed by the resolver and the batch refresh.

    Records are keyed by (index_type, year, month); upsert replaces the
    existing record for a key.
    """

    async def get_exact(self, index_type: IndexType, year: int, month: int) -> IndexRecord | None:
        ...

    async def get_most_recent(
        self,
        index_type: IndexType,
        before: tuple[int, int] | None = None,
    ) -> IndexRecord | None:
        """Latest record of index_type.

        With `before`, prefer the latest record strictly preceding that
        (year, month); fall back to the latest record overall when none
        precede it.
        """
        ...

    async def upsert(self, record: IndexRecord) -> None:
        ...


@asynccontextmanager
async def open_store(config: EscalationConfig) -> AsyncIterator[IndexStore]:
    """Postgres store when a DSN is configured, seeded memory store otherwise."""
    if not config.database_url:
        yield MemoryIndexStore(seed_records())
        return

    pool = await asyncpg.create_pool(
        config.database_url,
        min_size=config.pool_min_size,
        max_size=config.pool_max_size,
    )
    try:
        yield PostgresIndexStore(pool)
    finally:
        await pool.close()


__all__ = ["IndexStore", "MemoryIndexStore", "PostgresIndexStore", "open_store"]
