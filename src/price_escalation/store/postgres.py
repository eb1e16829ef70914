"""Postgres-backed index store.

Uses an asyncpg pool over the `indices` table (see db/schema.sql).

Date/Time: Uses `whenever` library (UTC-first, Rust-backed).
Converts to/from Python datetime for asyncpg TIMESTAMPTZ compatibility.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from whenever import Instant

from price_escalation.models import IndexRecord, IndexType

if TYPE_CHECKING:
    import asyncpg

logger = logging.getLogger("price_escalation.store")

_COLUMNS = "index_type, year, month, value, source, observed_at"


def _record_from_row(row) -> IndexRecord:
    return IndexRecord(
        index_type=IndexType(row["index_type"]),
        year=row["year"],
        month=row["month"],
        value=row["value"],
        source=row["source"],
        observed_at=Instant(row["observed_at"]).format_iso(),
    )


class PostgresIndexStore:
    """IndexStore over an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def get_exact(self, index_type: IndexType, year: int, month: int) -> IndexRecord | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_COLUMNS}
                FROM indices
                WHERE index_type = $1 AND year = $2 AND month = $3
                """,  # noqa: S608
                index_type.value,
                year,
                month,
            )
        return _record_from_row(row) if row else None

    async def get_most_recent(
        self,
        index_type: IndexType,
        before: tuple[int, int] | None = None,
    ) -> IndexRecord | None:
        async with self._pool.acquire() as conn:
            row = None
            if before is not None:
                row = await conn.fetchrow(
                    f"""
                    SELECT {_COLUMNS}
                    FROM indices
                    WHERE index_type = $1 AND (year, month) < ($2, $3)
                    ORDER BY year DESC, month DESC
                    LIMIT 1
                    """,  # noqa: S608
                    index_type.value,
                    before[0],
                    before[1],
                )
            if row is None:
                row = await conn.fetchrow(
                    f"""
                    SELECT {_COLUMNS}
                    FROM indices
                    WHERE index_type = $1
                    ORDER BY year DESC, month DESC
                    LIMIT 1
                    """,  # noqa: S608
                    index_type.value,
                )
        return _record_from_row(row) if row else None

    async def upsert(self, record: IndexRecord) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO indices (index_type, year, month, value, source, observed_at)
                VALUES ($1, $2, $3, $4, $5, $6)
                ON CONFLICT (index_type, year, month)
                DO UPDATE SET value = EXCLUDED.value,
                              source = EXCLUDED.source,
                              observed_at = EXCLUDED.observed_at
                """,
                record.index_type.value,
                record.year,
                record.month,
                record.value,
                record.source,
                Instant.parse_iso(record.observed_at).to_stdlib(),
            )
        logger.debug(
            "Upserted %s %d-%02d = %s (%s)",
            record.index_type,
            record.year,
            record.month,
            record.value,
            record.source,
        )

    async def insert_missing(self, records: list[IndexRecord]) -> int:
        """Insert records whose key is absent; existing rows are left alone.

        Returns the number of rows inserted.
        """
        inserted = 0
        async with self._pool.acquire() as conn:
            for record in records:
                status = await conn.execute(
                    """
                    INSERT INTO indices (index_type, year, month, value, source, observed_at)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    ON CONFLICT (index_type, year, month) DO NOTHING
                    """,
                    record.index_type.value,
                    record.year,
                    record.month,
                    record.value,
                    record.source,
                    Instant.parse_iso(record.observed_at).to_stdlib(),
                )
                # asyncpg returns the command tag, e.g. "INSERT 0 1"
                if status.endswith(" 1"):
                    inserted += 1
        return inserted
