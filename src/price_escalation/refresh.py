"""Batch refresh of remote-sourced indices over a trailing window.

Walks (year, month) pairs, skipping periods whose remote record is younger
than the freshness threshold, and refetches the rest from the MCP server.
Each period is isolated: one failure is recorded and the batch moves on.
A short delay between remote calls keeps the MoSPI rate limits happy.

The resolver never refetches a key it already holds, so the refresh goes to
the remote source directly and upserts what it gets back. Seed records are
replaced by remote values when the server has them.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from whenever import Instant, TimeDelta

from price_escalation.formulas.periods import Period
from price_escalation.models import (
    REMOTE_SOURCE,
    IndexRecord,
    IndexType,
    PeriodRefresh,
    RefreshSummary,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from price_escalation.resolver import RemoteIndexSource
    from price_escalation.store import IndexStore

logger = logging.getLogger("price_escalation.refresh")


async def refresh_window(
    store: IndexStore,
    client: RemoteIndexSource,
    periods: Iterable[tuple[int, int]],
    *,
    index_type: IndexType = IndexType.WPI,
    freshness: TimeDelta = TimeDelta(hours=24),
    delay_sec: float = 0.5,
    remote_timeout: float = 5.0,
    now: Instant | None = None,
) -> RefreshSummary:
    """Refresh every period in `periods`, returning a per-period summary."""
    started = time.perf_counter()
    now = now or Instant.now()
    summary = RefreshSummary()

    for year, month in periods:
        period = Period(year, month)
        summary.total += 1
        try:
            existing = await store.get_exact(index_type, year, month)
            if existing is not None and existing.is_remote:
                age = now - Instant.parse_iso(existing.observed_at)
                if age < freshness:
                    summary.skipped += 1
                    summary.details.append(PeriodRefresh(month=period.format_key(), status="fresh"))
                    continue

            async with asyncio.timeout(remote_timeout):
                value = await client.fetch_index(index_type, year, month)

            if value is not None:
                await store.upsert(
                    IndexRecord(
                        index_type=index_type,
                        year=year,
                        month=month,
                        value=value,
                        source=REMOTE_SOURCE,
                        observed_at=now.format_iso(),
                    )
                )
                summary.updated += 1
                summary.details.append(PeriodRefresh(month=period.format_key(), status="updated"))
            else:
                summary.skipped += 1
                summary.details.append(PeriodRefresh(month=period.format_key(), status="no-data"))
        except Exception as e:
            logger.warning("Refresh failed for %s %s: %s", index_type, period.format_key(), e)
            summary.errors += 1
            summary.details.append(
                PeriodRefresh(
                    month=period.format_key(),
                    status="error",
                    error=str(e) or type(e).__name__,
                )
            )

        if delay_sec:
            await asyncio.sleep(delay_sec)

    summary.duration_ms = round((time.perf_counter() - started) * 1000)
    logger.info(
        "Refresh complete: %d total, %d updated, %d skipped, %d errors",
        summary.total,
        summary.updated,
        summary.skipped,
        summary.errors,
    )
    return summary
