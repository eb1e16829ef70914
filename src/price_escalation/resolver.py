"""Tiered index resolution.

Lookup order per (index_type, year, month):
1. Exact record in the store (no remote call)
2. Remote fetch under a deadline, written through to the store
   (index types with a remote source only)
3. Most recent stored record of that type, served as an estimate
4. Nothing stored at all -> None (data unavailable)

Degraded paths never raise. Store errors do propagate: a broken store is
not a "no data" condition.

Concurrent resolutions of the same key share one in-flight task, so a
burst of identical requests costs one remote call and one store write.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from price_escalation.metrics import MetricsRecorder, metrics
from price_escalation.models import (
    REMOTE_SOURCE,
    IndexOrigin,
    IndexRecord,
    IndexType,
    MonthIndices,
    ResolvedIndex,
)

if TYPE_CHECKING:
    from price_escalation.store import IndexStore

logger = logging.getLogger("price_escalation.resolver")

DEFAULT_REMOTE_TIMEOUT_SEC = 5.0

_Key = tuple[IndexType, int, int]


class RemoteIndexSource(Protocol):
    async def fetch_index(self, index_type: IndexType, year: int, month: int) -> float | None:
        ...


class IndexResolver:
    """Resolves index values through store, remote and estimate tiers."""

    def __init__(
        self,
        store: IndexStore,
        client: RemoteIndexSource | None = None,
        *,
        remote_timeout: float = DEFAULT_REMOTE_TIMEOUT_SEC,
        recorder: MetricsRecorder | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._remote_timeout = remote_timeout
        self._metrics = recorder or metrics
        self._inflight: dict[_Key, asyncio.Task[ResolvedIndex | None]] = {}
        self._waiters: dict[asyncio.Task[ResolvedIndex | None], int] = {}

    @property
    def store(self) -> IndexStore:
        return self._store

    async def resolve(self, index_type: IndexType, year: int, month: int) -> ResolvedIndex | None:
        """Resolve one index value. Returns None only when every tier is exhausted."""
        if not 1 <= month <= 12:
            msg = f"month must be in 1..12, got {month}"
            raise ValueError(msg)

        key = (index_type, year, month)
        task = self._inflight.get(key)
        if task is None or task.done() or task.cancelling():
            task = asyncio.create_task(
                self._resolve_tiers(index_type, year, month),
                name=f"resolve-{index_type}-{year}-{month:02d}",
            )
            self._inflight[key] = task
            task.add_done_callback(lambda t, key=key: self._forget(key, t))
        else:
            logger.debug("Joining in-flight resolution for %s %d-%02d", index_type, year, month)

        self._waiters[task] = self._waiters.get(task, 0) + 1
        try:
            # Shielded so one caller's cancellation doesn't cancel the work
            # other callers are waiting on.
            return await asyncio.shield(task)
        finally:
            remaining = self._waiters[task] - 1
            if remaining:
                self._waiters[task] = remaining
            else:
                del self._waiters[task]
                if not task.done():
                    # Last waiter gave up; tear down the remote call. Newcomers
                    # for this key start fresh instead of joining the dying task.
                    self._forget(key, task)
                    task.cancel()

    def _forget(self, key: _Key, task: asyncio.Task[ResolvedIndex | None]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def resolve_month(self, year: int, month: int) -> MonthIndices:
        """Resolve WPI and CPI-IW for one month concurrently."""
        wpi, cpi = await asyncio.gather(
            self.resolve(IndexType.WPI, year, month),
            self.resolve(IndexType.CPI_IW, year, month),
        )
        return MonthIndices(year=year, month=month, wpi=wpi, cpi=cpi)

    # -------------------------------------------------------------------------
    # Tiers
    # -------------------------------------------------------------------------

    async def _resolve_tiers(
        self, index_type: IndexType, year: int, month: int
    ) -> ResolvedIndex | None:
        # 1. Store
        record = await self._store.get_exact(index_type, year, month)
        if record is not None:
            self._metrics.record_cache_hit()
            return ResolvedIndex(
                value=record.value,
                origin=IndexOrigin.REMOTE if record.is_remote else IndexOrigin.CACHED,
            )
        self._metrics.record_cache_miss()

        # 2. Remote
        remote_attempted = False
        if index_type.supports_remote and self._client is not None:
            remote_attempted = True
            value = await self._fetch_remote(index_type, year, month)
            if value is not None:
                await self._store.upsert(
                    IndexRecord(
                        index_type=index_type,
                        year=year,
                        month=month,
                        value=value,
                        source=REMOTE_SOURCE,
                    )
                )
                return ResolvedIndex(value=value, origin=IndexOrigin.REMOTE)
            logger.warning(
                "[%s] MCP unavailable for %d-%02d, using fallback", index_type, year, month
            )

        # 3. Estimate from the latest stored period
        fallback = await self._store.get_most_recent(index_type, before=(year, month))
        if fallback is None:
            logger.warning("[%s] No data at all for %d-%02d", index_type, year, month)
            return None

        if remote_attempted:
            self._metrics.record_stale_serve()
        self._metrics.record_estimate_serve()
        logger.info(
            "[%s] Serving %s as estimate for %d-%02d",
            index_type,
            fallback.period_label,
            year,
            month,
        )
        return ResolvedIndex(
            value=fallback.value,
            origin=IndexOrigin.ESTIMATE_FROM_STORE,
            is_estimate=True,
            estimate_label=fallback.period_label,
        )

    async def _fetch_remote(self, index_type: IndexType, year: int, month: int) -> float | None:
        """Remote fetch bounded by the deadline. Expiry cancels the request."""
        assert self._client is not None
        try:
            async with asyncio.timeout(self._remote_timeout):
                return await self._client.fetch_index(index_type, year, month)
        except TimeoutError:
            logger.warning(
                "[%s] MCP timeout after %.1fs for %d-%02d",
                index_type,
                self._remote_timeout,
                year,
                month,
            )
        except Exception:
            logger.exception("[%s] Remote source raised for %d-%02d", index_type, year, month)
        return None
