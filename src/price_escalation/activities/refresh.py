"""Index refresh activity.

Activities hold a store and an MCP client, so they are methods on an
instance built once per worker rather than module-level functions.

Date/Time: Uses `whenever` library (UTC-first, Rust-backed).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from temporalio import activity
from whenever import TimeDelta

from price_escalation.models import RefreshIndicesInput, RefreshSummary
from price_escalation.refresh import refresh_window

if TYPE_CHECKING:
    from price_escalation.resolver import RemoteIndexSource
    from price_escalation.store import IndexStore


class IndexRefreshActivities:
    def __init__(
        self,
        store: IndexStore,
        client: RemoteIndexSource,
        *,
        remote_timeout: float = 5.0,
    ) -> None:
        self._store = store
        self._client = client
        self._remote_timeout = remote_timeout

    @activity.defn(name="refresh_indices")
    async def refresh_indices(self, input: RefreshIndicesInput) -> RefreshSummary:
        """Refresh WPI for each requested period.

        Args:
            input: RefreshIndicesInput with the periods and pacing

        Returns:
            RefreshSummary with per-period outcomes
        """
        activity.logger.info(f"Refreshing {len(input.periods)} WPI periods")

        summary = await refresh_window(
            self._store,
            self._client,
            input.periods,
            freshness=TimeDelta(hours=input.freshness_hours),
            delay_sec=input.delay_sec,
            remote_timeout=self._remote_timeout,
        )

        activity.logger.info(
            f"Refresh finished: {summary.updated} updated, {summary.skipped} skipped, "
            f"{summary.errors} errors in {summary.duration_ms}ms"
        )
        return summary
