"""In-process metrics for index resolution.

Tracks cache performance and MCP latency for observability. Counters live
for the process lifetime and reset on restart; `reset()` exists for test
isolation only.

Updates take a lock so increments from worker threads (sync FastAPI
handlers, Temporal activity executors) never interleave.
"""

import threading

from whenever import Instant

from price_escalation.models import MetricsSnapshot


def _round1(value: float) -> float:
    return round(value * 10) / 10


class MetricsRecorder:
    """Process-wide cache/remote counters with derived rates."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reset_unlocked()

    def _reset_unlocked(self) -> None:
        self._cache_hits = 0
        self._cache_misses = 0
        self._remote_calls = 0
        self._remote_successes = 0
        self._remote_errors = 0
        self._remote_total_latency_ms = 0.0
        self._stale_serves = 0
        self._estimate_serves = 0
        self._last_updated = Instant.now()

    def record_cache_hit(self) -> None:
        with self._lock:
            self._cache_hits += 1
            self._last_updated = Instant.now()

    def record_cache_miss(self) -> None:
        with self._lock:
            self._cache_misses += 1
            self._last_updated = Instant.now()

    def record_remote_call(self, success: bool, latency_ms: float) -> None:
        """Record one MCP fetch attempt and its latency."""
        with self._lock:
            self._remote_calls += 1
            self._remote_total_latency_ms += latency_ms
            if success:
                self._remote_successes += 1
            else:
                self._remote_errors += 1
            self._last_updated = Instant.now()

    def record_stale_serve(self) -> None:
        """The remote tier failed and an older stored value was served instead."""
        with self._lock:
            self._stale_serves += 1
            self._last_updated = Instant.now()

    def record_estimate_serve(self) -> None:
        with self._lock:
            self._estimate_serves += 1
            self._last_updated = Instant.now()

    def snapshot(self) -> MetricsSnapshot:
        """Consistent copy of all counters plus derived rates.

        - cache_hit_rate: % of store lookups that hit (0 with no lookups)
        - remote_success_rate: % of MCP calls that succeeded (100 with no calls)
        - avg_remote_latency_ms: mean MCP latency, rounded (0 with no calls)
        """
        with self._lock:
            lookups = self._cache_hits + self._cache_misses
            cache_hit_rate = self._cache_hits / lookups * 100 if lookups else 0.0
            if self._remote_calls:
                success_rate = self._remote_successes / self._remote_calls * 100
                avg_latency = round(self._remote_total_latency_ms / self._remote_calls)
            else:
                success_rate = 100.0
                avg_latency = 0

            return MetricsSnapshot(
                cache_hits=self._cache_hits,
                cache_misses=self._cache_misses,
                remote_calls=self._remote_calls,
                remote_successes=self._remote_successes,
                remote_errors=self._remote_errors,
                remote_total_latency_ms=self._remote_total_latency_ms,
                stale_serves=self._stale_serves,
                estimate_serves=self._estimate_serves,
                last_updated=self._last_updated.format_iso(),
                cache_hit_rate=_round1(cache_hit_rate),
                remote_success_rate=_round1(success_rate),
                avg_remote_latency_ms=avg_latency,
            )

    def reset(self) -> None:
        """Zero every counter. Intended for test isolation."""
        with self._lock:
            self._reset_unlocked()


# Initialized once at import; components default to this instance.
metrics = MetricsRecorder()
