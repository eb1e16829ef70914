"""Metrics snapshot model for the index resolution service."""

from pydantic import BaseModel


class MetricsSnapshot(BaseModel):
    """Point-in-time copy of the process-wide counters plus derived rates."""

    cache_hits: int = 0
    cache_misses: int = 0
    remote_calls: int = 0
    remote_successes: int = 0
    remote_errors: int = 0
    remote_total_latency_ms: float = 0.0
    stale_serves: int = 0
    estimate_serves: int = 0
    last_updated: str

    # Derived
    cache_hit_rate: float = 0.0
    remote_success_rate: float = 100.0
    avg_remote_latency_ms: int = 0
