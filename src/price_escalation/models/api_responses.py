"""Pydantic request/response models for the FastAPI JSON API."""

from pydantic import BaseModel

from .escalation import EscalationInputs, IndexPair
from .indices import ResolvedIndex  # noqa: TC001

# =============================================================================
# GET /indices
# =============================================================================


class IndicesResponse(BaseModel):
    """WPI and CPI-IW for one month. A null index means data unavailable."""

    wpi: ResolvedIndex | None = None
    cpi: ResolvedIndex | None = None
    year: int
    month: int


# =============================================================================
# POST /escalation
# =============================================================================


class EscalationRequest(BaseModel):
    work_value: float
    wpi_base: float
    cpi_base: float
    wpi_current: float
    cpi_current: float

    def to_inputs(self) -> EscalationInputs:
        return EscalationInputs(
            work_value=self.work_value,
            base=IndexPair(self.wpi_base, self.cpi_base),
            current=IndexPair(self.wpi_current, self.cpi_current),
        )


# =============================================================================
# GET /metrics
# =============================================================================


class CacheMetrics(BaseModel):
    hits: int
    misses: int
    hit_rate: str


class RemoteMetrics(BaseModel):
    total_calls: int
    successes: int
    errors: int
    success_rate: str
    avg_latency_ms: int


class FallbackMetrics(BaseModel):
    stale_serves: int
    estimate_serves: int


class MetricsBody(BaseModel):
    cache: CacheMetrics
    mcp: RemoteMetrics
    fallbacks: FallbackMetrics
    last_updated: str


class MetricsResponse(BaseModel):
    status: str = "ok"
    timestamp: str
    metrics: MetricsBody
