"""Pydantic models for the price escalation service.

Model groups:
- Indices: index records in the store and tiered resolution results
- Escalation: calculator inputs, results and weighted breakdown
- Metrics: counters snapshot for the resolution service
- Refresh: batch refresh summaries and Temporal inputs
- API: request/response bodies for the FastAPI service
"""

from .api_responses import (
    CacheMetrics,
    EscalationRequest,
    FallbackMetrics,
    IndicesResponse,
    MetricsBody,
    MetricsResponse,
    RemoteMetrics,
)
from .config import EscalationConfig
from .escalation import EscalationBreakdown, EscalationInputs, EscalationResult, IndexPair
from .indices import (
    CPI_SEED_SOURCE,
    REMOTE_SOURCE,
    WPI_SEED_SOURCE,
    IndexOrigin,
    IndexRecord,
    IndexType,
    MonthIndices,
    ResolvedIndex,
)
from .metrics import MetricsSnapshot
from .refresh import PeriodRefresh, RefreshSummary
from .workflow_inputs import RefreshIndicesInput, RefreshWorkflowInput

__all__ = [
    # Indices
    "IndexType",
    "IndexOrigin",
    "IndexRecord",
    "ResolvedIndex",
    "MonthIndices",
    "REMOTE_SOURCE",
    "WPI_SEED_SOURCE",
    "CPI_SEED_SOURCE",
    # Escalation
    "IndexPair",
    "EscalationInputs",
    "EscalationBreakdown",
    "EscalationResult",
    # Metrics
    "MetricsSnapshot",
    # Refresh
    "PeriodRefresh",
    "RefreshSummary",
    "RefreshIndicesInput",
    "RefreshWorkflowInput",
    # Config
    "EscalationConfig",
    # API
    "IndicesResponse",
    "EscalationRequest",
    "CacheMetrics",
    "RemoteMetrics",
    "FallbackMetrics",
    "MetricsBody",
    "MetricsResponse",
]
