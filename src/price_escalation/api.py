"""FastAPI service for index lookup and escalation calculation.

Endpoints:
  GET  /indices?year=&month=  - WPI and CPI-IW for a month (null = unavailable)
  POST /escalation            - HAM escalation from four index values
  GET  /metrics               - cache / MCP counters and derived rates
  GET  /health                - liveness

Resources (index store, MCP client, resolver) are created in the lifespan
handler. With ESCALATION_DATABASE_URL unset the service runs on an
in-memory store preloaded with the seed series.
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from whenever import Instant

from price_escalation import __version__
from price_escalation.clients import McpIndexClient
from price_escalation.errors import InvalidInput
from price_escalation.formulas.escalation import escalate
from price_escalation.metrics import MetricsRecorder, metrics
from price_escalation.models import (
    CacheMetrics,
    EscalationConfig,
    EscalationRequest,
    EscalationResult,
    FallbackMetrics,
    IndicesResponse,
    MetricsBody,
    MetricsResponse,
    RemoteMetrics,
)
from price_escalation.resolver import IndexResolver
from price_escalation.store import open_store

logger = logging.getLogger("price_escalation.api")

# Module-level services - set during lifespan startup or by configure_services
_resolver: IndexResolver | None = None
_recorder: MetricsRecorder = metrics


def configure_services(
    *,
    resolver: IndexResolver | None,
    recorder: MetricsRecorder | None = None,
) -> None:
    """Inject the resolver (and optionally a metrics recorder).

    Called by the lifespan handler; tests call it directly.
    """
    global _resolver, _recorder
    _resolver = resolver
    _recorder = recorder or metrics


def _now_iso() -> str:
    """Return current UTC time as ISO 8601 string."""
    return Instant.now().format_iso()


# =============================================================================
# FASTAPI APPLICATION
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create store, MCP client and resolver on startup, close on shutdown."""
    config = EscalationConfig()
    async with AsyncExitStack() as stack:
        mcp = await stack.enter_async_context(
            McpIndexClient(config.mcp_url, timeout=config.http_timeout_sec)
        )
        try:
            if not config.database_url:
                logger.info("No database configured, using seeded in-memory index store")
            store = await stack.enter_async_context(open_store(config))
            configure_services(
                resolver=IndexResolver(store, mcp, remote_timeout=config.remote_timeout_sec)
            )
        except Exception:
            logger.exception("Failed to initialize index store")

        try:
            yield
        finally:
            configure_services(resolver=None)


app = FastAPI(
    title="Price Escalation API",
    description="HAM price escalation with tiered WPI / CPI-IW index resolution.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]  # Starlette middleware typing
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


def _get_resolver_or_503() -> IndexResolver:
    """Get the resolver or raise 503 if the store never came up."""
    if _resolver is None:
        raise HTTPException(status_code=503, detail="Index store unavailable")
    return _resolver


# =============================================================================
# ENDPOINTS
# =============================================================================


@app.get("/indices")
async def get_indices(
    year: int = Query(default=0),
    month: int = Query(default=0),
) -> IndicesResponse:
    """WPI and CPI-IW for a month. Estimates are flagged; null means unavailable."""
    if not year or not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Invalid year or month")

    resolver = _get_resolver_or_503()
    indices = await resolver.resolve_month(year, month)
    return IndicesResponse(wpi=indices.wpi, cpi=indices.cpi, year=year, month=month)


@app.post("/escalation")
async def calculate_escalation(request: EscalationRequest) -> EscalationResult:
    """Run the HAM formula on caller-supplied index values."""
    inputs = request.to_inputs()
    try:
        return escalate(inputs.work_value, inputs.base, inputs.current)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e)) from None


@app.get("/metrics")
async def get_metrics() -> MetricsResponse:
    """Cache performance and MCP API metrics for monitoring."""
    snapshot = _recorder.snapshot()
    return MetricsResponse(
        timestamp=_now_iso(),
        metrics=MetricsBody(
            cache=CacheMetrics(
                hits=snapshot.cache_hits,
                misses=snapshot.cache_misses,
                hit_rate=f"{snapshot.cache_hit_rate}%",
            ),
            mcp=RemoteMetrics(
                total_calls=snapshot.remote_calls,
                successes=snapshot.remote_successes,
                errors=snapshot.remote_errors,
                success_rate=f"{snapshot.remote_success_rate}%",
                avg_latency_ms=snapshot.avg_remote_latency_ms,
            ),
            fallbacks=FallbackMetrics(
                stale_serves=snapshot.stale_serves,
                estimate_serves=snapshot.estimate_serves,
            ),
            last_updated=snapshot.last_updated,
        ),
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "store": _resolver is not None}
