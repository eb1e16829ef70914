"""Index records and resolution results.

Index taxonomy:
- WPI (primary): Wholesale Price Index, All Commodities, 2011-12=100.
  Published by the Office of Economic Adviser; served by the MoSPI MCP server.
- CPI-IW (secondary): Consumer Price Index for Industrial Workers, 2016=100.
  Published by the Labour Bureau; no remote source, seeded only.

All timestamp fields are ISO 8601 strings (whenever.Instant at the edges).
"""

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator
from whenever import Instant

# Source labels stored alongside each record
REMOTE_SOURCE = "MoSPI MCP"
WPI_SEED_SOURCE = "OEA Seed"
CPI_SEED_SOURCE = "Labour Bureau"

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip


class IndexType(StrEnum):
    WPI = "WPI"
    CPI_IW = "CPI-IW"

    @property
    def supports_remote(self) -> bool:
        """Only WPI has a remote source (the MoSPI MCP server)."""
        return self is IndexType.WPI


class IndexOrigin(StrEnum):
    CACHED = "cached"
    REMOTE = "remote"
    ESTIMATE_FROM_STORE = "estimate_from_store"


def _now_iso() -> str:
    return Instant.now().format_iso()


class IndexRecord(BaseModel):
    """One published index value, keyed by (index_type, year, month)."""

    index_type: IndexType
    year: int
    month: int = Field(ge=1, le=12)
    value: float = Field(gt=0)
    source: str
    observed_at: str = Field(default_factory=_now_iso, description="ISO 8601 timestamp")

    @property
    def key(self) -> tuple[IndexType, int, int]:
        return (self.index_type, self.year, self.month)

    @property
    def is_remote(self) -> bool:
        return self.source == REMOTE_SOURCE

    @property
    def period_label(self) -> str:
        """Short human-readable period, e.g. "Oct 2024"."""
        return f"{MONTH_ABBREVIATIONS[self.month - 1]} {self.year}"


class ResolvedIndex(BaseModel):
    """Result of a tiered index lookup. Never persisted."""

    value: float
    origin: IndexOrigin
    is_estimate: bool = False
    estimate_label: str | None = Field(
        default=None,
        description="Period whose value was substituted, set only for estimates",
    )

    @model_validator(mode="after")
    def _estimate_needs_label(self) -> "ResolvedIndex":
        if self.is_estimate and not self.estimate_label:
            msg = "estimate results must name the substituted period"
            raise ValueError(msg)
        return self


class MonthIndices(BaseModel):
    """Both indices for one (year, month). None means data unavailable."""

    year: int
    month: int = Field(ge=1, le=12)
    wpi: ResolvedIndex | None = None
    cpi: ResolvedIndex | None = None
