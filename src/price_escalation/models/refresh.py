"""Batch refresh summaries."""

from typing import Literal

from pydantic import BaseModel, Field

RefreshStatus = Literal["fresh", "updated", "no-data", "error"]


class PeriodRefresh(BaseModel):
    """Outcome for one (year, month) in a refresh run."""

    month: str = Field(description="Period key, YYYY-MM")
    status: RefreshStatus
    error: str | None = None


class RefreshSummary(BaseModel):
    total: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    duration_ms: int = 0
    details: list[PeriodRefresh] = Field(default_factory=list)
