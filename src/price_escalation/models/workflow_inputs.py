"""Workflow and activity input models.

Each workflow/activity takes a single Pydantic model so the Temporal
pydantic data converter can round-trip it.
"""

from pydantic import BaseModel, Field


class RefreshIndicesInput(BaseModel):
    """Input for the refresh_indices activity."""

    periods: list[tuple[int, int]] = Field(description="(year, month) pairs to refresh")
    freshness_hours: float = Field(default=24.0, gt=0)
    delay_sec: float = 0.5


class RefreshWorkflowInput(BaseModel):
    """Input for RefreshIndicesWorkflow."""

    years_back: int = 1
    freshness_hours: float = Field(default=24.0, gt=0)
    delay_sec: float = 0.5
    interval_hours: float = Field(default=24.0, description="Time between refresh runs")
    activity_timeout_sec: float = Field(
        default=600.0, description="start_to_close timeout for one refresh run"
    )
