"""Configuration for the price escalation service.

All settings can be overridden with ESCALATION_-prefixed environment
variables, e.g. ESCALATION_MCP_URL or ESCALATION_DATABASE_URL.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class EscalationConfig(BaseSettings):
    """Main configuration for the price escalation service."""

    # MoSPI MCP Configuration
    mcp_url: str = Field(
        default="http://localhost:8000/mcp", description="MoSPI MCP server endpoint"
    )
    remote_timeout_sec: float = Field(
        default=5.0,
        gt=0,
        description="Deadline for a single remote index fetch before falling back",
    )
    http_timeout_sec: float = Field(
        default=30.0, gt=0, description="Transport-level timeout for MCP requests"
    )

    # Store Configuration
    database_url: str | None = Field(
        default=None,
        description="Postgres DSN for the index store; in-memory store when unset",
    )
    pool_min_size: int = Field(default=1, ge=0)
    pool_max_size: int = Field(default=5, ge=1)

    # Temporal Configuration
    temporal_host: str = Field(default="localhost:7233", description="Temporal server address")
    temporal_namespace: str = Field(default="default", description="Temporal namespace")
    task_queue: str = Field(default="escalation-tasks", description="Temporal task queue name")

    # Batch refresh Configuration
    refresh_years_back: int = Field(
        default=1, ge=0, description="Whole years before the current one to refresh"
    )
    refresh_freshness_hours: float = Field(
        default=24.0, gt=0, description="Remote records younger than this are not refetched"
    )
    refresh_delay_sec: float = Field(
        default=0.5, ge=0, description="Pause between remote calls to respect rate limits"
    )

    model_config = {"env_prefix": "ESCALATION_"}
