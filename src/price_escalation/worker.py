"""Escalation worker entry point.

Starts a Temporal worker that runs the index refresh workflow and its
activity. On boot, starts RefreshIndicesWorkflow (idempotent via a fixed
workflow ID), then enters the polling loop.

Usage:
    python -m price_escalation.worker
    # or
    price-escalation-worker

Environment variables (see EscalationConfig):
    ESCALATION_TEMPORAL_HOST      - Temporal server address (default: localhost:7233)
    ESCALATION_TEMPORAL_NAMESPACE - Temporal namespace (default: default)
    ESCALATION_TASK_QUEUE         - Task queue name (default: escalation-tasks)
    ESCALATION_MCP_URL            - MoSPI MCP server endpoint
    ESCALATION_DATABASE_URL       - Postgres DSN for the index store (required)
"""

import asyncio
import logging
import signal

import asyncpg
from temporalio.client import Client  # noqa: TC002
from temporalio.common import WorkflowIDConflictPolicy

from price_escalation.activities import IndexRefreshActivities
from price_escalation.clients import McpIndexClient
from price_escalation.models import EscalationConfig, RefreshWorkflowInput
from price_escalation.store import PostgresIndexStore
from price_escalation.temporal import create_client, create_worker

logger = logging.getLogger(__name__)

# Deterministic workflow ID for idempotent starts
REFRESH_WORKFLOW_ID = "escalation-refresh-indices"


async def _start_workflows(client: Client, config: EscalationConfig) -> None:
    """Start the long-running refresh workflow.

    Uses WorkflowIDConflictPolicy.USE_EXISTING so this is idempotent -
    safe to call on every worker boot without duplicating workflows.
    """
    logger.info("Starting RefreshIndicesWorkflow: %s", REFRESH_WORKFLOW_ID)
    await client.start_workflow(
        "RefreshIndicesWorkflow",
        RefreshWorkflowInput(
            years_back=config.refresh_years_back,
            freshness_hours=config.refresh_freshness_hours,
            delay_sec=config.refresh_delay_sec,
        ),
        id=REFRESH_WORKFLOW_ID,
        task_queue=config.task_queue,
        id_conflict_policy=WorkflowIDConflictPolicy.USE_EXISTING,
    )


async def run_worker() -> None:
    """Start workflows, then run the worker until interrupted."""
    config = EscalationConfig()
    if not config.database_url:
        logger.error("ESCALATION_DATABASE_URL not set, refusing to start worker")
        return

    logger.info(
        "Starting escalation worker: address=%s namespace=%s task_queue=%s",
        config.temporal_host,
        config.temporal_namespace,
        config.task_queue,
    )

    pool = await asyncpg.create_pool(
        config.database_url,
        min_size=config.pool_min_size,
        max_size=config.pool_max_size,
    )
    try:
        async with McpIndexClient(config.mcp_url, timeout=config.http_timeout_sec) as mcp:
            activities = IndexRefreshActivities(
                PostgresIndexStore(pool),
                mcp,
                remote_timeout=config.remote_timeout_sec,
            )
            client = await create_client(config.temporal_host, config.temporal_namespace)

            # Start workflows before entering the polling loop
            await _start_workflows(client, config)

            worker = create_worker(client, activities, config.task_queue)
            logger.info("Escalation worker polling for tasks")
            await worker.run()
    finally:
        await pool.close()


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    loop = asyncio.new_event_loop()

    # Graceful shutdown on SIGTERM/SIGINT
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, lambda: loop.stop())

    try:
        loop.run_until_complete(run_worker())
    except KeyboardInterrupt:
        logger.info("Worker interrupted, shutting down")
    finally:
        loop.close()
        logger.info("Worker stopped")


if __name__ == "__main__":
    main()
