"""Temporal client and worker utilities.

Clients use the pydantic data converter so workflow and activity inputs
are plain Pydantic models.

Usage:
    from price_escalation.temporal import create_client, create_worker

    client = await create_client("localhost:7233")
    worker = create_worker(client, activities, "escalation-tasks")
"""

from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.worker import Worker
from temporalio.worker.workflow_sandbox import SandboxedWorkflowRunner

from price_escalation.activities import IndexRefreshActivities
from price_escalation.workflows import RefreshIndicesWorkflow

# Default task queue for escalation workflows
ESCALATION_TASK_QUEUE = "escalation-tasks"

ESCALATION_WORKFLOWS = [
    RefreshIndicesWorkflow,
]


async def create_client(
    target_host: str = "localhost:7233",
    namespace: str = "default",
) -> Client:
    """Create a Temporal client with the pydantic data converter.

    Args:
        target_host: Temporal server address (default: localhost:7233)
        namespace: Temporal namespace (default: default)

    Returns:
        Configured Temporal client
    """
    return await Client.connect(
        target_host,
        namespace=namespace,
        data_converter=pydantic_data_converter,
    )


def create_worker(
    client: Client,
    activities: IndexRefreshActivities,
    task_queue: str = ESCALATION_TASK_QUEUE,
) -> Worker:
    """Create a Temporal worker with the refresh workflow and activities.

    Args:
        client: Temporal client (must use the pydantic data converter)
        activities: Activity instance bound to a store and MCP client
        task_queue: Task queue name (default: escalation-tasks)

    Returns:
        Configured Temporal worker
    """
    return Worker(
        client,
        task_queue=task_queue,
        workflows=ESCALATION_WORKFLOWS,
        activities=[activities.refresh_indices],
        workflow_runner=SandboxedWorkflowRunner(
            restrictions=SandboxedWorkflowRunner().restrictions.with_passthrough_modules(
                "price_escalation",
            )
        ),
    )
