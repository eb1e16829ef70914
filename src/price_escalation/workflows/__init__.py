"""Temporal workflows for the price escalation service.

- RefreshIndicesWorkflow: daily refresh of the trailing WPI window

Each workflow takes a single Pydantic model as input.
"""

from price_escalation.models import RefreshWorkflowInput
from price_escalation.workflows.refresh import RefreshIndicesWorkflow

__all__ = [
    "RefreshIndicesWorkflow",
    "RefreshWorkflowInput",
]
