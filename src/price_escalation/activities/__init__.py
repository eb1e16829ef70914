"""Temporal activities for the price escalation service.

Activities perform I/O operations:
- Refresh: refetch WPI values from the MoSPI MCP server into the index store
"""

from .refresh import IndexRefreshActivities

__all__ = ["IndexRefreshActivities"]
