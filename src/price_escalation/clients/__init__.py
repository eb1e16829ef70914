"""Remote index clients."""

from .mcp import McpIndexClient, parse_event_stream

__all__ = ["McpIndexClient", "parse_event_stream"]
