"""Price Escalation - HAM escalation calculator with tiered index resolution.

Quick Start:
    from price_escalation.clients.mcp import McpIndexClient
    from price_escalation.formulas.escalation import escalate
    from price_escalation.models import IndexPair, IndexType
    from price_escalation.resolver import IndexResolver
    from price_escalation.store import MemoryIndexStore

    async with McpIndexClient("http://localhost:8000/mcp") as client:
        resolver = IndexResolver(MemoryIndexStore(), client)
        wpi = await resolver.resolve(IndexType.WPI, 2024, 10)

    result = escalate(8_745_000, IndexPair(148.8, 126.0), IndexPair(156.7, 144.5))
"""

__version__ = "0.1.0"
