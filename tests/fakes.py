"""Test doubles for the remote index source and the MoSPI MCP server."""

from __future__ import annotations

import asyncio
import json

import httpx

from price_escalation.models import IndexType

MCP_URL = "http://mcp.test/mcp"


def sse(payload: dict) -> str:
    return f"event: message\r\ndata: {json.dumps(payload)}\r\n\r\n"


def tool_result(request_id: int, inner: dict) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "result": {"content": [{"type": "text", "text": json.dumps(inner)}]},
    }


class FakeMcpServer:
    """Speaks just enough MCP for the client: initialize, notify, tools/call."""

    def __init__(self, index_value: object = "156.7") -> None:
        self.index_value = index_value
        self.requests: list[dict] = []
        self.session_headers: list[str | None] = []
        self.init_count = 0
        self.init_status = 200
        self.init_delay = 0.0
        self.session_header_name: str | None = "mcp-session-id"
        self.notify_error = False
        self.call_status = 200
        self.call_delay = 0.0
        self.call_payload: dict | None = None
        self.call_body: str | None = None

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.session_headers.append(request.headers.get("mcp-session-id"))

        if body["method"] == "initialize":
            self.init_count += 1
            if self.init_delay:
                await asyncio.sleep(self.init_delay)
            if self.init_status != 200:
                return httpx.Response(self.init_status)
            headers = {}
            if self.session_header_name:
                headers[self.session_header_name] = f"sess-{self.init_count}"
            return httpx.Response(
                200,
                headers=headers,
                json={"jsonrpc": "2.0", "id": body["id"], "result": {"protocolVersion": "x"}},
            )

        if body["method"] == "notifications/initialized":
            if self.notify_error:
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(202)

        if self.call_delay:
            await asyncio.sleep(self.call_delay)
        if self.call_status != 200:
            return httpx.Response(self.call_status, text="upstream error")
        if self.call_body is not None:
            text = self.call_body
        elif self.call_payload is not None:
            text = sse(self.call_payload)
        else:
            inner = {"statusCode": True, "data": [{"index_value": self.index_value}]}
            text = sse(tool_result(body["id"], inner))
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, text=text)


class FakeRemote:
    """In-process stand-in for McpIndexClient.

    `values` maps (year, month) to a float, None, or an exception to raise.
    Periods not in `values` fall back to `default`.
    """

    def __init__(
        self,
        values: dict[tuple[int, int], float | None | Exception] | None = None,
        *,
        default: float | None = None,
        delay: float = 0.0,
    ) -> None:
        self.values = values or {}
        self.default = default
        self.delay = delay
        self.calls: list[tuple[IndexType, int, int]] = []
        self.cancelled = 0

    async def fetch_index(self, index_type: IndexType, year: int, month: int) -> float | None:
        self.calls.append((index_type, year, month))
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        outcome = self.values.get((year, month), self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
