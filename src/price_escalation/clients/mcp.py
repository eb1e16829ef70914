"""MoSPI MCP client for WPI values.

The MCP server speaks JSON-RPC 2.0 over HTTP POST and requires a session
handshake before tool calls:
1. POST initialize -> session id in the `mcp-session-id` response header
2. POST notifications/initialized (with session id), best-effort
3. POST tools/call (with session id)

The session id is cached on the client and reused until a call fails, at
which point it is discarded and the next call handshakes again. Handshakes
are single-flight: concurrent first callers share one.

Responses are SSE (text/event-stream) with CRLF line endings, e.g.
"event: message\\r\\ndata: {...}\\r\\n\\r\\n". Only the first `data: ` line
is read.

Failures never escape `fetch_index`: transport errors, bad statuses and
malformed payloads all come back as None.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import re
import time
from typing import Any

import httpx

from price_escalation import __version__
from price_escalation.errors import SessionFailure, TransportFailure
from price_escalation.metrics import MetricsRecorder, metrics
from price_escalation.models import IndexType

logger = logging.getLogger("price_escalation.clients.mcp")

PROTOCOL_VERSION = "2024-11-05"
SESSION_HEADER = "Mcp-Session-Id"
DATA_PREFIX = "data: "

# Tool and filter values understood by the MoSPI MCP server
GET_DATA_TOOL = "4_get_data"
ALL_COMMODITIES_GROUP = "1000000000"

_BASE_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/event-stream",
}

_LINE_SPLIT = re.compile(r"\r?\n")


def parse_event_stream(body: str) -> dict[str, Any] | None:
    """Return the JSON payload of the first `data: ` line, or None.

    Raises:
        json.JSONDecodeError: the data line is not valid JSON
    """
    for line in _LINE_SPLIT.split(body):
        if line.startswith(DATA_PREFIX):
            return json.loads(line[len(DATA_PREFIX) :].strip())
    return None


def _extract_index_value(payload: dict[str, Any]) -> float | None:
    """Pull the index reading out of a tools/call JSON-RPC response.

    Standard form: result.content[0].text is a JSON document with
    `statusCode` and `data[0].index_value`. Some servers put `data`
    directly on the result instead.
    """
    if payload.get("error"):
        logger.error("MCP JSON-RPC error: %s", payload["error"])
        return None

    result = payload.get("result")
    if not result:
        return None

    if result.get("isError"):
        logger.error("MCP tool returned error")
        return None

    content = result.get("content")
    if isinstance(content, list) and content:
        text = content[0].get("text")
        if not text:
            return None
        inner = json.loads(text)
        if not inner.get("statusCode") or not inner.get("data"):
            return None
        raw = inner["data"][0].get("index_value")
    elif isinstance(result.get("data"), list) and result["data"]:
        raw = result["data"][0].get("index_value")
    else:
        return None

    if raw is None or raw == "":
        return None
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class McpIndexClient:
    """Session-aware client for the MoSPI MCP server.

    One instance per process, shared by reference. The session id and
    request counter live on the instance, never at module level.
    """

    def __init__(
        self,
        url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        recorder: MetricsRecorder | None = None,
    ) -> None:
        self._url = url
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._metrics = recorder or metrics
        self._session_id: str | None = None
        self._next_request_id = 0
        self._session_lock = asyncio.Lock()

    async def __aenter__(self) -> McpIndexClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def reset_session(self) -> None:
        """Forget the session so the next call handshakes again."""
        self._session_id = None

    def _discard_session(self, session_id: str | None) -> None:
        # Only drop the session that failed; a concurrent caller may already
        # have replaced it with a fresh one.
        if session_id is not None and self._session_id == session_id:
            self._session_id = None

    def _request_id(self) -> int:
        self._next_request_id += 1
        return self._next_request_id

    # -------------------------------------------------------------------------
    # Handshake
    # -------------------------------------------------------------------------

    async def _ensure_session(self) -> str:
        if self._session_id is not None:
            return self._session_id
        async with self._session_lock:
            if self._session_id is None:
                self._session_id = await self._handshake()
            return self._session_id

    async def _handshake(self) -> str:
        logger.info("Initializing MCP session: %s", self._url)
        response = await self._http.post(
            self._url,
            headers=_BASE_HEADERS,
            json={
                "jsonrpc": "2.0",
                "id": self._request_id(),
                "method": "initialize",
                "params": {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {},
                    "clientInfo": {"name": "price-escalation", "version": __version__},
                },
            },
        )
        if not response.is_success:
            msg = f"MCP init failed: {response.status_code}"
            raise TransportFailure(msg)

        # httpx headers are case-insensitive
        session_id = response.headers.get(SESSION_HEADER)
        if not session_id:
            msg = "No session ID from MCP server"
            raise SessionFailure(msg)

        # Fire-and-forget: the server's answer is not checked and a failure
        # here is invisible to callers.
        try:
            await self._http.post(
                self._url,
                headers={**_BASE_HEADERS, SESSION_HEADER: session_id},
                json={"jsonrpc": "2.0", "method": "notifications/initialized", "params": {}},
            )
        except httpx.HTTPError as e:
            logger.debug("initialized notification failed: %s", e)

        return session_id

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    async def _query(self, session_id: str, year: int, month: int) -> float | None:
        response = await self._http.post(
            self._url,
            headers={**_BASE_HEADERS, SESSION_HEADER: session_id},
            json={
                "jsonrpc": "2.0",
                "id": self._request_id(),
                "method": "tools/call",
                "params": {
                    "name": GET_DATA_TOOL,
                    "arguments": {
                        "dataset": "WPI",
                        "filters": {
                            "year": str(year),
                            "month_code": str(month),
                            "major_group_code": ALL_COMMODITIES_GROUP,
                        },
                    },
                },
            },
        )
        if not response.is_success:
            msg = f"MCP request failed: {response.status_code}"
            raise TransportFailure(msg)

        payload = parse_event_stream(response.text)
        if payload is None:
            logger.error("No data line in MCP SSE response")
            return None
        return _extract_index_value(payload)

    async def fetch_index(self, index_type: IndexType, year: int, month: int) -> float | None:
        """Fetch one index value, or None when the server has none.

        Never raises for remote problems. Cancellation (e.g. a resolver
        timeout) drops the session and propagates so the in-flight request
        is torn down.
        """
        if not index_type.supports_remote:
            return None

        started = time.perf_counter()
        session_id: str | None = None
        value: float | None = None
        try:
            session_id = await self._ensure_session()
            value = await self._query(session_id, year, month)
        except asyncio.CancelledError:
            self._discard_session(session_id)
            self._metrics.record_remote_call(False, _elapsed_ms(started))
            raise
        except Exception as e:
            logger.error("MCP fetch error for %s %d-%02d: %s", index_type, year, month, e)
            self._discard_session(session_id)
            self._metrics.record_remote_call(False, _elapsed_ms(started))
            return None

        self._metrics.record_remote_call(value is not None, _elapsed_ms(started))
        return value

    async def fetch_wpi(self, year: int, month: int) -> float | None:
        """Fetch WPI (All Commodities) for a month."""
        return await self.fetch_index(IndexType.WPI, year, month)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
