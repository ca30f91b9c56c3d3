"""MCP client facade for JSON-RPC-over-HTTP tool servers.

This module ties together the server registry, the retrying transport and
the chunk streamer. It exposes the operations callers need (list tools,
call a tool and stream its text) and attaches server/URL/tool context to
every error it raises.

All orchestration code should call this facade instead of issuing raw
HTTP requests or handling JSON-RPC envelopes directly.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

import requests
from pydantic import ValidationError

from .config import get_settings
from .errors import MalformedResponseError, MCPError
from .registry import ServerRegistry
from .schemas import ToolDescriptor
from .streaming import deliver, extract_text, paced_chunks
from .transport import RPCTransport
from streamable_mcp.adapters.tool_invoker import ToolInvoker


class StreamableMCPClient(ToolInvoker):
    def __init__(
        self,
        servers: Optional[Mapping[str, str]] = None,
        *,
        timeout_s: Optional[float] = None,
        max_retries: Optional[int] = None,
        chunk_size: Optional[int] = None,
        chunk_delay_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        cfg = get_settings()
        self.registry = ServerRegistry(servers if servers is not None else cfg.servers)
        self.chunk_size = chunk_size if chunk_size is not None else cfg.chunk_size
        self.chunk_delay_s = chunk_delay_s if chunk_delay_s is not None else cfg.chunk_delay_seconds
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        self._transport = RPCTransport(
            timeout_s=timeout_s if timeout_s is not None else cfg.timeout_seconds,
            max_retries=max_retries if max_retries is not None else cfg.max_retries,
            session=session,
            extra_headers=extra_headers,
        )
        self._logger = logging.getLogger(__name__)

    def get_server_names(self) -> List[str]:
        return self.registry.names()

    def list_tools(self, server_name: str) -> List[ToolDescriptor]:
        url = self.registry.validate(server_name)
        try:
            result = self._transport.send(url, "tools/list", {}).result
            raw_tools = result.get("tools") if isinstance(result, dict) else None
            try:
                tools = [ToolDescriptor.model_validate(t) for t in raw_tools or []]
            except ValidationError as e:
                raise MalformedResponseError(f"Invalid tool descriptor: {e}") from e
        except MCPError as e:
            raise e.with_context(server_name=server_name, url=url)

        self._logger.info("Found %d tools from %s", len(tools), server_name)
        return tools

    def call_tool(self, server_name: str, tool_name: str, arguments: Dict[str, Any]) -> Any:
        """Invoke a tool and return its raw result payload."""
        url = self.registry.validate(server_name)
        try:
            return self._transport.send(url, "tools/call", {"name": tool_name, "arguments": arguments}).result
        except MCPError as e:
            raise e.with_context(server_name=server_name, url=url, tool_name=tool_name)

    def call_tool_stream(
        self,
        server_name: str,
        tool_name: str,
        arguments: Dict[str, Any],
        on_chunk: Callable[[str], Any],
    ) -> str:
        """Invoke a tool and push its text to `on_chunk` in paced chunks.

        Nothing is delivered unless the call succeeded and the result was
        parsed. Returns the full streamed text.
        """
        result = self.call_tool(server_name, tool_name, arguments)
        text = deliver(result, on_chunk, chunk_size=self.chunk_size, delay_s=self.chunk_delay_s)
        self._logger.debug(
            "mcp.stream done",
            extra={"tool": tool_name, "server": server_name, "chars": len(text)},
        )
        return text

    def iter_tool_stream(self, server_name: str, tool_name: str, arguments: Dict[str, Any]) -> Iterator[str]:
        """Invoke a tool now and return a lazy iterator over its paced chunks."""
        result = self.call_tool(server_name, tool_name, arguments)
        return paced_chunks(extract_text(result), chunk_size=self.chunk_size, delay_s=self.chunk_delay_s)

    def ping(self, server_name: str) -> Dict[str, Any]:
        """Lightweight connectivity check measuring a tools/list roundtrip.

        Returns: { okay: bool, duration_ms: float, method: str, error?: str }
        """
        start = time.perf_counter()
        try:
            self.list_tools(server_name)
        except MCPError as e:
            return {"okay": False, "duration_ms": 0.0, "method": "tools/list", "error": str(e)}
        dur_ms = (time.perf_counter() - start) * 1000.0
        return {"okay": True, "duration_ms": dur_ms, "method": "tools/list"}

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "StreamableMCPClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
