from __future__ import annotations

from typing import Any, Callable, Dict, List, Protocol

from streamable_mcp.core.schemas import ToolDescriptor


class ToolInvoker(Protocol):
    """Abstract interface for invoking MCP tools on named servers.

    Implementations may call out to MCP servers over JSON-RPC/HTTP or any
    other transport; the assistant only depends on this surface.
    """

    def get_server_names(self) -> List[str]:
        ...

    def list_tools(self, server_name: str) -> List[ToolDescriptor]:
        ...

    def call_tool_stream(
        self,
        server_name: str,
        tool_name: str,
        arguments: Dict[str, Any],
        on_chunk: Callable[[str], Any],
    ) -> str:
        ...
