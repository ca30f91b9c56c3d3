"""Error taxonomy shared by the registry, transport and client facade.

Every error carries optional call context (server name, URL, tool name)
so callers can diagnose a failure without re-deriving call history. The
facade attaches that context with `with_context()` and re-raises the
same exception object, so the concrete type survives.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional


class MCPError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        server_name: Optional[str] = None,
        url: Optional[str] = None,
        tool_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.server_name = server_name
        self.url = url
        self.tool_name = tool_name

    def with_context(
        self,
        *,
        server_name: Optional[str] = None,
        url: Optional[str] = None,
        tool_name: Optional[str] = None,
    ) -> "MCPError":
        if server_name is not None:
            self.server_name = server_name
        if url is not None:
            self.url = url
        if tool_name is not None:
            self.tool_name = tool_name
        return self

    def _target(self) -> str:
        if self.server_name and self.url:
            return f"{self.server_name} ({self.url})"
        return self.server_name or self.url or ""

    def __str__(self) -> str:
        target = self._target()
        if self.tool_name and target:
            return f"Failed to call tool '{self.tool_name}' on {target}: {self.message}"
        if target:
            return f"Request to {target} failed: {self.message}"
        return self.message


class UnknownServerError(MCPError):
    def __init__(self, server_name: str, known_servers: Iterable[str]):
        self.known_servers: List[str] = list(known_servers)
        available = ", ".join(self.known_servers) or "(none)"
        super().__init__(
            f"Server '{server_name}' not found. Available servers: {available}",
            server_name=server_name,
        )

    def __str__(self) -> str:
        # The requested name is already part of the message.
        return self.message


class TransportError(MCPError):
    """HTTP-layer failure. Status fields are None for network-level errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        body: Optional[str] = None,
        **context: Any,
    ):
        super().__init__(message, **context)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class TransientTransportError(TransportError):
    pass


class NonTransientTransportError(TransportError):
    pass


class MalformedResponseError(NonTransientTransportError):
    pass


class RPCProtocolError(MCPError):
    def __init__(self, code: Any, message: str, data: Any = None, **context: Any):
        super().__init__(f"JSON-RPC Error ({code}): {message}", **context)
        self.code = code
        self.rpc_message = message
        self.data = data


class LLMInvokeError(RuntimeError):
    pass


class ToolChoiceError(ValueError):
    pass
