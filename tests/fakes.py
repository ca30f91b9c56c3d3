from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Union

from streamable_mcp.core.schemas import ToolDescriptor


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, *, text: Optional[str] = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        return json.loads(self.text)


Outcome = Union[FakeResponse, Exception]


class FakeSession:
    """Stands in for requests.Session; replays a fixed plan of outcomes."""

    def __init__(self, *plan: Outcome):
        self.headers: Dict[str, str] = {}
        self.plan: List[Outcome] = list(plan)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, json: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if not self.plan:
            raise AssertionError("unexpected extra request")
        outcome = self.plan.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def rpc_ok(result: Any, request_id: int = 1) -> FakeResponse:
    return FakeResponse(200, {"jsonrpc": "2.0", "id": request_id, "result": result})


def rpc_error(code: int, message: str, request_id: int = 1) -> FakeResponse:
    return FakeResponse(200, {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}})


class FakeToolInvoker:
    def __init__(self, tools: List[Dict[str, Any]], output: str = "tool output"):
        self.tools = [ToolDescriptor.model_validate(t) for t in tools]
        self.output = output
        self.calls: List[Dict[str, Any]] = []

    def get_server_names(self) -> List[str]:
        return ["docs"]

    def list_tools(self, server_name: str) -> List[ToolDescriptor]:
        return self.tools

    def call_tool_stream(
        self,
        server_name: str,
        tool_name: str,
        arguments: Dict[str, Any],
        on_chunk: Callable[[str], Any],
    ) -> str:
        self.calls.append({"server": server_name, "tool": tool_name, "arguments": arguments})
        on_chunk(self.output)
        return self.output


class FakeLLM:
    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def invoke_text(self, *, messages: List[Dict[str, Any]], model_id: Optional[str] = None, max_tokens: int = 2000) -> str:
        self.prompts.append(messages[-1]["content"])
        return self.answers.pop(0)
