from __future__ import annotations

import json

import pytest

from fakes import FakeLLM, FakeToolInvoker
from streamable_mcp.assistant.formatting import format_tools
from streamable_mcp.assistant.service import ToolAssistant, parse_tool_choice
from streamable_mcp.core.errors import ToolChoiceError

TOOLS = [{
    "name": "search_documentation",
    "description": "Search AWS docs",
    "inputSchema": {"type": "object", "properties": {"search_phrase": {"type": "string"}}},
}]


def _choice(**kwargs) -> str:
    return json.dumps(kwargs)


def test_parse_tool_choice_strips_code_fences():
    text = '```json\n{"shouldUseTool": true, "tool": "t", "args": {"q": 1}, "reasoning": "r"}\n```'
    choice = parse_tool_choice(text)
    assert choice.should_use_tool is True
    assert choice.tool == "t"
    assert choice.args == {"q": 1}


def test_parse_tool_choice_rejects_garbage():
    with pytest.raises(ToolChoiceError):
        parse_tool_choice("I think you should use a tool")


def test_tool_answer_streams_output_without_summary():
    invoker = FakeToolInvoker(TOOLS, output="Lambda runs code.")
    llm = FakeLLM(_choice(shouldUseTool=True, tool="search_documentation", args={"search_phrase": "lambda"}, reasoning="docs"))
    assistant = ToolAssistant(invoker, llm, server_name="docs")
    assistant.load_tools()
    received = []

    reply = assistant.answer("How does AWS Lambda work?", received.append)

    assert reply.used_tool is True
    assert reply.tool == "search_documentation"
    assert reply.summary is None
    assert received == ["Lambda runs code."]
    assert invoker.calls == [{"server": "docs", "tool": "search_documentation", "arguments": {"search_phrase": "lambda"}}]
    assert "search_documentation" in llm.prompts[0]
    assert '"How does AWS Lambda work?"' in llm.prompts[0]


def test_long_tool_output_is_summarized():
    invoker = FakeToolInvoker(TOOLS, output="x" * 501)
    llm = FakeLLM(_choice(shouldUseTool=True, tool="search_documentation", args={}), "short summary")
    assistant = ToolAssistant(invoker, llm, server_name="docs")

    reply = assistant.answer("question", lambda _c: None)

    assert reply.summary == "short summary"
    assert llm.prompts[1].startswith("Summarize this MCP server response")


def test_direct_answer_when_no_tool_fits():
    invoker = FakeToolInvoker(TOOLS)
    llm = FakeLLM(_choice(shouldUseTool=False, reasoning="general question"), "Direct answer")
    assistant = ToolAssistant(invoker, llm, server_name="docs")

    reply = assistant.answer("Tell me about machine learning", lambda _c: None)

    assert reply.used_tool is False
    assert reply.text == "Direct answer"
    assert reply.reasoning == "general question"
    assert invoker.calls == []
    assert llm.prompts[1] == "Tell me about machine learning"


def test_tool_choice_without_args_calls_with_empty_arguments():
    invoker = FakeToolInvoker(TOOLS)
    llm = FakeLLM(_choice(shouldUseTool=True, tool="search_documentation", args=None))
    ToolAssistant(invoker, llm, server_name="docs").answer("q", lambda _c: None)
    assert invoker.calls[0]["arguments"] == {}


def test_format_tools_lists_parameters():
    text = format_tools(FakeToolInvoker(TOOLS).tools)
    assert "1. search_documentation" in text
    assert "Description: Search AWS docs" in text
    assert "Parameters: search_phrase" in text
    assert format_tools([]) == "No MCP tools available"
