"""Assistant service: decides between an MCP tool and a direct LLM answer.

The LLM is asked to pick a tool (and its arguments) from the catalog of
one MCP server. Tool output is streamed to the caller through the MCP
client; long output is summarized afterwards. Both collaborators are
passed in explicitly so the service can run against fakes.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from streamable_mcp.adapters.llm_client import LLMClient as LLMClientProtocol
from streamable_mcp.adapters.tool_invoker import ToolInvoker
from streamable_mcp.core.errors import ToolChoiceError
from streamable_mcp.core.schemas import ToolDescriptor

logger = logging.getLogger(__name__)

SUMMARY_THRESHOLD_CHARS = 500

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")


class ToolChoice(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    should_use_tool: bool = Field(default=False, alias="shouldUseTool")
    tool: Optional[str] = None
    args: Optional[Dict[str, Any]] = None
    reasoning: Optional[str] = None


class AssistantReply(BaseModel):
    used_tool: bool
    tool: Optional[str] = None
    reasoning: Optional[str] = None
    text: str = ""
    summary: Optional[str] = None


def build_tool_choice_prompt(user_input: str, tools: List[ToolDescriptor]) -> str:
    catalog = [t.model_dump(by_alias=True, exclude_none=True) for t in tools]
    return f"""
You are an AI assistant that can decide whether to use MCP (Model Context Protocol) tools to answer user questions.

Available MCP tools:
{json.dumps(catalog, indent=2)}

User question: "{user_input}"

Analyze the user's question and decide:
1. Can this question be answered using the available MCP tools?
2. If yes, which tool should be used and with what arguments?
3. If no, explain why not.

Respond with ONLY a valid JSON object in this format:
{{
  "shouldUseTool": true/false,
  "tool": "toolName" (if shouldUseTool is true),
  "args": {{"param": "value"}} (if shouldUseTool is true),
  "reasoning": "Brief explanation of your decision"
}}

Do not include markdown formatting or additional text.
"""


def parse_tool_choice(text: str) -> ToolChoice:
    """Decode the LLM answer, tolerating Markdown code fences."""
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    try:
        return ToolChoice.model_validate(json.loads(cleaned))
    except (ValueError, ValidationError) as e:
        raise ToolChoiceError(f"Invalid tool choice from LLM: {cleaned[:200]}") from e


class ToolAssistant:
    def __init__(
        self,
        tool_invoker: ToolInvoker,
        llm: LLMClientProtocol,
        *,
        server_name: str,
        model_id: Optional[str] = None,
        summary_threshold: int = SUMMARY_THRESHOLD_CHARS,
    ):
        self.tool_invoker = tool_invoker
        self.llm = llm
        self.server_name = server_name
        self.model_id = model_id
        self.summary_threshold = summary_threshold
        self.tools: List[ToolDescriptor] = []

    def load_tools(self) -> List[ToolDescriptor]:
        self.tools = self.tool_invoker.list_tools(self.server_name)
        return self.tools

    def _ask(self, prompt: str, *, max_tokens: int) -> str:
        return self.llm.invoke_text(
            messages=[{"role": "user", "content": prompt}],
            model_id=self.model_id,
            max_tokens=max_tokens,
        )

    def choose_tool(self, user_input: str) -> ToolChoice:
        text = self._ask(build_tool_choice_prompt(user_input, self.tools), max_tokens=1000)
        choice = parse_tool_choice(text)
        logger.info(
            "assistant.choice",
            extra={"should_use_tool": choice.should_use_tool, "tool": choice.tool},
        )
        return choice

    def answer(self, user_input: str, on_chunk: Callable[[str], Any]) -> AssistantReply:
        choice = self.choose_tool(user_input)
        if choice.should_use_tool and choice.tool:
            return self._answer_with_tool(choice, on_chunk)

        text = self._ask(user_input, max_tokens=2000)
        return AssistantReply(used_tool=False, reasoning=choice.reasoning, text=text)

    def _answer_with_tool(self, choice: ToolChoice, on_chunk: Callable[[str], Any]) -> AssistantReply:
        streamed = self.tool_invoker.call_tool_stream(self.server_name, choice.tool, choice.args or {}, on_chunk)

        summary = None
        if len(streamed) > self.summary_threshold:
            summary = self._ask(
                "Summarize this MCP server response clearly and concisely:\n\n"
                f"{streamed}\n\n"
                "Focus on the key points that directly answer the user's question.",
                max_tokens=1000,
            )
        return AssistantReply(
            used_tool=True,
            tool=choice.tool,
            reasoning=choice.reasoning,
            text=streamed,
            summary=summary,
        )
