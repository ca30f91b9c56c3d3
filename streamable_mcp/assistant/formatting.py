from __future__ import annotations

from typing import List

from streamable_mcp.core.schemas import ToolDescriptor


def format_help() -> str:
    return """
Available commands:
  help     - Show this help message
  tools    - List available MCP tools
  quit     - Exit the application

Or just ask any question! The assistant decides whether to use an MCP tool or respond directly.

Examples:
  "What is Amazon Bedrock?"
  "How does AWS Lambda work?"
"""


def format_tools(tools: List[ToolDescriptor]) -> str:
    if not tools:
        return "No MCP tools available"
    formatted = "Available MCP Tools:\n"
    for i, tool in enumerate(tools, 1):
        formatted += f"{i}. {tool.name}\n"
        if tool.description:
            formatted += f"   Description: {tool.description}\n"
        params = tool.parameter_names()
        if params:
            formatted += f"   Parameters: {', '.join(params)}\n"
        formatted += "\n"
    return formatted
