#!/usr/bin/env python3
"""
Streamable MCP Client - CLI Tool

Interactive assistant that decides whether to answer with an MCP tool,
plus one-shot commands to inspect servers and call tools directly.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from streamable_mcp.adapters.llm_client import LLMClient
from streamable_mcp.adapters.tool_invoker import ToolInvoker
from streamable_mcp.assistant.formatting import format_help, format_tools
from streamable_mcp.assistant.service import ToolAssistant
from streamable_mcp.core import config
from streamable_mcp.core.errors import LLMInvokeError, MCPError, ToolChoiceError
from streamable_mcp.core.llm_client import BedrockLLMClient
from streamable_mcp.core.mcp_client import StreamableMCPClient


def _write(chunk: str) -> None:
    sys.stdout.write(chunk)
    sys.stdout.flush()


def run_chat(client: ToolInvoker, server_name: str, llm: Optional[LLMClient] = None) -> int:
    """Interactive loop; errors are reported and the loop continues."""
    if llm is None:
        llm = BedrockLLMClient(region_name=config.get_settings().bedrock_region)
    assistant = ToolAssistant(client, llm, server_name=server_name)

    print("🚀 Initializing MCP assistant...")
    try:
        assistant.load_tools()
    except MCPError as e:
        print(f"❌ Failed to initialize MCP client: {e}")
        return 1
    print("📚 Available MCP tools loaded successfully")
    print("💡 Type 'help' to see available commands or 'quit' to exit\n")

    while True:
        try:
            user_input = input("💭 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not user_input:
            continue
        command = user_input.lower()
        if command in ("quit", "exit"):
            print("👋 Goodbye!")
            break
        if command == "help":
            print(format_help())
            continue
        if command == "tools":
            print(format_tools(assistant.tools))
            continue

        print("\n🤔 Analyzing your question...")
        try:
            reply = assistant.answer(user_input, _write)
        except (MCPError, LLMInvokeError, ToolChoiceError) as e:
            print(f"❌ Error: {e}")
            print("Please try again.\n")
            continue

        if reply.used_tool:
            print(f"\n\n🔧 Used MCP tool: {reply.tool}")
            if reply.reasoning:
                print(f"📝 Reasoning: {reply.reasoning}")
            if reply.summary:
                print(f"\n📋 Summary:\n{reply.summary}")
        else:
            if reply.reasoning:
                print(f"💡 {reply.reasoning}\n")
            print(f"✅ Response:\n{reply.text}")
        print("\n" + "─" * 50 + "\n")
    return 0


def run_call(client: StreamableMCPClient, server_name: str, tool_name: str, raw_args: str) -> int:
    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as e:
        print(f"Error: --args is not valid JSON: {e}", file=sys.stderr)
        return 2
    if not isinstance(arguments, dict):
        print("Error: --args must be a JSON object", file=sys.stderr)
        return 2

    try:
        client.call_tool_stream(server_name, tool_name, arguments, _write)
    except MCPError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Streamable MCP Client CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python mcp_chat.py chat
  python mcp_chat.py servers
  python mcp_chat.py tools aws-knowledge-mcp-server
  python mcp_chat.py call aws-knowledge-mcp-server search_documentation --args '{"search_phrase": "Lambda"}'
  python mcp_chat.py ping aws-knowledge-mcp-server
        """
    )
    parser.add_argument('--config', help='Path to config.json (default: ./config.json)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    chat_parser = subparsers.add_parser('chat', help='Interactive assistant')
    chat_parser.add_argument('--server', help='MCP server to use (default: first configured)')

    subparsers.add_parser('servers', help='List configured MCP servers')

    tools_parser = subparsers.add_parser('tools', help='List tools of an MCP server')
    tools_parser.add_argument('server', help='Server name')

    call_parser = subparsers.add_parser('call', help='Call a tool and stream its output')
    call_parser.add_argument('server', help='Server name')
    call_parser.add_argument('tool', help='Tool name')
    call_parser.add_argument('--args', default='{}', help='Tool arguments as a JSON object')

    ping_parser = subparsers.add_parser('ping', help='Measure a tools/list roundtrip')
    ping_parser.add_argument('server', help='Server name')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    settings = config.use_config_file(args.config) if args.config else config.get_settings()

    with StreamableMCPClient(settings.servers) as client:
        if args.command == 'servers':
            for name in client.get_server_names():
                print(f"{name}: {settings.servers[name]}")
            return 0

        if args.command == 'tools':
            try:
                print(format_tools(client.list_tools(args.server)))
            except MCPError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            return 0

        if args.command == 'call':
            return run_call(client, args.server, args.tool, args.args)

        if args.command == 'ping':
            result = client.ping(args.server)
            print(json.dumps(result, indent=2))
            return 0 if result["okay"] else 1

        server_name = args.server or settings.default_server
        if not server_name:
            print("Error: no MCP servers configured", file=sys.stderr)
            return 1
        return run_chat(client, server_name)


if __name__ == "__main__":
    sys.exit(main())
