# =============================================================================
# main.py  -  Interactive client for the Perplexica MCP server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Starts the MCP server (perplexica_tools/mcp_server.py) as a
#      subprocess and connects to it over stdio, exactly like an IDE or
#      desktop MCP client would
#   2. Calls perplexica.health and prints the summary
#   3. Reads questions from the terminal and calls perplexica.search
#   4. Prints each answer with its numbered sources
#
# Handy for checking a Perplexica deployment end to end without wiring the
# server into a real MCP host.  PERPLEXICA_BASE_URL, MCP_REQUEST_TIMEOUT_MS
# and MCP_LOG_LEVEL (or a .env file) are passed through to the server.
# =============================================================================

import asyncio
import os
import sys

from dotenv import load_dotenv
from fastmcp import Client
from fastmcp.client.transports import StdioTransport

# Load .env BEFORE building the transport so the server subprocess inherits it.
load_dotenv()


def _text_of(result) -> str:
    return "\n".join(getattr(block, "text", "") for block in result.content)


def _server_transport() -> StdioTransport:
    project_root = os.path.dirname(os.path.abspath(__file__))
    return StdioTransport(
        command=sys.executable,
        args=["-m", "perplexica_tools.mcp_server"],
        env=dict(os.environ),
        cwd=project_root,
    )


async def run_client():
    """Connect to the server, check health, then answer questions in a loop."""
    print("=" * 70)
    print("  PERPLEXICA MCP CLIENT")
    print("=" * 70)

    async with Client(_server_transport()) as client:
        tools = await client.list_tools()
        print(f"\n🔧 Connected. Tools: {', '.join(t.name for t in tools)}")

        health = await client.call_tool("perplexica.health", {}, raise_on_error=False)
        marker = "⚠️ " if health.is_error else "✅"
        print(f"{marker} {_text_of(health)}\n")

        print("💬 Ask anything (Type 'quit' to exit)")
        print("-" * 70)

        while True:
            try:
                query = input("\n🔎 Query: ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\n\n👋 Goodbye!")
                break

            if query.lower() in ("quit", "exit", "q"):
                print("\n👋 Goodbye!")
                break

            if not query:
                continue

            result = await client.call_tool("perplexica.search", {"query": query}, raise_on_error=False)
            print("-" * 70)
            if result.is_error:
                print(f"\n⚠️  {_text_of(result)}")
            else:
                print(f"\n{_text_of(result)}")
            print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_client())
