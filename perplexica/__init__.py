# =============================================================================
# perplexica/__init__.py
# =============================================================================
# This package contains ALL the translation logic between MCP tool calls and
# the Perplexica HTTP API.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The tool server in
#   perplexica_tools/ wraps these handlers; everything here can be driven
#   from a plain asyncio test with a fake httpx transport.
#
# PIPELINE (one tool call):
#   validation -> payload -> upstream -> classifier -> formatter
#   handlers.py wires the stages together and logs each one.
# =============================================================================
