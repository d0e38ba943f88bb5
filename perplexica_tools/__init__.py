# =============================================================================
# perplexica_tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   perplexica_tools/ is the layer between the MCP protocol and the
#   translation logic in perplexica/.  It:
#     1. Declares each tool's name, title, description and typed schema
#     2. Forwards the arguments to perplexica.handlers
#     3. Converts the ToolResult into FastMCP's success / ToolError shape
#
# WHAT IT DOES NOT DO:
#   - No HTTP, no payload building, no formatting (that's perplexica/)
#   - No transport code (FastMCP owns stdio framing and tool discovery)
# =============================================================================
