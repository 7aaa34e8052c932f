# =============================================================================
# tools/__init__.py
# =============================================================================
# This package exposes the core/ handlers as MCP tools.
#
#   catalog.py     the static tool list (names, descriptions, schemas)
#   dispatch.py    tool name -> handler, failures -> "❌ ..." text, logging
#   render.py      ToolResult -> markdown or pretty JSON, size-capped
#   router.py      JSON-RPC 2.0 method router
#   http_app.py    FastAPI binding of the router
#   mcp_server.py  FastMCP stdio server (used by the agent)
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk to the upstream APIs (that's core/)
#   - They do NOT know about Google ADK
# =============================================================================
