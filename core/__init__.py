# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL domain logic of the Korea culture server:
# upstream access (gateway, markup), normalization (decoders, models), the
# tool handlers (movies, performances, tour, recommendations) and the
# aggregation policy (aggregate).
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP or FastAPI.  Handlers
#   take a ToolContext and return a ToolResult; transports live in tools/.
# =============================================================================
