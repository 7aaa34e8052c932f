# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent is the coordinator.  It receives a question ("오늘 뭐 볼까?"),
#   decides which culture tools to call (via MCP), and turns their answers
#   into a recommendation.  It holds no domain logic (core/) and no tool
#   implementations (tools/).
# =============================================================================
