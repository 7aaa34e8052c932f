# =============================================================================
# agent/culture_agent.py  -  Google ADK Agent Configuration (LiteLlm model)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the culture concierge agent: a Google ADK agent whose reasoning
#   engine is any LiteLlm-supported model and whose tools come from our
#   FastMCP server (tools/mcp_server.py) over stdio.
#
#   ┌─────────────────────────────┐        ┌───────────────────────────┐
#   │  Google ADK Agent           │ stdio  │  FastMCP Server           │
#   │  prompt + LiteLlm model     │───────▶│  (tools/mcp_server)       │
#   └─────────────────────────────┘        │  • culture_get_box_office │
#                                          │  • culture_search_*       │
#                                          │  • culture_get_*          │
#                                          └───────────────────────────┘
#                                                       │
#                                                       ▼
#                                          ┌───────────────────────────┐
#                                          │  core/ (handlers)         │
#                                          │  KOBIS · KOPIS · TourAPI  │
#                                          └───────────────────────────┘
#
# MODEL CHOICE:
#   CULTURE_AGENT_MODEL (env) is passed straight to LiteLlm, default
#   "openrouter/openai/gpt-4o".  LiteLlm reads the provider's API key
#   (e.g. OPENROUTER_API_KEY) from the environment.
#
# MCP CONNECTION:
#   ADK starts the server as a subprocess ("uv run python -m
#   tools.mcp_server" from the project root) and discovers the nine tools.
#   The subprocess inherits the environment, so the upstream API keys in
#   .env reach it too.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_culture_concierge_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def mcp_server_params() -> StdioServerParameters:
    """How ADK spawns the stdio tool server."""
    return StdioServerParameters(
        command="uv",
        args=["run", "python", "-m", "tools.mcp_server"],
        cwd=PROJECT_ROOT,
    )


def create_agent(model: str = None) -> Agent:
    """Create the culture concierge agent.

    Args:
        model: LiteLlm model string.  Falls back to CULTURE_AGENT_MODEL,
               then to DEFAULT_MODEL.

    Returns:
        A configured Google ADK Agent with the culture tools attached.
    """
    model = model or os.getenv("CULTURE_AGENT_MODEL") or DEFAULT_MODEL

    culture_tools = MCPToolset(connection_params=mcp_server_params())

    return Agent(
        name="korea_culture_concierge",
        model=LiteLlm(model=model),
        instruction=get_culture_concierge_prompt(),
        tools=[culture_tools],
    )
