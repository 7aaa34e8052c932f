# =============================================================================
# tools/dispatch.py  -  Tool name -> handler, failures -> text
# =============================================================================
#
# HOW A TOOL CALL FLOWS:
#   1. The transport (stdio FastMCP server or the JSON-RPC router) hands us
#      a tool name and an arguments mapping.
#   2. We pick the core/ handler, keep only the arguments it declares, and
#      await it.
#   3. The ToolResult is rendered (tools/render.py) into one text block.
#
# FAILURES ARE ANSWERS:
#   A domain failure is NOT a protocol error.  NotFound and InvalidRequest
#   become "❌ <message>", upstream and internal failures become
#   "❌ <label> 실패: <message>".  The agent reads these like any other
#   answer.  Only unexpected exceptions escape to the caller.
#
# LOGGING:
#   Log lines go to STDERR (stdout belongs to the stdio MCP transport) and
#   are color-coded: CYAN request, YELLOW status, GREEN response.
# =============================================================================

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping

from core.context import ToolContext
from core.errors import CultureError, InvalidRequest, NotFound
from core.models import ToolResult
from core.movies import get_box_office, get_movie_detail
from core.performances import get_facility_info, get_performance_detail, search_performances
from core.recommendations import get_recommendations
from core.tour import search_festivals, search_restaurants, search_tourist_spots
from tools.render import render

logger = logging.getLogger("tools")

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"

RESPONSE_PREVIEW = 300


def log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def log_response(tool_name: str, text: str) -> str:
    """Log the start of the response text in GREEN, then return it."""
    preview = text if len(text) <= RESPONSE_PREVIEW else text[:RESPONSE_PREVIEW] + "…"
    preview = preview.replace("\n", " ")
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(text)} chars): {preview}{_RESET}")
    return text


Handler = Callable[..., Awaitable[ToolResult]]

# name -> (handler, label used in "❌ <label> 실패: ..." texts)
HANDLERS: dict[str, tuple[Handler, str]] = {
    "culture_get_box_office": (get_box_office, "박스오피스 조회"),
    "culture_get_movie_detail": (get_movie_detail, "영화 상세정보 조회"),
    "culture_search_performance": (search_performances, "공연 검색"),
    "culture_get_performance_detail": (get_performance_detail, "공연 상세정보 조회"),
    "culture_get_facility_info": (get_facility_info, "공연장 검색"),
    "culture_get_recommendations": (get_recommendations, "추천 정보 조회"),
    "culture_search_festival": (search_festivals, "축제 검색"),
    "culture_search_tourist_spot": (search_tourist_spots, "관광지 검색"),
    "culture_search_restaurant": (search_restaurants, "음식점 검색"),
}


def is_known_tool(name: Any) -> bool:
    return isinstance(name, str) and name in HANDLERS


def _accepted(handler: Handler, arguments: Mapping[str, Any]) -> dict[str, Any]:
    # Unknown argument names are ignored rather than rejected.
    names = set(inspect.signature(handler).parameters) - {"ctx"}
    return {k: v for k, v in arguments.items() if k in names}


def failure_text(error: CultureError, label: str) -> str:
    if isinstance(error, (NotFound, InvalidRequest)):
        return f"❌ {error.message}"
    return f"❌ {label} 실패: {error.message}"


async def call_tool(ctx: ToolContext, name: str, arguments: Mapping[str, Any] = None) -> str:
    """Run one tool and return its final text.

    Raises KeyError for a name that is not in the catalog; callers check
    is_known_tool() first.
    """
    handler, label = HANDLERS[name]
    kwargs = _accepted(handler, arguments or {})
    log_request(name, **kwargs)

    try:
        result = await handler(ctx, **kwargs)
        text = render(result, ctx.settings.character_limit)
    except CultureError as e:
        log_status(f"{name} failed ({e.kind}): {e.message}")
        text = failure_text(e, label)

    return log_response(name, text)
