# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (stdio transport)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the nine culture tools over MCP's stdio transport.  Each tool is
#   a thin wrapper: it collects its arguments and hands them to
#   tools/dispatch.call_tool, which runs the core/ handler and renders the
#   text.  The HTTP binding (tools/http_app.py) serves the very same tools.
#
# HOW IT WORKS (the flow):
#   1. The Google ADK agent decides it needs information (e.g., box office)
#   2. It calls a tool by name via MCP (e.g., "culture_get_box_office")
#   3. FastMCP routes the call to the decorated function below
#   4. call_tool() fetches from the upstream API(s) and renders the answer
#   5. The agent receives one markdown (or JSON) text block
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server
#   b) Spawned by the agent (agent/culture_agent.py) over stdio
# =============================================================================

import logging
import sys
from typing import Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from core.config import SERVER_NAME, load_settings
from core.context import ToolContext
from core.gateway import Gateway
from tools.dispatch import call_tool

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP protocol, so every log line goes to STDERR.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

load_dotenv()

mcp = FastMCP(SERVER_NAME)

_context: Optional[ToolContext] = None


def get_context() -> ToolContext:
    """The process-wide ToolContext, built on first use.

    The Gateway's httpx client is created lazily so that it binds to the
    event loop FastMCP runs the tools on.
    """
    global _context
    if _context is None:
        settings = load_settings()
        _context = ToolContext(settings=settings, gateway=Gateway(settings))
    return _context


def _args(**kwargs) -> dict:
    return {k: v for k, v in kwargs.items() if v is not None}


# =============================================================================
# Source A: KOBIS (movies)
# =============================================================================
@mcp.tool()
async def culture_get_box_office(
    type: str = "daily",
    date: Optional[str] = None,
    limit: Optional[int] = None,
    response_format: str = "markdown",
) -> str:
    """일별 또는 주간 영화 박스오피스 순위를 조회합니다.

    WHEN TO CALL THIS: the user asks what movies are popular or showing now.

    Args:
        type: "daily" (default) or "weekly".
        date: YYYYMMDD.  Defaults to yesterday (Korea time).
        limit: Number of movies, 1-10 (default 10).
        response_format: "markdown" (default) or "json".
    """
    return await call_tool(get_context(), "culture_get_box_office", _args(
        type=type, date=date, limit=limit, response_format=response_format,
    ))


@mcp.tool()
async def culture_get_movie_detail(
    movie_name: Optional[str] = None,
    movie_code: Optional[str] = None,
    response_format: str = "markdown",
) -> str:
    """특정 영화의 상세정보(감독, 배우, 관람등급 등)를 조회합니다.

    Pass movie_code (from the box office) when you have it; otherwise
    movie_name is searched and the first match is used.
    """
    return await call_tool(get_context(), "culture_get_movie_detail", _args(
        movie_name=movie_name, movie_code=movie_code, response_format=response_format,
    ))


# =============================================================================
# Source B: KOPIS (performances and venues)
# =============================================================================
@mcp.tool()
async def culture_search_performance(
    keyword: Optional[str] = None,
    genre: Optional[str] = None,
    region: Optional[str] = None,
    limit: Optional[int] = None,
    response_format: str = "markdown",
) -> str:
    """공연(연극, 뮤지컬, 클래식 등)을 검색합니다.

    Args:
        keyword: Part of the performance title.
        genre: 연극, 뮤지컬, 클래식, 국악, 대중음악, 무용, 서커스/마술, 복합.
        region: Region name such as 서울, 부산, 대구.
        limit: 1-20 (default 10).
        response_format: "markdown" (default) or "json".
    """
    return await call_tool(get_context(), "culture_search_performance", _args(
        keyword=keyword, genre=genre, region=region, limit=limit, response_format=response_format,
    ))


@mcp.tool()
async def culture_get_performance_detail(performance_id: str, response_format: str = "markdown") -> str:
    """특정 공연의 상세정보(출연진, 공연시간, 티켓가격)를 조회합니다.

    performance_id comes from culture_search_performance (e.g. "PF123456").
    """
    return await call_tool(get_context(), "culture_get_performance_detail", _args(
        performance_id=performance_id, response_format=response_format,
    ))


@mcp.tool()
async def culture_get_facility_info(
    facility_name: Optional[str] = None,
    region: Optional[str] = None,
    limit: Optional[int] = None,
    response_format: str = "markdown",
) -> str:
    """공연장/극장 정보(위치, 좌석수, 연락처)를 조회합니다.

    Searches that match three venues or fewer also return halls, amenities
    and coordinates for each venue.
    """
    return await call_tool(get_context(), "culture_get_facility_info", _args(
        facility_name=facility_name, region=region, limit=limit, response_format=response_format,
    ))


# =============================================================================
# Composite
# =============================================================================
@mcp.tool()
async def culture_get_recommendations(region: Optional[str] = None, response_format: str = "markdown") -> str:
    """오늘의 추천: 인기 영화 TOP 5와 지역의 뮤지컬/연극을 한 번에 보여줍니다.

    WHEN TO CALL THIS: open questions like "오늘 뭐 볼까?".  region defaults
    to 서울.
    """
    return await call_tool(get_context(), "culture_get_recommendations", _args(
        region=region, response_format=response_format,
    ))


# =============================================================================
# Source C: TourAPI (festivals, spots, restaurants)
# =============================================================================
@mcp.tool()
async def culture_search_festival(
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    month: Optional[str] = None,
    limit: Optional[int] = None,
    response_format: str = "markdown",
) -> str:
    """전국의 축제와 행사를 월별/지역별로 검색합니다.

    Args:
        keyword: Part of the festival name.
        region: Region name such as 서울, 부산, 제주.
        month: "1"-"12" in the current year.  Defaults to this month.
        limit: 1-20 (default 10).
        response_format: "markdown" (default) or "json".
    """
    return await call_tool(get_context(), "culture_search_festival", _args(
        keyword=keyword, region=region, month=month, limit=limit, response_format=response_format,
    ))


@mcp.tool()
async def culture_search_tourist_spot(
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    category: Optional[str] = None,
    limit: Optional[int] = None,
    response_format: str = "markdown",
) -> str:
    """전국의 관광지와 명소를 검색합니다.

    category is one of 관광지 (default), 문화시설, 레포츠, 쇼핑.
    """
    return await call_tool(get_context(), "culture_search_tourist_spot", _args(
        keyword=keyword, region=region, category=category, limit=limit, response_format=response_format,
    ))


@mcp.tool()
async def culture_search_restaurant(
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    limit: Optional[int] = None,
    response_format: str = "markdown",
) -> str:
    """전국의 맛집과 음식점을 검색합니다 (음식점명 또는 음식 종류)."""
    return await call_tool(get_context(), "culture_search_restaurant", _args(
        keyword=keyword, region=region, limit=limit, response_format=response_format,
    ))


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
