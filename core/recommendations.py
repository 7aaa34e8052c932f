# =============================================================================
# core/recommendations.py  -  "What should I see today?" (composite tool)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   culture_get_recommendations combines three independent sub-queries into
#   one answer:
#     1. yesterday's daily box office   (top 5 movies)
#     2. musicals running in the region (up to 5)
#     3. plays running in the region    (up to 5)
#
# PARTIAL RESULTS:
#   The three sub-queries are started together and ALL are awaited
#   (core/aggregate.gather_settled).  A sub-query that fails or times out
#   turns its section into None; the other sections are returned as usual.
#   The tool itself only fails if something outside the sub-queries breaks.
#
#   None ("could not load") and [] ("nothing running") are different
#   answers and are rendered differently.
# =============================================================================

from typing import Optional

from core.aggregate import gather_settled
from core.context import ToolContext, pick_format, text_arg
from core.formatting import format_date
from core.models import ToolResult
from core.movies import box_office_entry, fetch_box_office, yesterday
from core.performances import find_performances, performance_entry

DEFAULT_REGION = "서울"
SECTION_SIZE = 5


async def _top_movies(ctx: ToolContext) -> list:
    movies = await fetch_box_office(ctx, "daily", yesterday(ctx))
    return movies[:SECTION_SIZE]


def _section(records: Optional[list], to_entry) -> Optional[list]:
    if records is None:
        return None
    return [to_entry(r) for r in records]


async def get_recommendations(
    ctx: ToolContext,
    region: Optional[str] = None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_get_recommendations"""
    region = text_arg(region) or DEFAULT_REGION

    movies, musicals, theaters = await gather_settled(
        _top_movies(ctx),
        find_performances(ctx, genre="뮤지컬", region=region, limit=SECTION_SIZE),
        find_performances(ctx, genre="연극", region=region, limit=SECTION_SIZE),
        labels=("box_office", "musicals", "theaters"),
    )

    payload = {
        "date": format_date(ctx.today().strftime("%Y%m%d")),
        "region": region,
        "movies": _section(movies, box_office_entry),
        "musicals": _section(musicals, performance_entry),
        "theaters": _section(theaters, performance_entry),
    }
    return ToolResult("culture_get_recommendations", payload, pick_format(response_format))
