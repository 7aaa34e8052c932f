# =============================================================================
# core/tour.py  -  Festivals, Tourist Spots, Restaurants (Source C: TourAPI)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   culture_search_festival      festivals overlapping one calendar month
#   culture_search_tourist_spot  spots by keyword or by region/category
#   culture_search_restaurant    the same search pinned to content type 39
#
# TourAPI quirks (key encoding, items.item shape, header result codes) are
# absorbed by core/gateway.tour_query() and core/gateway.tour_items().
#
# FESTIVAL KEYWORD:
#   searchFestival2 has no title filter, so the keyword is applied to the
#   fetched page here (case-insensitive substring).  Matches outside that
#   page are not seen.
# =============================================================================

import calendar
from typing import Optional

from core.config import TOUR_AREA_CODES, TOUR_CONTENT_TYPES
from core.context import ToolContext, clamp_limit, pick_format, text_arg
from core.decoders import decode_all, tour_item
from core.errors import InvalidRequest
from core.formatting import format_date
from core.gateway import tour_items, tour_query
from core.models import TourItem, ToolResult

DEFAULT_CATEGORY = "관광지"
SPOT_CONTENT_TYPE = "12"
RESTAURANT_CONTENT_TYPE = "39"


def parse_month(value, fallback: int) -> int:
    """1-12 from an int or a string such as "3" / "03"."""
    text = text_arg(value)
    if not text:
        return fallback
    try:
        month = int(text)
    except ValueError:
        raise InvalidRequest(f"month는 1~12 사이의 숫자여야 합니다. (입력: {text})")
    if not 1 <= month <= 12:
        raise InvalidRequest(f"month는 1~12 사이의 숫자여야 합니다. (입력: {text})")
    return month


def month_window(year: int, month: int) -> tuple[str, str]:
    """First and last day of the month as YYYYMMDD."""
    last_day = calendar.monthrange(year, month)[1]
    return f"{year}{month:02d}01", f"{year}{month:02d}{last_day:02d}"


async def fetch_tour_items(ctx: ToolContext, operation: str, num_of_rows: int, **params) -> list[TourItem]:
    query = tour_query(ctx.settings, operation, num_of_rows, **params)
    return decode_all(tour_items(await ctx.gateway.fetch_json(query)), tour_item)


async def find_places(
    ctx: ToolContext,
    content_type_id: str,
    keyword: str,
    region: str,
    limit: int,
) -> list[TourItem]:
    """Keyword search when a keyword is given, otherwise the area listing."""
    area_code = TOUR_AREA_CODES.get(region)
    if keyword:
        found = await fetch_tour_items(
            ctx, "searchKeyword2", limit,
            arrange="P", keyword=keyword, contentTypeId=content_type_id, areaCode=area_code,
        )
    else:
        found = await fetch_tour_items(
            ctx, "areaBasedList2", limit,
            arrange="P", contentTypeId=content_type_id, areaCode=area_code,
        )
    return found[:limit]


def festival_entry(item: TourItem) -> dict:
    return {
        "id": item.content_id,
        "title": item.title,
        "address": item.address,
        "startDate": format_date(item.event_start),
        "endDate": format_date(item.event_end),
        "tel": item.tel,
        "image": item.image,
    }


def place_entry(item: TourItem) -> dict:
    return {
        "id": item.content_id,
        "title": item.title,
        "address": item.address,
        "tel": item.tel,
        "image": item.image,
        "mapx": item.mapx,
        "mapy": item.mapy,
    }


# -----------------------------------------------------------------------------
# Tool handlers
# -----------------------------------------------------------------------------
async def search_festivals(
    ctx: ToolContext,
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    month: Optional[str] = None,
    limit=None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_search_festival"""
    keyword, region = text_arg(keyword), text_arg(region)
    count = clamp_limit(limit)

    today = ctx.today()
    month_no = parse_month(month, today.month)
    start, end = month_window(today.year, month_no)

    festivals = await fetch_tour_items(
        ctx, "searchFestival2", count,
        arrange="A", eventStartDate=start, eventEndDate=end,
        areaCode=TOUR_AREA_CODES.get(region),
    )
    if keyword:
        needle = keyword.lower()
        festivals = [f for f in festivals if needle in f.title.lower()]
    festivals = festivals[:count]

    payload = {
        "keyword": keyword or None,
        "region": region or None,
        "month": f"{month_no:02d}",
        "year": today.year,
        "count": len(festivals),
        "festivals": [festival_entry(f) for f in festivals],
    }
    return ToolResult("culture_search_festival", payload, pick_format(response_format))


async def search_tourist_spots(
    ctx: ToolContext,
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    category: Optional[str] = None,
    limit=None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_search_tourist_spot"""
    keyword, region = text_arg(keyword), text_arg(region)
    category = text_arg(category) or DEFAULT_CATEGORY
    count = clamp_limit(limit)

    content_type = TOUR_CONTENT_TYPES.get(category, SPOT_CONTENT_TYPE)
    spots = await find_places(ctx, content_type, keyword, region, count)

    payload = {
        "keyword": keyword or None,
        "region": region or None,
        "category": category,
        "count": len(spots),
        "spots": [place_entry(s) for s in spots],
    }
    return ToolResult("culture_search_tourist_spot", payload, pick_format(response_format))


async def search_restaurants(
    ctx: ToolContext,
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    limit=None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_search_restaurant"""
    keyword, region = text_arg(keyword), text_arg(region)
    count = clamp_limit(limit)

    restaurants = await find_places(ctx, RESTAURANT_CONTENT_TYPE, keyword, region, count)

    payload = {
        "keyword": keyword or None,
        "region": region or None,
        "count": len(restaurants),
        "restaurants": [place_entry(r) for r in restaurants],
    }
    return ToolResult("culture_search_restaurant", payload, pick_format(response_format))
