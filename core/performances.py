# =============================================================================
# core/performances.py  -  Performances & Venues (Source B: KOPIS, XML)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   culture_search_performance      date-bounded search with optional
#                                   keyword / genre / region filters
#   culture_get_performance_detail  one performance by id
#   culture_get_facility_info       venue search with conditional enrichment
#
# GENRE / REGION NAMES:
#   Translated to KOPIS codes through core/config.py.  A name missing from
#   the table drops the filter instead of failing the call.
#
# ENRICHMENT POLICY (facility info):
#   When the venue search returns at most DETAIL_FETCH_THRESHOLD venues,
#   every venue's detail record is fetched CONCURRENTLY and merged into its
#   summary (seat counts, amenities, halls, coordinates).  Above the
#   threshold no detail is fetched and detail-only fields stay None.
#   The threshold is fixed, not user-configurable.
# =============================================================================

import logging
from dataclasses import replace
from typing import Optional
from urllib.parse import quote

from core.aggregate import gather_settled, merge_detail
from core.config import GENRE_CODES, REGION_CODES
from core.context import ToolContext, clamp_limit, pick_format, text_arg
from core.decoders import facility, facility_detail, performance, performance_detail
from core.errors import InvalidRequest, NotFound
from core.gateway import kopis_query
from core.models import Facility, FacilityDetail, Performance, PerformanceDetail, ToolResult

logger = logging.getLogger(__name__)

DETAIL_FETCH_THRESHOLD = 3

# Fields where the detail record takes priority when it has a value.
SHARED_FACILITY_FIELDS = (
    "name", "hall_count", "character", "seats", "tel", "website",
    "address", "latitude", "longitude",
)

# Fields only the detail record has; copied whenever the detail arrived.
DETAIL_ONLY_FIELDS = (
    "open_year", "parking", "restaurant", "cafe", "store",
    "karaoke", "nursing_room", "barrier_free", "halls",
)


# -----------------------------------------------------------------------------
# Upstream calls
# -----------------------------------------------------------------------------
async def find_performances(
    ctx: ToolContext,
    keyword: str = "",
    genre: str = "",
    region: str = "",
    limit: int = 10,
) -> list[Performance]:
    """Performances running between today and the configured far bound."""
    query = kopis_query(
        ctx.settings,
        "pblprfr",
        stdate=ctx.today().strftime("%Y%m%d"),
        eddate=ctx.settings.performance_until,
        cpage=1,
        rows=limit,
        shprfnm=keyword or None,
        shcate=GENRE_CODES.get(genre),
        signgucode=REGION_CODES.get(region),
    )
    found = await ctx.gateway.fetch_xml_list(query, "db", performance)
    return found[:limit]


async def fetch_performance_detail(ctx: ToolContext, performance_id: str) -> Optional[PerformanceDetail]:
    query = kopis_query(ctx.settings, f"pblprfr/{quote(performance_id, safe='')}")
    return await ctx.gateway.fetch_xml_single(query, performance_detail)


async def find_facilities(ctx: ToolContext, name: str, region: str, limit: int) -> list[Facility]:
    query = kopis_query(
        ctx.settings,
        "prfplc",
        cpage=1,
        rows=limit,
        shprfnmfct=name or None,
        signgucode=REGION_CODES.get(region),
    )
    found = await ctx.gateway.fetch_xml_list(query, "db", facility)
    return found[:limit]


async def fetch_facility_detail(ctx: ToolContext, facility_id: str) -> Optional[FacilityDetail]:
    query = kopis_query(ctx.settings, f"prfplc/{quote(facility_id, safe='')}")
    return await ctx.gateway.fetch_xml_single(query, facility_detail)


async def enrich_facilities(ctx: ToolContext, facilities: list[Facility]) -> list[Facility]:
    """Fetch every venue's detail concurrently and merge it in.

    Details are matched back by facility id; a failed or empty detail
    fetch leaves that venue as it was.
    """
    details = await gather_settled(
        *(fetch_facility_detail(ctx, f.facility_id) for f in facilities),
        labels=[f"prfplc/{f.facility_id}" for f in facilities],
    )

    by_id: dict[str, FacilityDetail] = {}
    for requested, detail in zip(facilities, details):
        if detail is not None:
            by_id[detail.facility_id or requested.facility_id] = detail

    enriched = []
    for summary in facilities:
        detail = by_id.get(summary.facility_id)
        if detail is None:
            enriched.append(summary)
            continue
        merged = merge_detail(summary, detail, SHARED_FACILITY_FIELDS)
        enriched.append(replace(merged, **{name: getattr(detail, name) for name in DETAIL_ONLY_FIELDS}))
    return enriched


# -----------------------------------------------------------------------------
# Payload mapping
# -----------------------------------------------------------------------------
def performance_entry(p: Performance) -> dict:
    return {
        "id": p.performance_id,
        "name": p.name,
        "period": f"{p.start_date} ~ {p.end_date}",
        "venue": p.venue,
        "genre": p.genre,
        "status": p.state,
        "area": p.area,
        "poster": p.poster,
    }


def performance_detail_payload(p: PerformanceDetail) -> dict:
    return {
        "id": p.performance_id,
        "name": p.name,
        "period": f"{p.start_date} ~ {p.end_date}",
        "venue": p.venue,
        "cast": p.cast,
        "crew": p.crew,
        "runtime": p.runtime,
        "ageLimit": p.age_limit,
        "price": p.price,
        "poster": p.poster,
        "genre": p.genre,
        "status": p.state,
        "schedule": p.schedule,
        "images": list(p.images),
    }


def facility_entry(f: Facility) -> dict:
    return {
        "id": f.facility_id,
        "name": f.name,
        "type": f.character,
        "area": f"{f.sido} {f.gugun}".strip(),
        "address": f.address,
        "seatCount": f.seats,
        "tel": f.tel,
        "website": f.website,
        "latitude": f.latitude,
        "longitude": f.longitude,
        "openDate": f.open_year,
        "parking": f.parking,
        "restaurant": f.restaurant,
        "cafe": f.cafe,
        "store": f.store,
        "barrierFree": f.barrier_free,
        "nursingRoom": f.nursing_room,
        "karaoke": f.karaoke,
        "halls": None if f.halls is None else [
            {
                "name": h.name,
                "seats": h.seats,
                "stageWidth": h.stage_width,
                "stageHeight": h.stage_height,
                "orchestraPit": h.orchestra_pit,
            }
            for h in f.halls
        ],
    }


# -----------------------------------------------------------------------------
# Tool handlers
# -----------------------------------------------------------------------------
async def search_performances(
    ctx: ToolContext,
    keyword: Optional[str] = None,
    genre: Optional[str] = None,
    region: Optional[str] = None,
    limit=None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_search_performance"""
    keyword, genre, region = text_arg(keyword), text_arg(genre), text_arg(region)
    count = clamp_limit(limit)

    found = await find_performances(ctx, keyword, genre, region, count)

    payload = {
        "keyword": keyword or None,
        "genre": genre or None,
        "region": region or None,
        "count": len(found),
        "performances": [performance_entry(p) for p in found],
    }
    return ToolResult("culture_search_performance", payload, pick_format(response_format))


async def get_performance_detail(
    ctx: ToolContext,
    performance_id: Optional[str] = None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_get_performance_detail

    KOPIS answers 200 with an empty record for unknown ids, so an empty
    name is the not-found signal.
    """
    pid = text_arg(performance_id)
    if not pid:
        raise InvalidRequest("performance_id를 입력해주세요.")

    detail = await fetch_performance_detail(ctx, pid)
    if detail is None or not detail.name:
        raise NotFound(f"공연 정보를 찾을 수 없습니다. (ID: {pid})")

    return ToolResult(
        "culture_get_performance_detail",
        performance_detail_payload(detail),
        pick_format(response_format),
    )


async def get_facility_info(
    ctx: ToolContext,
    facility_name: Optional[str] = None,
    region: Optional[str] = None,
    limit=None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_get_facility_info"""
    name, region = text_arg(facility_name), text_arg(region)
    count = clamp_limit(limit)

    found = await find_facilities(ctx, name, region, count)
    if 0 < len(found) <= DETAIL_FETCH_THRESHOLD:
        logger.info(f"{len(found)} venue(s) found; fetching details")
        found = await enrich_facilities(ctx, found)

    payload = {
        "keyword": name or None,
        "region": region or None,
        "count": len(found),
        "facilities": [facility_entry(f) for f in found],
    }
    return ToolResult("culture_get_facility_info", payload, pick_format(response_format))
