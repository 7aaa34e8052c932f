# =============================================================================
# tools/catalog.py  -  Static Tool Catalog (what tools/list returns)
# =============================================================================
#
# Nine tools, each with a Korean description (the LLM reads it to decide
# WHEN to call the tool) and a JSON Schema for its arguments (so it knows
# WHAT to pass).  The catalog never changes at runtime.
#
# Naming: every tool is prefixed "culture_" and is read-only.
#   culture_get_*     retrieval of one thing or a fixed view
#   culture_search_*  query with optional filters
# =============================================================================

import copy

from core.config import GENRE_CODES

_FORMAT_PROPERTY = {
    "type": "string",
    "enum": ["markdown", "json"],
    "description": "응답 형식. 기본값: markdown",
}


def _string(description: str, enum=None) -> dict:
    prop = {"type": "string"}
    if enum:
        prop["enum"] = list(enum)
    prop["description"] = description
    return prop


def _limit(noun: str, maximum: int = 20) -> dict:
    return {"type": "number", "description": f"조회할 {noun} 수 (1-{maximum}). 기본값: 10"}


def _tool(name: str, description: str, properties: dict, required=()) -> dict:
    properties = dict(properties)
    properties["response_format"] = dict(_FORMAT_PROPERTY)
    return {
        "name": name,
        "description": description,
        "inputSchema": {
            "type": "object",
            "properties": properties,
            "required": list(required),
        },
    }


TOOLS = (
    # --- Source A: KOBIS ---
    _tool(
        "culture_get_box_office",
        "일별 또는 주간 영화 박스오피스 순위를 조회합니다. 현재 상영 중인 인기 영화를 확인할 수 있습니다.",
        {
            "type": _string("박스오피스 유형: daily(일별), weekly(주간). 기본값: daily", enum=("daily", "weekly")),
            "date": _string("조회 날짜 (YYYYMMDD 형식). 기본값: 어제 날짜"),
            "limit": _limit("영화", maximum=10),
        },
    ),
    _tool(
        "culture_get_movie_detail",
        "특정 영화의 상세정보를 조회합니다. 감독, 배우, 줄거리, 관람등급 등을 확인할 수 있습니다.",
        {
            "movie_name": _string("영화 제목으로 검색"),
            "movie_code": _string("KOBIS 영화 코드 (박스오피스에서 확인 가능)"),
        },
    ),
    # --- Source B: KOPIS ---
    _tool(
        "culture_search_performance",
        "공연을 검색합니다. 연극, 뮤지컬, 콘서트, 클래식 등 다양한 장르의 공연을 찾을 수 있습니다.",
        {
            "keyword": _string("검색 키워드 (공연명)"),
            "genre": _string("공연 장르", enum=GENRE_CODES.keys()),
            "region": _string("지역명 (예: 서울, 부산, 대구 등)"),
            "limit": _limit("공연"),
        },
    ),
    _tool(
        "culture_get_performance_detail",
        "특정 공연의 상세정보를 조회합니다. 출연진, 공연시간, 티켓가격, 공연장 정보 등을 확인할 수 있습니다.",
        {"performance_id": _string("공연 ID (공연 검색에서 확인 가능)")},
        required=("performance_id",),
    ),
    _tool(
        "culture_get_facility_info",
        "공연장/극장 정보를 조회합니다. 위치, 좌석수, 연락처 등을 확인할 수 있습니다.",
        {
            "facility_name": _string("공연장 이름으로 검색"),
            "region": _string("지역명 (예: 서울, 부산 등)"),
            "limit": _limit("공연장"),
        },
    ),
    # --- Composite ---
    _tool(
        "culture_get_recommendations",
        "오늘의 추천 콘텐츠를 제공합니다. 인기 영화와 공연을 한 번에 확인할 수 있습니다.",
        {"region": _string("공연 추천 지역 (예: 서울). 기본값: 서울")},
    ),
    # --- Source C: TourAPI ---
    _tool(
        "culture_search_festival",
        "전국의 축제와 행사를 검색합니다. 지역별, 월별로 진행 중이거나 예정된 축제를 찾을 수 있습니다.",
        {
            "keyword": _string("검색 키워드 (축제명)"),
            "region": _string("지역명 (예: 서울, 부산, 제주 등)"),
            "month": _string("조회할 월 (1-12). 기본값: 현재 월"),
            "limit": _limit("축제"),
        },
    ),
    _tool(
        "culture_search_tourist_spot",
        "전국의 관광지와 명소를 검색합니다. 지역별 인기 관광지, 문화시설, 테마여행지를 찾을 수 있습니다.",
        {
            "keyword": _string("검색 키워드 (관광지명)"),
            "region": _string("지역명 (예: 서울, 부산, 제주 등)"),
            "category": _string("관광지 유형. 기본값: 관광지", enum=("관광지", "문화시설", "레포츠", "쇼핑")),
            "limit": _limit("관광지"),
        },
    ),
    _tool(
        "culture_search_restaurant",
        "전국의 맛집과 음식점을 검색합니다. 지역별 인기 음식점, 한식/양식/중식 등 다양한 맛집을 찾을 수 있습니다.",
        {
            "keyword": _string("검색 키워드 (음식점명 또는 음식 종류)"),
            "region": _string("지역명 (예: 서울, 부산, 전주 등)"),
            "limit": _limit("음식점"),
        },
    ),
)

TOOL_NAMES = tuple(tool["name"] for tool in TOOLS)


def list_tools() -> list[dict]:
    """A fresh copy of the catalog, safe to hand to a serializer."""
    return copy.deepcopy(list(TOOLS))
