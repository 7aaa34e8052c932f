# =============================================================================
# tools/render.py  -  ToolResult -> text (markdown or pretty JSON)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Turns the structured payload of a ToolResult into the single text block
#   the agent receives.
#
#   json      json.dumps(payload, indent=2, ensure_ascii=False)
#   markdown  one template per tool: a summary header, one block per item in
#             result order, and a trailing "Tip" line where it helps the
#             agent pick the next tool
#
# CONTEXT BUDGET DISCIPLINE:
#   Whatever the format, the text is capped at Settings.character_limit
#   (25 000 by default).  Anything longer is cut and a visible marker is
#   appended, so the agent knows it is looking at a partial answer.
# =============================================================================

import json
from typing import Callable, Optional
from urllib.parse import quote

from core.config import DEFAULT_CHARACTER_LIMIT
from core.errors import InternalError
from core.formatting import truncate_text
from core.models import ToolResult

_TABLE_HEAD = "| 항목 | 내용 |\n|------|------|\n"
_MEDALS = ("🥇", "🥈", "🥉")
_NO_INFO = "정보 없음"


def _medal(index: int, fallback: str) -> str:
    return _MEDALS[index] if index < len(_MEDALS) else f"{fallback}."


def _status_emoji(state: str) -> str:
    if state == "공연중":
        return "🟢"
    if state == "공연예정":
        return "🟡"
    return "⚫"


def _filters(payload: dict, *pairs: tuple[str, str]) -> str:
    lines = ""
    for key, label in pairs:
        value = payload.get(key)
        if not value:
            continue
        lines += f'> {label}: "{value}"\n' if key == "keyword" else f"> {label}: {value}\n"
    return lines


def _map_link(title: str, lat: str, lng: str) -> str:
    return f"https://map.kakao.com/link/map/{quote(title, safe='')},{lat},{lng}"


# =============================================================================
# Source A - movies
# =============================================================================
def box_office_markdown(payload: dict) -> str:
    label = "주간" if payload["type"] == "weekly" else "일별"
    md = f"## 🎬 {label} 박스오피스 ({payload['date']})\n\n"

    movies = payload["movies"]
    if not movies:
        return md + "조회된 영화가 없습니다."

    for idx, m in enumerate(movies):
        md += f"### {_medal(idx, m['rank'])} {m['title']}\n"
        md += f"- **개봉일**: {m['openDate']}\n"
        md += f"- **당일 관객**: {m['audienceToday']}명\n"
        md += f"- **누적 관객**: {m['audienceTotal']}명\n"
        md += f"- **누적 매출**: {m['salesTotal']}원\n"
        md += f"- **영화코드**: `{m['movieCode']}`\n\n"

    md += "---\n> 💡 **Tip**: 영화 상세정보는 `culture_get_movie_detail` 도구를 사용하세요.\n"
    return md


def movie_detail_markdown(payload: dict) -> str:
    md = f"## 🎬 {payload['title']}\n\n"
    if payload["titleEn"]:
        md += f"*{payload['titleEn']}*\n\n"

    md += _TABLE_HEAD
    md += f"| **개봉일** | {payload['openDate'] or _NO_INFO} |\n"
    md += f"| **상영시간** | {payload['runtime'] or _NO_INFO}분 |\n"
    md += f"| **관람등급** | {payload['rating'] or _NO_INFO} |\n"
    md += f"| **장르** | {', '.join(payload['genres']) or _NO_INFO} |\n"
    md += f"| **국가** | {', '.join(payload['nations']) or _NO_INFO} |\n"
    md += f"| **유형** | {payload['type'] or _NO_INFO} |\n\n"

    if payload["directors"]:
        md += f"### 🎥 감독\n{', '.join(payload['directors'])}\n\n"

    if payload["actors"]:
        md += "### 🎭 출연진\n"
        for actor in payload["actors"]:
            role = f" ({actor['role']} 역)" if actor["role"] else ""
            md += f"- **{actor['name']}**{role}\n"
        md += "\n"

    if payload["producers"]:
        md += f"### 🏢 제작사\n{', '.join(payload['producers'])}\n\n"
    if payload["distributors"]:
        md += f"### 📦 배급사\n{', '.join(payload['distributors'])}\n\n"
    return md


# =============================================================================
# Source B - performances and venues
# =============================================================================
def performance_search_markdown(payload: dict) -> str:
    md = "## 🎭 공연 검색 결과\n\n"
    md += _filters(payload, ("keyword", "검색어"), ("genre", "장르"), ("region", "지역"))
    md += f"> {payload['count']}개 공연 발견\n\n"

    performances = payload["performances"]
    if not performances:
        return md + "검색된 공연이 없습니다."

    for idx, p in enumerate(performances, start=1):
        md += f"### {idx}. {p['name']}\n"
        md += f"- **기간**: {p['period']}\n"
        md += f"- **장소**: {p['venue']}\n"
        md += f"- **장르**: {p['genre']}\n"
        md += f"- **상태**: {_status_emoji(p['status'])} {p['status']}\n"
        md += f"- **공연ID**: `{p['id']}`\n\n"

    md += "---\n> 💡 **Tip**: 공연 상세정보는 `culture_get_performance_detail` 도구에 공연ID를 입력하세요.\n"
    return md


def performance_detail_markdown(payload: dict) -> str:
    md = f"## 🎭 {payload['name']}\n\n"
    md += f"{_status_emoji(payload['status'])} **{payload['status']}** | {payload['genre']}\n\n"

    md += _TABLE_HEAD
    md += f"| **공연기간** | {payload['period']} |\n"
    md += f"| **공연장** | {payload['venue']} |\n"
    md += f"| **관람시간** | {payload['runtime'] or _NO_INFO} |\n"
    md += f"| **관람연령** | {payload['ageLimit'] or _NO_INFO} |\n\n"

    if payload["price"]:
        prices = payload["price"].replace(",", "\n")
        md += f"### 💰 티켓가격\n{prices}\n\n"
    if payload["schedule"]:
        md += f"### 📅 공연시간\n{payload['schedule']}\n\n"
    if payload["cast"]:
        md += f"### 🎭 출연진\n{payload['cast']}\n\n"
    if payload["crew"]:
        md += f"### 🎬 제작진\n{payload['crew']}\n\n"
    return md


_AMENITIES = (
    ("parking", "🅿️ 주차장"),
    ("restaurant", "🍽️ 레스토랑"),
    ("cafe", "☕ 카페"),
    ("store", "🏪 편의점"),
    ("nursingRoom", "👶 수유실"),
    ("barrierFree", "♿ 장애인시설"),
    ("karaoke", "🎤 노래방"),
)


def _hall_line(hall: dict) -> str:
    line = f"- **{hall['name']}**: {hall['seats'] or _NO_INFO}석"
    dimensions = []
    if hall["stageWidth"]:
        dimensions.append(f"폭 {hall['stageWidth']}m")
    if hall["stageHeight"]:
        dimensions.append(f"높이 {hall['stageHeight']}m")
    if hall["orchestraPit"]:
        dimensions.append(f"오케스트라피트 {hall['orchestraPit']}m")
    if dimensions:
        line += f" ({', '.join(dimensions)})"
    return line + "\n"


def facility_markdown(payload: dict) -> str:
    md = "## 🏛️ 공연장 검색 결과\n\n"
    md += _filters(payload, ("keyword", "검색어"), ("region", "지역"))

    facilities = payload["facilities"]
    if not facilities:
        return md + "\n검색된 공연장이 없습니다."

    md += f"> {payload['count']}개 공연장 발견\n\n"

    for idx, f in enumerate(facilities, start=1):
        md += f"### {idx}. {f['name']}\n\n"
        md += _TABLE_HEAD
        md += f"| **유형** | {f['type'] or _NO_INFO} |\n"
        md += f"| **위치** | {f['area']} |\n"
        md += f"| **주소** | {f['address'] or _NO_INFO} |\n"
        md += f"| **좌석수** | {f['seatCount'] or _NO_INFO}석 |\n"
        if f["tel"]:
            md += f"| **전화** | {f['tel']} |\n"
        if f["website"]:
            md += f"| **웹사이트** | {f['website']} |\n"
        if f["openDate"]:
            md += f"| **개관일** | {f['openDate']} |\n"
        md += "\n"

        # Enriched venues only (halls is None otherwise).
        if f["halls"] is not None:
            if f["halls"]:
                md += "#### 🎪 공연장(홀) 정보\n"
                md += "".join(_hall_line(h) for h in f["halls"])
                md += "\n"

            amenities = [label for key, label in _AMENITIES if f[key] == "Y"]
            if amenities:
                md += "#### 🏢 부대시설\n"
                md += " | ".join(amenities) + "\n\n"

            if f["latitude"] and f["longitude"]:
                md += "#### 📍 위치\n"
                md += f"- 위도: {f['latitude']}, 경도: {f['longitude']}\n"
                md += f"- [카카오맵에서 보기]({_map_link(f['name'], f['latitude'], f['longitude'])})\n\n"

        md += "---\n\n"
    return md


# =============================================================================
# Composite - recommendations
# =============================================================================
def _performance_section(md: str, entries: Optional[list], empty_text: str) -> str:
    if entries is None:
        return md + "데이터를 불러올 수 없습니다.\n"
    if not entries:
        return md + empty_text + "\n"
    for idx, p in enumerate(entries, start=1):
        md += f"{idx}. **{p['name']}** @ {p['venue']}\n"
    return md


def recommendations_markdown(payload: dict) -> str:
    region = payload["region"]
    md = f"## ✨ 오늘의 추천 ({payload['date']})\n\n"

    md += "### 🎬 인기 영화 TOP 5\n\n"
    movies = payload["movies"]
    if movies is None:
        md += "데이터를 불러올 수 없습니다.\n"
    elif not movies:
        md += "조회된 영화가 없습니다.\n"
    else:
        for idx, m in enumerate(movies):
            md += f"{_medal(idx, str(idx + 1))} **{m['title']}** - 누적 {m['audienceTotal']}명\n"

    md += f"\n### 🎭 {region} 뮤지컬\n\n"
    md = _performance_section(md, payload["musicals"], "진행 중인 뮤지컬이 없습니다.")

    md += f"\n### 🎪 {region} 연극\n\n"
    md = _performance_section(md, payload["theaters"], "진행 중인 연극이 없습니다.")

    md += "\n---\n> 💡 **Tip**: 상세정보는 각 도구를 사용해 확인하세요!\n"
    return md


# =============================================================================
# Source C - TourAPI
# =============================================================================
def _place_table(item: dict, address_label: str) -> str:
    md = _TABLE_HEAD
    if item["address"]:
        md += f"| **{address_label}** | {item['address']} |\n"
    if item["tel"]:
        md += f"| **연락처** | {item['tel']} |\n"
    if item.get("mapx") and item.get("mapy"):
        link = _map_link(item["title"], item["mapy"], item["mapx"])
        md += f"| **지도** | [카카오맵에서 보기]({link}) |\n"
    return md + "\n"


def festival_markdown(payload: dict) -> str:
    md = "## 🎪 축제/행사 검색 결과\n\n"
    md += f"> {payload['year']}년 {int(payload['month'])}월 축제\n"
    md += _filters(payload, ("keyword", "검색어"), ("region", "지역"))
    md += f"> {payload['count']}개 축제 발견\n\n"

    festivals = payload["festivals"]
    if not festivals:
        return md + "검색된 축제가 없습니다. 다른 월이나 지역을 검색해보세요."

    for idx, item in enumerate(festivals, start=1):
        md += f"### {idx}. {item['title']}\n\n"
        md += _TABLE_HEAD
        if item["startDate"] and item["endDate"]:
            md += f"| **기간** | {item['startDate']} ~ {item['endDate']} |\n"
        if item["address"]:
            md += f"| **장소** | {item['address']} |\n"
        if item["tel"]:
            md += f"| **연락처** | {item['tel']} |\n"
        md += "\n"
    return md


def tourist_spot_markdown(payload: dict) -> str:
    category = payload["category"]
    md = f"## 🗺️ {category} 검색 결과\n\n"
    md += _filters(payload, ("keyword", "검색어"), ("region", "지역"))
    md += f"> {payload['count']}개 {category} 발견\n\n"

    spots = payload["spots"]
    if not spots:
        return md + f"검색된 {category}이(가) 없습니다."

    for idx, item in enumerate(spots, start=1):
        md += f"### {idx}. {item['title']}\n\n"
        md += _place_table(item, "주소")
    return md


def restaurant_markdown(payload: dict) -> str:
    md = "## 🍽️ 맛집/음식점 검색 결과\n\n"
    md += _filters(payload, ("keyword", "검색어"), ("region", "지역"))
    md += f"> {payload['count']}개 음식점 발견\n\n"

    restaurants = payload["restaurants"]
    if not restaurants:
        return md + "검색된 음식점이 없습니다."

    for idx, item in enumerate(restaurants, start=1):
        md += f"### {idx}. {item['title']}\n\n"
        md += _place_table(item, "주소")
    return md


# =============================================================================
# Entry point
# =============================================================================
MARKDOWN_RENDERERS: dict[str, Callable[[dict], str]] = {
    "culture_get_box_office": box_office_markdown,
    "culture_get_movie_detail": movie_detail_markdown,
    "culture_search_performance": performance_search_markdown,
    "culture_get_performance_detail": performance_detail_markdown,
    "culture_get_facility_info": facility_markdown,
    "culture_get_recommendations": recommendations_markdown,
    "culture_search_festival": festival_markdown,
    "culture_search_tourist_spot": tourist_spot_markdown,
    "culture_search_restaurant": restaurant_markdown,
}


def to_json(payload: dict) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render(result: ToolResult, limit: int = DEFAULT_CHARACTER_LIMIT) -> str:
    """The final, size-capped text for one ToolResult."""
    if result.response_format == "json":
        text = to_json(result.payload)
    else:
        renderer = MARKDOWN_RENDERERS.get(result.tool)
        if renderer is None:
            raise InternalError(f"{result.tool} 결과를 표시할 수 없습니다.")
        text = renderer(result.payload)
    return truncate_text(text, limit)
