# =============================================================================
# core/movies.py  -  Box Office & Movie Detail (Source A: KOBIS, JSON)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   culture_get_box_office    daily / weekly ranking, yesterday by default,
#                             at most 10 movies
#   culture_get_movie_detail  full record for a movie code; a title is first
#                             resolved to a code with the title search
#
#   The fetch_* / *_entry helpers are shared with core/recommendations.py.
# =============================================================================

from datetime import timedelta
from typing import Optional

from core.context import BOX_OFFICE_MAX, ToolContext, clamp_limit, pick_format, text_arg
from core.decoders import box_office_movie, decode_all, movie_detail, movie_summary
from core.errors import InvalidRequest, NotFound
from core.formatting import format_date, format_number
from core.gateway import kobis_query, kobis_rows, kobis_section
from core.models import BoxOfficeMovie, MovieDetail, MovieSummary, ToolResult

MAX_ACTORS = 10

_BOX_OFFICE_PATHS = {
    "daily": ("boxoffice/searchDailyBoxOfficeList.json", "dailyBoxOfficeList"),
    "weekly": ("boxoffice/searchWeeklyBoxOfficeList.json", "weeklyBoxOfficeList"),
}


def yesterday(ctx: ToolContext) -> str:
    return (ctx.today() - timedelta(days=1)).strftime("%Y%m%d")


# -----------------------------------------------------------------------------
# Upstream calls
# -----------------------------------------------------------------------------
async def fetch_box_office(ctx: ToolContext, kind: str, target_date: str) -> list[BoxOfficeMovie]:
    """The ranked rows of one box office feed, in upstream order."""
    path, list_key = _BOX_OFFICE_PATHS[kind]
    params = {"targetDt": target_date}
    if kind == "weekly":
        params["weekGb"] = "0"           # 0 = whole week (Mon-Sun)

    data = await ctx.gateway.fetch_json(kobis_query(ctx.settings, path, **params))
    rows = kobis_rows(data, "boxOfficeResult", list_key)
    return decode_all(rows, box_office_movie)


async def search_movies(ctx: ToolContext, title: str) -> list[MovieSummary]:
    query = kobis_query(ctx.settings, "movie/searchMovieList.json", movieNm=title)
    data = await ctx.gateway.fetch_json(query)
    rows = kobis_rows(data, "movieListResult", "movieList")
    return decode_all(rows, movie_summary)


async def fetch_movie_detail(ctx: ToolContext, movie_code: str) -> Optional[MovieDetail]:
    query = kobis_query(ctx.settings, "movie/searchMovieInfo.json", movieCd=movie_code)
    data = await ctx.gateway.fetch_json(query)
    info = kobis_section(data, "movieInfoResult").get("movieInfo")
    if not isinstance(info, dict):
        return None
    return movie_detail(info)


# -----------------------------------------------------------------------------
# Payload mapping
# -----------------------------------------------------------------------------
def box_office_entry(movie: BoxOfficeMovie) -> dict:
    return {
        "rank": movie.rank,
        "title": movie.title,
        "openDate": format_date(movie.open_date),
        "audienceToday": format_number(movie.audience_today),
        "audienceTotal": format_number(movie.audience_total),
        "salesTotal": format_number(movie.sales_total),
        "movieCode": movie.movie_code,
    }


def movie_detail_payload(movie: MovieDetail) -> dict:
    return {
        "code": movie.movie_code,
        "title": movie.title,
        "titleEn": movie.title_en,
        "runtime": movie.runtime,
        "openDate": format_date(movie.open_date),
        "status": movie.status,
        "type": movie.type_name,
        "nations": list(movie.nations),
        "genres": list(movie.genres),
        "directors": list(movie.directors),
        "actors": [{"name": name, "role": role} for name, role in movie.actors[:MAX_ACTORS]],
        "rating": movie.rating or "정보 없음",
        "producers": [name for name, part in movie.companies if "제작" in part],
        "distributors": [name for name, part in movie.companies if "배급" in part],
    }


# -----------------------------------------------------------------------------
# Tool handlers
# -----------------------------------------------------------------------------
async def get_box_office(
    ctx: ToolContext,
    type: Optional[str] = None,
    date: Optional[str] = None,
    limit=None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_get_box_office"""
    kind = "weekly" if text_arg(type) == "weekly" else "daily"
    target = text_arg(date) or yesterday(ctx)
    count = clamp_limit(limit, maximum=BOX_OFFICE_MAX)

    movies = (await fetch_box_office(ctx, kind, target))[:count]

    payload = {
        "type": kind,
        "date": format_date(target),
        "movies": [box_office_entry(m) for m in movies],
    }
    return ToolResult("culture_get_box_office", payload, pick_format(response_format))


async def get_movie_detail(
    ctx: ToolContext,
    movie_name: Optional[str] = None,
    movie_code: Optional[str] = None,
    response_format: Optional[str] = None,
) -> ToolResult:
    """culture_get_movie_detail

    An explicit movie_code wins over movie_name.  A title resolves to the
    FIRST hit of the title search.
    """
    code = text_arg(movie_code)
    name = text_arg(movie_name)

    if not code and name:
        hits = await search_movies(ctx, name)
        if not hits:
            raise NotFound(f'"{name}" 영화를 찾을 수 없습니다.')
        code = hits[0].movie_code

    if not code:
        raise InvalidRequest("movie_name 또는 movie_code 중 하나를 입력해주세요.")

    movie = await fetch_movie_detail(ctx, code)
    if movie is None:
        raise NotFound(f"영화 정보를 찾을 수 없습니다. (코드: {code})")

    return ToolResult("culture_get_movie_detail", movie_detail_payload(movie), pick_format(response_format))
