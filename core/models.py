# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# through one tool invocation.  All of them are request-scoped and frozen:
# decoders create them, handlers read them, nobody mutates them.  Enrichment
# (merging a detail record into a summary record) builds a NEW record.
#
# NAMING:
#   Field names are ours, not the upstream's.  The decoders in core/gateway.py
#   and the handler modules map KOBIS / KOPIS / TourAPI field names
#   (movieNm, prfnm, fcltynm, contentid, ...) onto them.
#
# IDENTIFYING KEYS:
#   Every list record has a key field (movie_code, performance_id,
#   facility_id, content_id).  A record whose key is empty is dropped from
#   its collection by the decoder that produced it.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional


# -----------------------------------------------------------------------------
# Upstream plumbing
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class UpstreamQuery:
    """One upstream GET, fully described before it is sent.

    ``params`` is an ordered tuple of (name, value) pairs whose values are
    already encoded for the wire; see the query builders in core/gateway.py.
    """

    base_url: str
    params: tuple[tuple[str, str], ...] = ()
    timeout_ms: int = 15000
    content_kind: str = "json"        # "json" or "xml"

    @property
    def url(self) -> str:
        if not self.params:
            return self.base_url
        query = "&".join(f"{name}={value}" for name, value in self.params)
        return f"{self.base_url}?{query}"

    def param(self, name: str) -> Optional[str]:
        for key, value in self.params:
            if key == name:
                return value
        return None


@dataclass(frozen=True)
class RawUpstreamResponse:
    """The body of one upstream reply, consumed immediately by a decoder."""

    status: int
    text: str
    content_kind: str = "json"


# -----------------------------------------------------------------------------
# Source A - KOBIS (movies)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BoxOfficeMovie:
    """One ranked row of the daily or weekly box office."""

    movie_code: str                    # movieCd - identifying key
    rank: str
    title: str
    open_date: str                     # YYYY-MM-DD as KOBIS sends it
    audience_today: str                # audiCnt
    audience_total: str                # audiAcc
    sales_total: str                   # salesAcc


@dataclass(frozen=True)
class MovieSummary:
    """One hit of the title search, only used to resolve a movie code."""

    movie_code: str
    title: str
    open_date: str = ""


@dataclass(frozen=True)
class MovieDetail:
    movie_code: str
    title: str
    title_en: str = ""
    runtime: str = ""                  # minutes, as a string
    open_date: str = ""                # YYYYMMDD
    status: str = ""                   # 개봉 / 개봉예정 / ...
    type_name: str = ""                # 장편 / 단편
    nations: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    directors: tuple[str, ...] = ()
    actors: tuple[tuple[str, str], ...] = ()       # (name, role)
    companies: tuple[tuple[str, str], ...] = ()    # (name, part e.g. 제작사)
    rating: str = ""                   # first watchGradeNm


# -----------------------------------------------------------------------------
# Source B - KOPIS (performances and venues, XML)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Performance:
    performance_id: str                # mt20id - identifying key
    name: str
    start_date: str = ""
    end_date: str = ""
    venue: str = ""
    poster: str = ""
    genre: str = ""
    state: str = ""                    # 공연중 / 공연예정 / 공연완료
    open_run: str = ""
    area: str = ""


@dataclass(frozen=True)
class PerformanceDetail(Performance):
    cast: str = ""
    crew: str = ""
    runtime: str = ""
    age_limit: str = ""
    price: str = ""                    # pcseguidance
    schedule: str = ""                 # dtguidance
    images: tuple[str, ...] = ()       # styurls/styurl


@dataclass(frozen=True)
class Hall:
    """One stage/hall inside a venue (<mt13> block)."""

    hall_id: str
    name: str
    seats: str = ""
    orchestra_pit: str = ""            # stageorchat
    stage_pit: str = ""                # stagepitchat
    stage_width: str = ""              # stagewichat
    stage_height: str = ""             # stagehechat


@dataclass(frozen=True)
class Facility:
    """A venue as listed by the venue search.

    The detail-only fields stay None unless the record has been enriched
    with a FacilityDetail (see core/aggregate.merge_detail).
    """

    facility_id: str                   # mt10id - identifying key
    name: str
    hall_count: str = ""
    character: str = ""                # fcltychartr (공공/민간 ...)
    sido: str = ""
    gugun: str = ""
    seats: str = ""
    tel: str = ""
    website: str = ""
    address: str = ""
    latitude: str = ""
    longitude: str = ""

    # --- detail-only fields ---
    open_year: Optional[str] = None
    parking: Optional[str] = None
    restaurant: Optional[str] = None
    cafe: Optional[str] = None
    store: Optional[str] = None
    karaoke: Optional[str] = None      # nolibang
    nursing_room: Optional[str] = None  # suyu
    barrier_free: Optional[str] = None
    halls: Optional[tuple[Hall, ...]] = None


@dataclass(frozen=True)
class FacilityDetail:
    facility_id: str
    name: str
    hall_count: str = ""
    character: str = ""
    open_year: str = ""
    seats: str = ""
    tel: str = ""
    website: str = ""
    address: str = ""
    latitude: str = ""
    longitude: str = ""
    parking: str = ""
    restaurant: str = ""
    cafe: str = ""
    store: str = ""
    karaoke: str = ""
    nursing_room: str = ""
    barrier_free: str = ""
    halls: tuple[Hall, ...] = ()


# -----------------------------------------------------------------------------
# Source C - TourAPI (festivals, spots, restaurants)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TourItem:
    content_id: str                    # contentid - identifying key
    title: str
    content_type_id: str = ""
    addr1: str = ""
    addr2: str = ""
    area_code: str = ""
    tel: str = ""
    image: str = ""                    # firstimage
    mapx: str = ""
    mapy: str = ""
    event_start: str = ""              # YYYYMMDD, festivals only
    event_end: str = ""

    @property
    def address(self) -> str:
        return f"{self.addr1} {self.addr2}".strip()


# -----------------------------------------------------------------------------
# ToolResult - what every handler returns
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolResult:
    """The structured outcome of one tool invocation.

    ``payload`` is the JSON-ready, field-mapped object; the render layer
    (tools/render.py) turns it into pretty JSON or into markdown following
    ``response_format``.
    """

    tool: str
    payload: dict[str, Any] = field(default_factory=dict)
    response_format: str = "markdown"
