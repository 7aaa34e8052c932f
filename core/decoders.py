# =============================================================================
# core/decoders.py  -  Upstream payload -> NormalizedRecord
# =============================================================================
#
# One small function per record shape.  JSON decoders take the already
# parsed dict; XML decoders take a raw block of KOPIS markup and use the
# Field Extractor.
#
# Every list decoder returns None when the record's identifying key is
# empty, and the caller drops it.
# =============================================================================

from typing import Any, Optional

from core.markup import extract_blocks, extract_value, extract_values, strip_blocks
from core.models import (
    BoxOfficeMovie,
    Facility,
    FacilityDetail,
    Hall,
    MovieDetail,
    MovieSummary,
    Performance,
    PerformanceDetail,
    TourItem,
)


def _s(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


# -----------------------------------------------------------------------------
# KOBIS (JSON)
# -----------------------------------------------------------------------------
def box_office_movie(row: dict) -> Optional[BoxOfficeMovie]:
    code = _s(row.get("movieCd"))
    if not code:
        return None
    return BoxOfficeMovie(
        movie_code=code,
        rank=_s(row.get("rank")),
        title=_s(row.get("movieNm")),
        open_date=_s(row.get("openDt")),
        audience_today=_s(row.get("audiCnt")),
        audience_total=_s(row.get("audiAcc")),
        sales_total=_s(row.get("salesAcc")),
    )


def movie_summary(row: dict) -> Optional[MovieSummary]:
    code = _s(row.get("movieCd"))
    if not code:
        return None
    return MovieSummary(
        movie_code=code,
        title=_s(row.get("movieNm")),
        open_date=_s(row.get("openDt")),
    )


def _rows(value: Any) -> list:
    return [r for r in value if isinstance(r, dict)] if isinstance(value, list) else []


def _names(rows: Any, key: str) -> tuple[str, ...]:
    return tuple(_s(r.get(key)) for r in _rows(rows) if _s(r.get(key)))


def movie_detail(info: dict) -> Optional[MovieDetail]:
    code = _s(info.get("movieCd"))
    if not code:
        return None

    actors = tuple(
        (_s(a.get("peopleNm")), _s(a.get("cast")))
        for a in _rows(info.get("actors"))
        if _s(a.get("peopleNm"))
    )
    companies = tuple(
        (_s(c.get("companyNm")), _s(c.get("companyPartNm")))
        for c in _rows(info.get("companys"))
        if _s(c.get("companyNm"))
    )
    ratings = _names(info.get("audits"), "watchGradeNm")

    return MovieDetail(
        movie_code=code,
        title=_s(info.get("movieNm")),
        title_en=_s(info.get("movieNmEn")),
        runtime=_s(info.get("showTm")),
        open_date=_s(info.get("openDt")),
        status=_s(info.get("prdtStatNm")),
        type_name=_s(info.get("typeNm")),
        nations=_names(info.get("nations"), "nationNm"),
        genres=_names(info.get("genres"), "genreNm"),
        directors=_names(info.get("directors"), "peopleNm"),
        actors=actors,
        companies=companies,
        rating=ratings[0] if ratings else "",
    )


# -----------------------------------------------------------------------------
# KOPIS (XML)
# -----------------------------------------------------------------------------
def performance(block: str) -> Optional[Performance]:
    pid = extract_value(block, "mt20id")
    if not pid:
        return None
    return Performance(
        performance_id=pid,
        name=extract_value(block, "prfnm"),
        start_date=extract_value(block, "prfpdfrom"),
        end_date=extract_value(block, "prfpdto"),
        venue=extract_value(block, "fcltynm"),
        poster=extract_value(block, "poster"),
        genre=extract_value(block, "genrenm"),
        state=extract_value(block, "prfstate"),
        open_run=extract_value(block, "openrun"),
        area=extract_value(block, "area"),
    )


def performance_detail(xml: str) -> PerformanceDetail:
    """Decode a detail body.  An unknown id yields a record with empty name."""
    return PerformanceDetail(
        performance_id=extract_value(xml, "mt20id"),
        name=extract_value(xml, "prfnm"),
        start_date=extract_value(xml, "prfpdfrom"),
        end_date=extract_value(xml, "prfpdto"),
        venue=extract_value(xml, "fcltynm"),
        poster=extract_value(xml, "poster"),
        genre=extract_value(xml, "genrenm"),
        state=extract_value(xml, "prfstate"),
        open_run=extract_value(xml, "openrun"),
        area=extract_value(xml, "area"),
        cast=extract_value(xml, "prfcast"),
        crew=extract_value(xml, "prfcrew"),
        runtime=extract_value(xml, "prfruntime"),
        age_limit=extract_value(xml, "prfage"),
        price=extract_value(xml, "pcseguidance"),
        schedule=extract_value(xml, "dtguidance"),
        images=tuple(url for url in extract_values(xml, "styurl") if url),
    )


def facility(block: str) -> Optional[Facility]:
    fid = extract_value(block, "mt10id")
    if not fid:
        return None
    return Facility(
        facility_id=fid,
        name=extract_value(block, "fcltynm"),
        hall_count=extract_value(block, "mt13cnt"),
        character=extract_value(block, "fcltychartr"),
        sido=extract_value(block, "sidonm"),
        gugun=extract_value(block, "gugunnm"),
        seats=extract_value(block, "seatscale"),
        tel=extract_value(block, "telno"),
        website=extract_value(block, "relateurl"),
        address=extract_value(block, "adres"),
        latitude=extract_value(block, "la"),
        longitude=extract_value(block, "lo"),
    )


def hall(block: str) -> Hall:
    return Hall(
        hall_id=extract_value(block, "mt13id"),
        name=extract_value(block, "prfplcnm"),
        seats=extract_value(block, "seatscale"),
        orchestra_pit=extract_value(block, "stageorchat"),
        stage_pit=extract_value(block, "stagepitchat"),
        stage_width=extract_value(block, "stagewichat"),
        stage_height=extract_value(block, "stagehechat"),
    )


def facility_detail(xml: str) -> FacilityDetail:
    halls = tuple(hall(block) for block in extract_blocks(xml, "mt13"))
    # Hall records repeat venue tags such as <seatscale>.
    venue = strip_blocks(xml, "mt13s")
    return FacilityDetail(
        facility_id=extract_value(venue, "mt10id"),
        name=extract_value(venue, "fcltynm"),
        hall_count=extract_value(venue, "mt13cnt"),
        character=extract_value(venue, "fcltychartr"),
        open_year=extract_value(venue, "opende"),
        seats=extract_value(venue, "seatscale"),
        tel=extract_value(venue, "telno"),
        website=extract_value(venue, "relateurl"),
        address=extract_value(venue, "adres"),
        latitude=extract_value(venue, "la"),
        longitude=extract_value(venue, "lo"),
        parking=extract_value(venue, "parkinglot"),
        restaurant=extract_value(venue, "restaurant"),
        cafe=extract_value(venue, "cafe"),
        store=extract_value(venue, "store"),
        karaoke=extract_value(venue, "nolibang"),
        nursing_room=extract_value(venue, "suyu"),
        barrier_free=extract_value(venue, "barrier"),
        halls=halls,
    )


# -----------------------------------------------------------------------------
# TourAPI (JSON)
# -----------------------------------------------------------------------------
def tour_item(row: dict) -> Optional[TourItem]:
    cid = _s(row.get("contentid"))
    if not cid:
        return None
    return TourItem(
        content_id=cid,
        title=_s(row.get("title")),
        content_type_id=_s(row.get("contenttypeid")),
        addr1=_s(row.get("addr1")),
        addr2=_s(row.get("addr2")),
        area_code=_s(row.get("areacode")),
        tel=_s(row.get("tel")),
        image=_s(row.get("firstimage")),
        mapx=_s(row.get("mapx")),
        mapy=_s(row.get("mapy")),
        event_start=_s(row.get("eventstartdate")),
        event_end=_s(row.get("eventenddate")),
    )


def decode_all(rows: list, decode) -> list:
    """Apply a JSON row decoder, dropping rows without an identifying key."""
    records = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        record = decode(row)
        if record is not None:
            records.append(record)
    return records
