"""Performance search/detail and venue info with enrichment (KOPIS)."""

import pytest

from core.decoders import facility_detail
from core.errors import InvalidRequest, NotFound
from core.performances import (
    DETAIL_FETCH_THRESHOLD,
    get_facility_info,
    get_performance_detail,
    search_performances,
)

from conftest import facility_detail_xml, facility_list_xml, performance_xml

PERFORMANCE_DETAIL_XML = """<dbs>
  <db>
    <mt20id>PF132236</mt20id>
    <prfnm><![CDATA[오페라의 유령]]></prfnm>
    <prfpdfrom>2024.03.01</prfpdfrom>
    <prfpdto>2024.06.30</prfpdto>
    <fcltynm>샤롯데씨어터</fcltynm>
    <prfcast>조승우, 김주택</prfcast>
    <prfcrew></prfcrew>
    <prfruntime>2시간 40분</prfruntime>
    <prfage>만 8세 이상</prfage>
    <pcseguidance>VIP석 170,000원, R석 140,000원</pcseguidance>
    <poster>http://www.kopis.or.kr/upload/PF132236.jpg</poster>
    <genrenm>뮤지컬</genrenm>
    <prfstate>공연중</prfstate>
    <styurls>
      <styurl>http://www.kopis.or.kr/upload/1.jpg</styurl>
      <styurl>http://www.kopis.or.kr/upload/2.jpg</styurl>
    </styurls>
    <dtguidance>화요일 ~ 금요일(19:30), 토요일 ~ 일요일(14:00,19:00)</dtguidance>
  </db>
</dbs>"""


# -----------------------------------------------------------------------------
# Performance search
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_search_translates_genre_and_region(ctx, upstream):
    upstream.xml("pblprfr", performance_xml("PF1", "PF2"))

    result = await search_performances(ctx, keyword="유령", genre="뮤지컬", region="서울", response_format="json")

    params = upstream.requests[0].url.params
    assert params["service"] == "kopis-key"
    assert params["stdate"] == "20240315"
    assert params["eddate"] == "20271231"
    assert params["cpage"] == "1"
    assert params["rows"] == "10"
    assert params["shprfnm"] == "유령"
    assert params["shcate"] == "GGGA"
    assert params["signgucode"] == "11"

    payload = result.payload
    assert payload["count"] == 2
    assert payload["performances"][0] == {
        "id": "PF1",
        "name": "공연 PF1",
        "period": "2024.03.01 ~ 2024.04.30",
        "venue": "극장 PF1",
        "genre": "뮤지컬",
        "status": "공연중",
        "area": "서울특별시",
        "poster": "http://www.kopis.or.kr/upload/PF1.jpg",
    }


@pytest.mark.asyncio
async def test_unknown_genre_and_region_are_dropped(ctx, upstream):
    upstream.xml("pblprfr", performance_xml())

    result = await search_performances(ctx, genre="오페레타", region="평양")

    params = upstream.requests[0].url.params
    assert "shcate" not in params
    assert "signgucode" not in params
    assert result.payload["performances"] == []
    assert result.payload["genre"] == "오페레타"


@pytest.mark.asyncio
async def test_search_limit_is_clamped(ctx, upstream):
    upstream.xml("pblprfr", performance_xml(*(f"PF{i}" for i in range(25))))

    result = await search_performances(ctx, limit=100)

    assert upstream.requests[0].url.params["rows"] == "20"
    assert len(result.payload["performances"]) == 20


# -----------------------------------------------------------------------------
# Performance detail
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_performance_detail(ctx, upstream):
    upstream.xml("pblprfr/PF132236", PERFORMANCE_DETAIL_XML)

    result = await get_performance_detail(ctx, performance_id="PF132236", response_format="json")

    payload = result.payload
    assert payload["name"] == "오페라의 유령"
    assert payload["period"] == "2024.03.01 ~ 2024.06.30"
    assert payload["cast"] == "조승우, 김주택"
    assert payload["crew"] == ""
    assert payload["ageLimit"] == "만 8세 이상"
    assert payload["images"] == ["http://www.kopis.or.kr/upload/1.jpg", "http://www.kopis.or.kr/upload/2.jpg"]


@pytest.mark.asyncio
async def test_unknown_performance_is_not_found(ctx, upstream):
    upstream.xml("pblprfr/PF000000", "<dbs><db><mt20id></mt20id><prfnm></prfnm></db></dbs>")

    with pytest.raises(NotFound) as exc:
        await get_performance_detail(ctx, performance_id="PF000000")

    assert exc.value.message == "공연 정보를 찾을 수 없습니다. (ID: PF000000)"


@pytest.mark.asyncio
async def test_performance_detail_requires_id(ctx, upstream):
    with pytest.raises(InvalidRequest):
        await get_performance_detail(ctx, performance_id="  ")
    assert upstream.requests == []


# -----------------------------------------------------------------------------
# Facility info + enrichment
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_small_result_is_enriched_with_details(ctx, upstream):
    upstream.xml("prfplc", facility_list_xml("FC1", "FC2"))
    upstream.xml("prfplc/FC1", facility_detail_xml("FC1"))
    upstream.xml("prfplc/FC2", facility_detail_xml("FC2", address="서울특별시 중구"))

    result = await get_facility_info(ctx, facility_name="세종", region="서울", response_format="json")

    assert len(upstream.requests_to("prfplc/FC1")) == 1
    assert len(upstream.requests_to("prfplc/FC2")) == 1
    assert upstream.requests[0].url.params["shprfnmfct"] == "세종"
    assert upstream.requests[0].url.params["signgucode"] == "11"

    first, second = result.payload["facilities"]
    assert first["id"] == "FC1"
    assert first["address"] == "서울특별시 종로구 세종대로 175"
    assert second["address"] == "서울특별시 중구"
    assert first["seatCount"] == "3022"
    assert first["parking"] == "Y"
    assert first["barrierFree"] == "Y"
    assert first["latitude"] == "37.5725"
    assert first["area"] == "서울 종로구"
    assert [h["name"] for h in first["halls"]] == ["대극장", "M씨어터"]
    assert first["halls"][0]["stageWidth"] == "21"


@pytest.mark.asyncio
async def test_large_result_is_not_enriched(ctx, upstream):
    ids = [f"FC{i}" for i in range(DETAIL_FETCH_THRESHOLD + 1)]
    upstream.xml("prfplc", facility_list_xml(*ids))

    result = await get_facility_info(ctx, response_format="json")

    assert upstream.paths() == ["/openApi/restful/prfplc"]
    assert result.payload["count"] == 4
    for venue in result.payload["facilities"]:
        assert venue["parking"] is None
        assert venue["halls"] is None


@pytest.mark.asyncio
async def test_failed_detail_leaves_only_that_venue_unenriched(ctx, upstream):
    upstream.xml("prfplc", facility_list_xml("FC1", "FC2"))
    upstream.xml("prfplc/FC1", facility_detail_xml("FC1"))
    upstream.xml("prfplc/FC2", "gateway error", status=503)

    result = await get_facility_info(ctx, response_format="json")

    first, second = result.payload["facilities"]
    assert first["halls"] is not None
    assert second["halls"] is None
    assert second["name"] == "공연장 FC2"


@pytest.mark.asyncio
async def test_empty_detail_value_does_not_replace_summary_value(ctx, upstream):
    listing = facility_list_xml("FC1").replace("</db>", "<telno>02-000-0000</telno></db>")
    detail = facility_detail_xml("FC1").replace("<telno>02-399-1000</telno>", "<telno></telno>")
    upstream.xml("prfplc", listing)
    upstream.xml("prfplc/FC1", detail)

    result = await get_facility_info(ctx, response_format="json")

    [venue] = result.payload["facilities"]
    assert venue["tel"] == "02-000-0000"
    assert venue["seatCount"] == "3022"


@pytest.mark.asyncio
async def test_no_venues_found(ctx, upstream):
    upstream.xml("prfplc", "<dbs></dbs>")

    result = await get_facility_info(ctx, facility_name="없는공연장")

    assert result.payload == {"keyword": "없는공연장", "region": None, "count": 0, "facilities": []}


def test_venue_fields_ignore_cdata_values_inside_halls():
    xml = facility_detail_xml("FC1").replace(
        "<seatscale>609</seatscale>", "<seatscale><![CDATA[609]]></seatscale>"
    ).replace(
        "<prfplcnm>대극장</prfplcnm>", "<prfplcnm>대극장</prfplcnm><telno><![CDATA[02-111-2222]]></telno>"
    )

    detail = facility_detail(xml)

    assert detail.seats == "3022"
    assert detail.tel == "02-399-1000"
    assert [h.seats for h in detail.halls] == ["3022", "609"]
