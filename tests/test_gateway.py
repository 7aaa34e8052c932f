"""Upstream gateway: query builders, bounded fetch, payload checks."""

import asyncio
from dataclasses import replace

import httpx
import pytest

from core.errors import UpstreamFailure, UpstreamTimeout
from core.gateway import (
    Gateway,
    check_kobis,
    kobis_rows,
    kobis_section,
    kobis_query,
    kopis_query,
    normalize_items,
    redacted_url,
    tour_items,
    tour_query,
)

from conftest import tour_body


# -----------------------------------------------------------------------------
# Query builders
# -----------------------------------------------------------------------------
def test_kobis_query_sends_raw_key_first(settings):
    query = kobis_query(settings, "boxoffice/searchDailyBoxOfficeList.json", targetDt="20240314")
    assert query.params[0] == ("key", "kobis-key")
    assert query.url.endswith("searchDailyBoxOfficeList.json?key=kobis-key&targetDt=20240314")
    assert query.content_kind == "json"


def test_kopis_query_is_xml_and_skips_missing_filters(settings):
    query = kopis_query(settings, "pblprfr", stdate="20240315", shprfnm=None, shcate="", rows=10)
    assert [name for name, _ in query.params] == ["service", "stdate", "rows"]
    assert query.content_kind == "xml"


def test_user_text_is_percent_encoded(settings):
    query = kobis_query(settings, "movie/searchMovieList.json", movieNm="파묘 & 듄")
    assert query.param("movieNm") == "%ED%8C%8C%EB%AC%98%20%26%20%EB%93%84"


def test_tour_query_encodes_key_and_adds_fixed_params(settings):
    query = tour_query(settings, "areaBasedList2", 10, arrange="P", areaCode="1")
    names = [name for name, _ in query.params]
    assert names == [
        "serviceKey", "numOfRows", "pageNo", "MobileOS", "MobileApp",
        "_type", "listYN", "arrange", "areaCode",
    ]
    assert query.param("serviceKey") == "tour%2Fkey%2B%3D%3D"
    assert query.param("MobileOS") == "ETC"
    assert query.param("_type") == "json"


def test_redacted_url_masks_credentials(settings):
    url = redacted_url(tour_query(settings, "searchKeyword2", 5, keyword="경복궁"))
    assert "tour%2Fkey" not in url
    assert "serviceKey=***" in url


def test_query_timeout_follows_settings(settings):
    query = kopis_query(replace(settings, timeout_ms=2500), "prfplc")
    assert query.timeout_ms == 2500


# -----------------------------------------------------------------------------
# Payload checks
# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    "value, expected",
    [
        (None, []),
        ("", []),
        ({"contentid": "1"}, [{"contentid": "1"}]),
        ([{"contentid": "1"}, {"contentid": "2"}], [{"contentid": "1"}, {"contentid": "2"}]),
    ],
)
def test_normalize_items_always_returns_a_list(value, expected):
    assert normalize_items(value) == expected


def test_tour_items_handles_single_object_and_empty_string():
    assert tour_items(tour_body({"contentid": "9", "title": "x"})) == [{"contentid": "9", "title": "x"}]
    assert tour_items(tour_body("")) == []


def test_tour_items_raises_on_error_result_code():
    body = {"response": {"header": {"resultCode": "30", "resultMsg": "SERVICE_KEY_IS_NOT_REGISTERED_ERROR"}}}
    with pytest.raises(UpstreamFailure) as exc:
        tour_items(body)
    assert exc.value.reason == "upstream"
    assert "SERVICE_KEY_IS_NOT_REGISTERED_ERROR" in exc.value.message


def test_check_kobis_raises_on_fault_info():
    with pytest.raises(UpstreamFailure) as exc:
        check_kobis({"faultInfo": {"message": "유효하지않은 키값입니다.", "errorCode": "320010"}})
    assert "유효하지않은 키값입니다." in exc.value.message


def test_kobis_helpers_tolerate_absent_sections():
    assert kobis_section({}, "movieInfoResult") == {}
    assert kobis_rows({"boxOfficeResult": {"dailyBoxOfficeList": ""}}, "boxOfficeResult", "dailyBoxOfficeList") == []


@pytest.mark.parametrize("body", [
    {"movieListResult": "점검중"},
    {"movieListResult": ["x"]},
    {"movieListResult": {"movieList": {"movieCd": "1"}}},
])
def test_kobis_helpers_reject_wrong_shapes(body):
    with pytest.raises(UpstreamFailure) as exc:
        kobis_rows(body, "movieListResult", "movieList")
    assert exc.value.reason == "decode"


def test_tour_items_rejects_non_object_header():
    with pytest.raises(UpstreamFailure) as exc:
        tour_items({"response": {"header": ["0000"]}})
    assert exc.value.reason == "decode"


# -----------------------------------------------------------------------------
# Fetch
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_fetch_json_decodes_body(gateway, upstream, settings):
    upstream.json("searchDailyBoxOfficeList.json", {"boxOfficeResult": {}})
    data = await gateway.fetch_json(kobis_query(settings, "boxoffice/searchDailyBoxOfficeList.json"))
    assert data == {"boxOfficeResult": {}}


@pytest.mark.asyncio
async def test_undecodable_json_is_a_decode_failure(gateway, upstream, settings):
    upstream.xml("searchDailyBoxOfficeList.json", "<html>maintenance</html>")
    with pytest.raises(UpstreamFailure) as exc:
        await gateway.fetch_json(kobis_query(settings, "boxoffice/searchDailyBoxOfficeList.json"))
    assert exc.value.reason == "decode"


@pytest.mark.asyncio
async def test_http_error_status_is_a_failure(gateway, upstream, settings):
    upstream.xml("pblprfr", "server error", status=502)
    with pytest.raises(UpstreamFailure) as exc:
        await gateway.fetch(kopis_query(settings, "pblprfr"))
    assert exc.value.reason == "network"


@pytest.mark.asyncio
async def test_network_error_is_a_failure(gateway, upstream, settings):
    upstream.respond("pblprfr", httpx.ConnectError("connection refused"))
    with pytest.raises(UpstreamFailure):
        await gateway.fetch(kopis_query(settings, "pblprfr"))


@pytest.mark.asyncio
async def test_transport_timeout_is_upstream_timeout(gateway, upstream, settings):
    upstream.respond("pblprfr", httpx.ReadTimeout("read timed out"))
    with pytest.raises(UpstreamTimeout):
        await gateway.fetch(kopis_query(settings, "pblprfr"))


@pytest.mark.asyncio
async def test_slow_upstream_is_cancelled_at_the_bound(upstream, client, settings):
    cancelled = asyncio.Event()

    async def never_answers(request):
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200, text="late")

    upstream.respond("pblprfr", never_answers)
    gateway = Gateway(replace(settings, timeout_ms=50), client=client)

    with pytest.raises(UpstreamTimeout):
        await gateway.fetch(kopis_query(gateway.settings, "pblprfr"))
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_fetch_xml_list_drops_records_without_key(gateway, upstream, settings):
    from core.decoders import performance

    upstream.xml("pblprfr", "<dbs><db><mt20id>PF1</mt20id></db><db><prfnm>no id</prfnm></db></dbs>")
    records = await gateway.fetch_xml_list(kopis_query(settings, "pblprfr"), "db", performance)
    assert [r.performance_id for r in records] == ["PF1"]


@pytest.mark.asyncio
async def test_fetch_xml_single_without_record_is_none(gateway, upstream, settings):
    from core.decoders import performance_detail

    upstream.xml("pblprfr/PF0", "<dbs></dbs>")
    assert await gateway.fetch_xml_single(kopis_query(settings, "pblprfr/PF0"), performance_detail) is None


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(settings, client):
    async with Gateway(settings, client=client):
        pass
    assert not client.is_closed
