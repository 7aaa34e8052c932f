"""
Shared fixtures for the culture server tests.

Upstream providers are faked with ``httpx.MockTransport``: a FakeUpstream
maps URL path suffixes to canned responses and records every request it
sees, so tests can assert on the exact query that was sent.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Callable, Union

import httpx
import pytest

from core.config import Settings
from core.context import ToolContext
from core.gateway import Gateway

PINNED_TODAY = date(2024, 3, 15)

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response], Exception]


class FakeUpstream:
    """Routes requests by path suffix; longest matching suffix wins."""

    def __init__(self) -> None:
        self.routes: dict[str, Responder] = {}
        self.requests: list[httpx.Request] = []

    def json(self, suffix: str, body, status: int = 200) -> None:
        self.routes[suffix] = httpx.Response(status, text=json.dumps(body, ensure_ascii=False))

    def xml(self, suffix: str, body: str, status: int = 200) -> None:
        self.routes[suffix] = httpx.Response(status, text=body)

    def respond(self, suffix: str, responder: Responder) -> None:
        self.routes[suffix] = responder

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def requests_to(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        matches = [s for s in self.routes if request.url.path.endswith(s)]
        if not matches:
            return httpx.Response(404, text="no route")
        responder = self.routes[max(matches, key=len)]
        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            return responder(request)
        return responder


@pytest.fixture
def settings() -> Settings:
    return Settings(
        kobis_api_key="kobis-key",
        kopis_api_key="kopis-key",
        tour_api_key="tour/key+==",
        timeout_ms=15000,
        character_limit=25000,
        performance_until="20271231",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(upstream: FakeUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def gateway(settings: Settings, client: httpx.AsyncClient) -> Gateway:
    return Gateway(settings, client=client)


@pytest.fixture
def ctx(settings: Settings, gateway: Gateway) -> ToolContext:
    return ToolContext(settings=settings, gateway=gateway, today=lambda: PINNED_TODAY)


# -----------------------------------------------------------------------------
# Canned upstream bodies
# -----------------------------------------------------------------------------
def box_office_body(count: int, list_key: str = "dailyBoxOfficeList") -> dict:
    rows = [
        {
            "rank": str(i),
            "movieCd": f"2024{i:04d}",
            "movieNm": f"영화{i}",
            "openDt": "2024-02-21",
            "audiCnt": str(1000 * i),
            "audiAcc": str(1234567 * i),
            "salesAcc": str(9876543210 * i),
        }
        for i in range(1, count + 1)
    ]
    return {"boxOfficeResult": {"boxofficeType": "일별 박스오피스", list_key: rows}}


def performance_xml(*ids: str) -> str:
    blocks = "".join(
        f"""
  <db>
    <mt20id>{pid}</mt20id>
    <prfnm><![CDATA[공연 {pid}]]></prfnm>
    <prfpdfrom>2024.03.01</prfpdfrom>
    <prfpdto>2024.04.30</prfpdto>
    <fcltynm>극장 {pid}</fcltynm>
    <poster>http://www.kopis.or.kr/upload/{pid}.jpg</poster>
    <area>서울특별시</area>
    <genrenm>뮤지컬</genrenm>
    <openrun>N</openrun>
    <prfstate>공연중</prfstate>
  </db>"""
        for pid in ids
    )
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<dbs>{blocks}\n</dbs>'


def facility_list_xml(*ids: str) -> str:
    blocks = "".join(
        f"""
  <db>
    <fcltynm>공연장 {fid}</fcltynm>
    <mt10id>{fid}</mt10id>
    <mt13cnt>2</mt13cnt>
    <fcltychartr>공공(문예회관)</fcltychartr>
    <sidonm>서울</sidonm>
    <gugunnm>종로구</gugunnm>
    <opende>1978</opende>
  </db>"""
        for fid in ids
    )
    return f"<dbs>{blocks}\n</dbs>"


def facility_detail_xml(fid: str, address: str = "서울특별시 종로구 세종대로 175") -> str:
    return f"""<dbs>
  <db>
    <fcltynm>공연장 {fid}</fcltynm>
    <mt10id>{fid}</mt10id>
    <mt13cnt>2</mt13cnt>
    <fcltychartr>공공(문예회관)</fcltychartr>
    <opende>1978</opende>
    <seatscale>3022</seatscale>
    <telno>02-399-1000</telno>
    <relateurl>http://www.sejongpac.or.kr</relateurl>
    <adres>{address}</adres>
    <la>37.5725</la>
    <lo>126.9757</lo>
    <restaurant>Y</restaurant>
    <cafe>Y</cafe>
    <store>N</store>
    <nolibang>N</nolibang>
    <suyu>Y</suyu>
    <barrier>Y</barrier>
    <parkinglot>Y</parkinglot>
    <mt13s>
      <mt13>
        <prfplcnm>대극장</prfplcnm>
        <mt13id>{fid}-01</mt13id>
        <seatscale>3022</seatscale>
        <stageorchat>Y</stageorchat>
        <stagewichat>21</stagewichat>
        <stagehechat>12</stagehechat>
      </mt13>
      <mt13>
        <prfplcnm>M씨어터</prfplcnm>
        <mt13id>{fid}-02</mt13id>
        <seatscale>609</seatscale>
      </mt13>
    </mt13s>
  </db>
</dbs>"""


def tour_body(items) -> dict:
    return {
        "response": {
            "header": {"resultCode": "0000", "resultMsg": "OK"},
            "body": {
                "items": {"item": items} if items != "" else "",
                "numOfRows": 10,
                "pageNo": 1,
                "totalCount": len(items) if isinstance(items, list) else 1,
            },
        }
    }


def tour_item_row(cid: str, title: str, **extra) -> dict:
    row = {
        "contentid": cid,
        "contenttypeid": "12",
        "title": title,
        "addr1": "서울특별시 종로구 사직로 161",
        "addr2": "(세종로)",
        "areacode": "1",
        "tel": "02-3700-3900",
        "firstimage": f"http://tong.visitkorea.or.kr/{cid}.jpg",
        "mapx": "126.9769930325",
        "mapy": "37.5788222356",
    }
    row.update(extra)
    return row
