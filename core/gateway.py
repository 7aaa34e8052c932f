# =============================================================================
# core/gateway.py  -  Upstream Gateway (bounded-timeout fetch + decoding)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Talks to the three upstream providers.  Everything that leaves the
#   process goes through Gateway.fetch(), which:
#     - sends ONE GET with an explicit time bound (default 15000 ms),
#     - cancels the request when the bound expires (UpstreamTimeout),
#     - maps network errors and HTTP >= 400 to UpstreamFailure,
#     - never retries.
#
#   On top of fetch() sit the per-encoding helpers:
#     fetch_json(query)                        -> decoded JSON
#     fetch_xml_list(query, item_tag, decode)  -> list of records
#     fetch_xml_single(query, decode)          -> record or None
#
# THE THREE SOURCES (and their quirks, absorbed by the query builders):
#   A  KOBIS    JSON  key=<raw key>
#   B  KOPIS    XML   service=<raw key>, repeating <db> blocks
#   C  TourAPI  JSON  serviceKey=<URL-encoded key>, fixed MobileOS /
#                     MobileApp / _type params, and an items.item field that
#                     is an object for one hit and an array for many
#
# Each call is independent: one failing request never cancels a sibling
# already in flight (see core/aggregate.py).
# =============================================================================

import asyncio
import json
import logging
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import quote

import httpx

from core.config import Settings
from core.errors import UpstreamFailure, UpstreamTimeout
from core.markup import extract_blocks, has_block
from core.models import RawUpstreamResponse, UpstreamQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")

KOBIS_BASE = "http://www.kobis.or.kr/kobisopenapi/webservice/rest"
KOPIS_BASE = "http://www.kopis.or.kr/openApi/restful"
TOUR_BASE = "http://apis.data.go.kr/B551011/KorService2"

TOUR_APP_NAME = "KoreaCultureMCP"

# Query parameters that carry a credential; masked in logs.
_SECRET_PARAMS = {"key", "service", "serviceKey"}


# =============================================================================
# Query builders
# =============================================================================
def _encode(value: Any) -> str:
    return quote(str(value), safe="")


def _append(pairs: list, params: dict) -> None:
    # kwargs keep call-site order; None / "" means "filter not requested".
    for name, value in params.items():
        if value is None or value == "":
            continue
        pairs.append((name, _encode(value)))


def kobis_query(settings: Settings, path: str, **params) -> UpstreamQuery:
    """Source A.  KOBIS takes its key raw, as issued."""
    pairs = [("key", settings.kobis_api_key)]
    _append(pairs, params)
    return UpstreamQuery(
        base_url=f"{KOBIS_BASE}/{path}",
        params=tuple(pairs),
        timeout_ms=settings.timeout_ms,
        content_kind="json",
    )


def kopis_query(settings: Settings, path: str, **params) -> UpstreamQuery:
    """Source B.  KOPIS takes its key raw in the ``service`` parameter."""
    pairs = [("service", settings.kopis_api_key)]
    _append(pairs, params)
    return UpstreamQuery(
        base_url=f"{KOPIS_BASE}/{path}",
        params=tuple(pairs),
        timeout_ms=settings.timeout_ms,
        content_kind="xml",
    )


def tour_query(settings: Settings, operation: str, num_of_rows: int, **params) -> UpstreamQuery:
    """Source C.  The data.go.kr key must be URL-encoded before sending."""
    pairs = [
        ("serviceKey", _encode(settings.tour_api_key)),
        ("numOfRows", str(num_of_rows)),
        ("pageNo", "1"),
        ("MobileOS", "ETC"),
        ("MobileApp", TOUR_APP_NAME),
        ("_type", "json"),
        ("listYN", "Y"),
    ]
    _append(pairs, params)
    return UpstreamQuery(
        base_url=f"{TOUR_BASE}/{operation}",
        params=tuple(pairs),
        timeout_ms=settings.timeout_ms,
        content_kind="json",
    )


def redacted_url(query: UpstreamQuery) -> str:
    """The query URL with credentials masked, for logging."""
    masked = UpstreamQuery(
        base_url=query.base_url,
        params=tuple(
            (name, "***" if name in _SECRET_PARAMS else value)
            for name, value in query.params
        ),
        timeout_ms=query.timeout_ms,
        content_kind=query.content_kind,
    )
    return masked.url


# =============================================================================
# Payload-level checks
# =============================================================================
def normalize_items(value: Any) -> list[dict]:
    """TourAPI's items.item: missing, one object, or a list -> always a list."""
    if not value:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def check_kobis(data: Any) -> dict:
    """Raise if KOBIS answered with a faultInfo body instead of data."""
    if not isinstance(data, dict):
        raise UpstreamFailure("KOBIS 응답 형식이 올바르지 않습니다.", reason="decode")
    fault = data.get("faultInfo")
    if fault:
        message = fault.get("message") if isinstance(fault, dict) else str(fault)
        raise UpstreamFailure(f"KOBIS 오류: {message or '알 수 없는 오류'}", reason="upstream")
    return data


def kobis_section(data: Any, key: str) -> dict:
    """The ``key`` object of a checked KOBIS body ({} when absent)."""
    section = check_kobis(data).get(key)
    if section in (None, ""):
        return {}
    if not isinstance(section, dict):
        raise UpstreamFailure(f"KOBIS 응답 형식이 올바르지 않습니다. ({key})", reason="decode")
    return section


def kobis_rows(data: Any, key: str, list_key: str) -> list:
    """The row list ``key.list_key`` of a KOBIS body ([] when absent)."""
    rows = kobis_section(data, key).get(list_key)
    if rows in (None, ""):
        return []
    if not isinstance(rows, list):
        raise UpstreamFailure(f"KOBIS 응답 형식이 올바르지 않습니다. ({list_key})", reason="decode")
    return rows


def tour_items(data: Any) -> list[dict]:
    """Unwrap a TourAPI JSON body into its list of item dicts.

    A non-"0000" resultCode in the header is an upstream-reported error.
    An empty result comes back as ``"items": ""`` and yields [].
    """
    if not isinstance(data, dict):
        raise UpstreamFailure("TourAPI 응답 형식이 올바르지 않습니다.", reason="decode")

    response = data.get("response")
    if not isinstance(response, dict):
        # Gateway-level errors come back flat: {"resultCode": ..., "resultMsg": ...}
        message = data.get("resultMsg") or data.get("returnAuthMsg")
        if message:
            raise UpstreamFailure(f"TourAPI 오류: {message}", reason="upstream")
        return []

    header = response.get("header") or {}
    if not isinstance(header, dict):
        raise UpstreamFailure("TourAPI 응답 헤더 형식이 올바르지 않습니다.", reason="decode")
    code = str(header.get("resultCode", "0000"))
    if code not in ("0000", "00"):
        raise UpstreamFailure(
            f"TourAPI 오류: {header.get('resultMsg') or code}", reason="upstream"
        )

    body = response.get("body") or {}
    items = body.get("items") if isinstance(body, dict) else None
    if not isinstance(items, dict):
        return []
    return normalize_items(items.get("item"))


# =============================================================================
# Gateway
# =============================================================================
class Gateway:
    """Async HTTP access to the upstream providers.

    Usage:
        async with Gateway(settings) as gateway:
            data = await gateway.fetch_json(kobis_query(settings, ...))

    A ready-made ``httpx.AsyncClient`` can be injected (tests pass one built
    on ``httpx.MockTransport``); an injected client is not closed here.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    async def __aenter__(self) -> "Gateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, query: UpstreamQuery) -> RawUpstreamResponse:
        """Send one GET under the query's time bound."""
        bound = query.timeout_ms / 1000
        logger.debug(f"GET {redacted_url(query)}")

        try:
            response = await asyncio.wait_for(
                self._client.get(query.url, timeout=bound), timeout=bound
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Upstream timeout after {query.timeout_ms}ms: {query.base_url}")
            raise UpstreamTimeout(
                f"응답 시간이 초과되었습니다 ({query.timeout_ms}ms)"
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Upstream network error for {query.base_url}: {e!r}")
            raise UpstreamFailure(f"네트워크 오류: {e}", reason="network") from e

        if response.status_code >= 400:
            logger.warning(f"Upstream HTTP {response.status_code}: {query.base_url}")
            raise UpstreamFailure(f"HTTP {response.status_code} 응답", reason="network")

        return RawUpstreamResponse(
            status=response.status_code,
            text=response.text,
            content_kind=query.content_kind,
        )

    async def fetch_json(self, query: UpstreamQuery) -> Any:
        raw = await self.fetch(query)
        try:
            return json.loads(raw.text)
        except ValueError as e:
            raise UpstreamFailure("응답을 JSON으로 해석할 수 없습니다.", reason="decode") from e

    async def fetch_xml_list(
        self,
        query: UpstreamQuery,
        item_tag: str,
        decode: Callable[[str], Optional[T]],
    ) -> list[T]:
        """Split the body into ``item_tag`` blocks and decode each one.

        ``decode`` returns None for a block whose identifying key is empty;
        such blocks are dropped.
        """
        raw = await self.fetch(query)
        records = []
        for block in extract_blocks(raw.text, item_tag):
            record = decode(block)
            if record is not None:
                records.append(record)
        return records

    async def fetch_xml_single(
        self,
        query: UpstreamQuery,
        decode: Callable[[str], Optional[T]],
        item_tag: str = "db",
    ) -> Optional[T]:
        """Decode a detail body; None when it holds no ``item_tag`` block."""
        raw = await self.fetch(query)
        if not has_block(raw.text, item_tag):
            return None
        return decode(raw.text)
