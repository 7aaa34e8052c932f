# =============================================================================
# core/config.py  -  Process Settings & Lookup Tables
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   1. Defines Settings, the immutable bag of process-wide configuration
#      (API keys, timeout, output cap).  It is built ONCE at startup by
#      load_settings() and passed explicitly into the Gateway and handlers.
#   2. Holds the fixed lookup tables that translate Korean genre / region /
#      category names into upstream-specific codes.
#
# ENVIRONMENT VARIABLES:
#   KOBIS_API_KEY        Source A (box office / movies)     - raw key
#   KOPIS_API_KEY        Source B (performances / venues)   - raw key
#   TOUR_API_KEY         Source C (festivals / spots / food) - decoded key,
#                        URL-encoded by the gateway
#   UPSTREAM_TIMEOUT_MS  per-call timeout (default 15000)
#   KOPIS_SEARCH_UNTIL   far end of the performance search window
#   CHARACTER_LIMIT      max length of any text returned to the agent
#
#   Entry points call load_dotenv() first, so a .env file works too.
# =============================================================================

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from types import MappingProxyType

logger = logging.getLogger(__name__)

SERVER_NAME = "korea-culture-mcp"
SERVER_VERSION = "1.0.0"

DEFAULT_TIMEOUT_MS = 15000
DEFAULT_CHARACTER_LIMIT = 25000
DEFAULT_SEARCH_UNTIL = "20271231"

# All "today" / "yesterday" defaults are computed in Korea Standard Time.
KST = timezone(timedelta(hours=9), name="KST")


# -----------------------------------------------------------------------------
# Lookup tables (read-only after import)
# -----------------------------------------------------------------------------

# KOPIS genre codes (shcate)
GENRE_CODES = MappingProxyType({
    "연극": "AAAA",
    "뮤지컬": "GGGA",
    "클래식": "CCCA",
    "국악": "CCCC",
    "대중음악": "CCCD",
    "무용": "BBBA",
    "서커스/마술": "EEEA",
    "복합": "EEEB",
})

# KOPIS region codes (signgucode)
REGION_CODES = MappingProxyType({
    "서울": "11",
    "부산": "26",
    "대구": "27",
    "인천": "28",
    "광주": "29",
    "대전": "30",
    "울산": "31",
    "세종": "36",
    "경기": "41",
    "강원": "42",
    "충북": "43",
    "충남": "44",
    "전북": "45",
    "전남": "46",
    "경북": "47",
    "경남": "48",
    "제주": "50",
})

# TourAPI area codes (areaCode).  Same region names, different numbering.
TOUR_AREA_CODES = MappingProxyType({
    "서울": "1",
    "인천": "2",
    "대전": "3",
    "대구": "4",
    "광주": "5",
    "부산": "6",
    "울산": "7",
    "세종": "8",
    "경기": "31",
    "강원": "32",
    "충북": "33",
    "충남": "34",
    "경북": "35",
    "경남": "36",
    "전북": "37",
    "전남": "38",
    "제주": "39",
})

# TourAPI content types (contentTypeId)
TOUR_CONTENT_TYPES = MappingProxyType({
    "관광지": "12",
    "문화시설": "14",
    "축제행사": "15",
    "여행코스": "25",
    "레포츠": "28",
    "숙박": "32",
    "쇼핑": "38",
    "음식점": "39",
})


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once before the first request."""

    kobis_api_key: str = ""
    kopis_api_key: str = ""
    tour_api_key: str = ""
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    character_limit: int = DEFAULT_CHARACTER_LIMIT
    performance_until: str = DEFAULT_SEARCH_UNTIL

    def missing_keys(self) -> list[str]:
        """Names of the API key variables that are not configured."""
        keys = {
            "KOBIS_API_KEY": self.kobis_api_key,
            "KOPIS_API_KEY": self.kopis_api_key,
            "TOUR_API_KEY": self.tour_api_key,
        }
        return [name for name, value in keys.items() if not value]


def _int_env(environ, name: str, default: int) -> int:
    raw = environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.error(f"{name}={raw!r} is not an integer; using {default}")
        return default


def load_settings(environ=None) -> Settings:
    """Build Settings from the environment (os.environ by default).

    Missing API keys are logged but not fatal: tools backed by that source
    will report the upstream error as text when called.
    """
    if environ is None:
        environ = os.environ

    settings = Settings(
        kobis_api_key=environ.get("KOBIS_API_KEY", ""),
        kopis_api_key=environ.get("KOPIS_API_KEY", ""),
        tour_api_key=environ.get("TOUR_API_KEY", ""),
        timeout_ms=_int_env(environ, "UPSTREAM_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        character_limit=_int_env(environ, "CHARACTER_LIMIT", DEFAULT_CHARACTER_LIMIT),
        performance_until=environ.get("KOPIS_SEARCH_UNTIL") or DEFAULT_SEARCH_UNTIL,
    )

    for name in settings.missing_keys():
        logger.error(f"{name} 환경 변수가 설정되지 않았습니다.")

    return settings


def kst_today() -> date:
    """Today's date in Korea."""
    return datetime.now(KST).date()
