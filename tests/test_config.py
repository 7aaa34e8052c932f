"""Settings loading and the shared argument policy."""

import logging
from pathlib import Path

import pytest

from core.config import DEFAULT_CHARACTER_LIMIT, DEFAULT_SEARCH_UNTIL, DEFAULT_TIMEOUT_MS, load_settings
from core.context import clamp_limit, pick_format, text_arg


def test_load_settings_reads_environment():
    settings = load_settings({
        "KOBIS_API_KEY": "a",
        "KOPIS_API_KEY": "b",
        "TOUR_API_KEY": "c",
        "UPSTREAM_TIMEOUT_MS": "2000",
        "CHARACTER_LIMIT": "500",
        "KOPIS_SEARCH_UNTIL": "20301231",
    })

    assert settings.kobis_api_key == "a"
    assert settings.timeout_ms == 2000
    assert settings.character_limit == 500
    assert settings.performance_until == "20301231"
    assert settings.missing_keys() == []


def test_missing_keys_are_logged_not_fatal(caplog):
    with caplog.at_level(logging.ERROR, logger="core.config"):
        settings = load_settings({"KOBIS_API_KEY": "a", "UPSTREAM_TIMEOUT_MS": "soon"})

    assert settings.missing_keys() == ["KOPIS_API_KEY", "TOUR_API_KEY"]
    assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
    assert settings.character_limit == DEFAULT_CHARACTER_LIMIT
    assert settings.performance_until == DEFAULT_SEARCH_UNTIL
    assert "TOUR_API_KEY 환경 변수가 설정되지 않았습니다." in caplog.text
    assert "UPSTREAM_TIMEOUT_MS" in caplog.text


@pytest.mark.parametrize("value, expected", [
    (None, 10),
    (0, 10),
    ("abc", 10),
    ("5", 5),
    (7.9, 7),
    (-3, 1),
    (100, 20),
    (1e400, 20),
    ("inf", 20),
    ("-inf", 1),
    ("nan", 10),
    (10 ** 400, 20),
])
def test_clamp_limit(value, expected):
    assert clamp_limit(value) == expected


def test_clamp_limit_with_custom_bounds():
    assert clamp_limit(50, default=10, maximum=10) == 10
    assert clamp_limit(None, default=3, maximum=10) == 3


def test_pick_format():
    assert pick_format("JSON") == "json"
    assert pick_format("markdown") == "markdown"
    assert pick_format("yaml") == "markdown"
    assert pick_format(None) == "markdown"


def test_text_arg():
    assert text_arg(None) == ""
    assert text_arg("  서울 ") == "서울"
    assert text_arg(3) == "3"


def test_package_metadata_does_not_ship_internal_documents():
    pyproject = (Path(__file__).resolve().parents[1] / "pyproject.toml").read_text(encoding="utf-8")

    assert "spec.md" not in pyproject
    assert 'name = "korea-culture-mcp"' in pyproject
