# =============================================================================
# core/formatting.py  -  Small value formatters shared by payloads and render
# =============================================================================

from typing import Any


def format_date(value: str) -> str:
    """"20240101" -> "2024.01.01"; "2024-01-01" -> "2024.01.01"; else as-is."""
    if not value:
        return value or ""
    compact = value.replace("-", "")
    if len(compact) != 8 or not compact.isdigit():
        return value
    return f"{compact[:4]}.{compact[4:6]}.{compact[6:]}"


def format_number(value: Any) -> str:
    """Thousands separators for numeric strings ("1234567" -> "1,234,567")."""
    if value is None or value == "":
        return "0"
    try:
        number = int(str(value).replace(",", ""))
    except ValueError:
        try:
            number = float(value)
        except ValueError:
            return str(value)
        return f"{number:,}"
    return f"{number:,}"


TRUNCATION_MARKER = "\n\n... (응답이 너무 길어 일부가 생략되었습니다)"


def truncate_text(text: str, limit: int) -> str:
    """Cap ``text`` at ``limit`` characters, marking the cut visibly."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER
