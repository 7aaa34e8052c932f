# =============================================================================
# core/markup.py  -  Field Extractor for the XML-only upstream (KOPIS)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Pulls tagged values out of KOPIS XML with regular expressions instead of
#   a full XML parser.  KOPIS payloads are shallow and flat:
#
#     <dbs>
#       <db>
#         <mt20id>PF12345</mt20id>
#         <prfnm><![CDATA[오페라의 유령]]></prfnm>
#         ...
#       </db>
#     </dbs>
#
#   Three operations cover every case we meet (strip_blocks removes nested
#   records so their tags cannot shadow the outer record's):
#     extract_value(xml, tag)   -> the value of the first <tag>
#     extract_values(xml, tag)  -> the value of every <tag>, document order
#     extract_blocks(xml, tag)  -> the raw inner text of every <tag> block,
#                                  used to split <db> / <mt13> records
#
# CONTRACT:
#   - CDATA-wrapped values win over plain inline values.
#   - Values are trimmed; values may span several lines.
#   - Absent tags give "" (or []), malformed input gives empty results.
#   - Nesting is supported one level deep (e.g. <mt13> halls inside a <db>
#     venue).  Arbitrary recursion is not.
#   - Pure functions: no I/O, no exceptions.
# =============================================================================

import re
from functools import lru_cache


@lru_cache(maxsize=256)
def _cdata_pattern(tag: str) -> re.Pattern:
    t = re.escape(tag)
    return re.compile(rf"<{t}>\s*<!\[CDATA\[(.*?)\]\]>\s*</{t}>", re.DOTALL)


@lru_cache(maxsize=256)
def _value_pattern(tag: str) -> re.Pattern:
    # CDATA alternative first, so at any given position it wins the tie.
    t = re.escape(tag)
    return re.compile(
        rf"<{t}>\s*<!\[CDATA\[(.*?)\]\]>\s*</{t}>|<{t}>(.*?)</{t}>",
        re.DOTALL,
    )


@lru_cache(maxsize=64)
def _block_pattern(tag: str) -> re.Pattern:
    t = re.escape(tag)
    return re.compile(rf"<{t}>(.*?)</{t}>", re.DOTALL)


def _usable(markup, tag) -> bool:
    return isinstance(markup, str) and isinstance(tag, str) and bool(markup) and bool(tag)


def extract_value(markup: str, tag: str) -> str:
    """Return the trimmed value of ``tag``, or "" when it is absent.

    If the fragment holds a CDATA-wrapped ``tag`` anywhere, that value is
    returned even when a plain ``tag`` occurs earlier.
    """
    if not _usable(markup, tag):
        return ""

    match = _cdata_pattern(tag).search(markup)
    if match:
        return match.group(1).strip()

    match = _value_pattern(tag).search(markup)
    if not match:
        return ""
    return (match.group(1) if match.group(1) is not None else match.group(2) or "").strip()


def extract_values(markup: str, tag: str) -> list[str]:
    """Return the trimmed value of every occurrence of ``tag``, in order."""
    if not _usable(markup, tag):
        return []
    return [
        (m.group(1) if m.group(1) is not None else m.group(2) or "").strip()
        for m in _value_pattern(tag).finditer(markup)
    ]


def extract_blocks(markup: str, tag: str) -> list[str]:
    """Return the raw inner text of every ``<tag>...</tag>`` block, in order."""
    if not _usable(markup, tag):
        return []
    return [m.group(1) for m in _block_pattern(tag).finditer(markup)]


def has_block(markup: str, tag: str) -> bool:
    """True when at least one ``<tag>`` element opens in the markup."""
    return _usable(markup, tag) and f"<{tag}>" in markup


def strip_blocks(markup: str, tag: str) -> str:
    """Return ``markup`` with every ``<tag>...</tag>`` block removed."""
    if not _usable(markup, tag):
        return markup if isinstance(markup, str) else ""
    return _block_pattern(tag).sub("", markup)
