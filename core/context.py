# =============================================================================
# core/context.py  -  What every handler receives, plus argument policy
# =============================================================================
#
# ToolContext bundles the injected collaborators of a handler:
#   settings  immutable process configuration (core/config.py)
#   gateway   upstream access (core/gateway.py)
#   today     clock returning "today" in Korea; tests pin it
#
# The helpers below implement the argument policy shared by all tools:
# limit clamping and response_format selection.
# =============================================================================

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from core.config import Settings, kst_today
from core.gateway import Gateway

DEFAULT_LIMIT = 10
MAX_LIMIT = 20
BOX_OFFICE_MAX = 10

RESPONSE_FORMATS = ("markdown", "json")


@dataclass(frozen=True)
class ToolContext:
    settings: Settings
    gateway: Gateway
    today: Callable[[], date] = field(default=kst_today)


def clamp_limit(value: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """Coerce ``value`` into [1, maximum].

    Missing, zero, and non-numeric values fall back to ``default``.
    Infinite values clamp to the nearest bound.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = 0.0
    except OverflowError:
        # integers too large for a float
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        number = 0.0
    elif math.isinf(number):
        return maximum if number > 0 else 1
    number = int(number)
    if number == 0:
        number = default
    return max(1, min(number, maximum))


def pick_format(value: Any) -> str:
    """``json`` when asked for, otherwise ``markdown``."""
    if isinstance(value, str) and value.strip().lower() in RESPONSE_FORMATS:
        return value.strip().lower()
    return RESPONSE_FORMATS[0]


def text_arg(value: Any) -> str:
    """Normalize an optional text argument to a stripped string ("" if absent)."""
    if value is None:
        return ""
    return str(value).strip()
