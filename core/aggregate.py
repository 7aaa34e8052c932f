# =============================================================================
# core/aggregate.py  -  Aggregator (concurrent sub-calls + enrichment merge)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Two building blocks for the composite tools:
#
#   gather_settled(*awaitables)
#     Starts every sub-operation at once, waits until ALL have settled, and
#     returns their results in INPUT order.  A sub-operation that fails
#     contributes None to its slot; the others are unaffected.
#     Used by: facility detail fan-out, today's recommendations.
#
#   merge_detail(summary, detail, fields)
#     Builds a new summary record carrying the detail record's values.
#     Priority is detail > summary, but an empty detail value never
#     overwrites the summary's value.
#
# CANCELLATION:
#   Timeouts live inside each upstream call (core/gateway.py).  Task
#   cancellation of the aggregation itself propagates normally.
# =============================================================================

import asyncio
import logging
from dataclasses import replace
from typing import Any, Awaitable, Iterable, Optional, Sequence

from core.errors import CultureError

logger = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == () or value == []


async def gather_settled(
    *awaitables: Awaitable,
    labels: Optional[Sequence[str]] = None,
) -> list[Any]:
    """Run all awaitables concurrently; failures become None slots."""
    if not awaitables:
        return []

    outcomes = await asyncio.gather(*awaitables, return_exceptions=True)

    settled = []
    for index, outcome in enumerate(outcomes):
        label = labels[index] if labels and index < len(labels) else f"#{index}"
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, CultureError):
            logger.warning(f"Sub-operation {label} failed ({outcome.kind}): {outcome}")
            settled.append(None)
        elif isinstance(outcome, Exception):
            logger.exception(f"Sub-operation {label} raised unexpectedly", exc_info=outcome)
            settled.append(None)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            settled.append(outcome)
    return settled


def merge_detail(summary, detail, fields: Iterable[str]):
    """Copy ``fields`` from ``detail`` onto a copy of ``summary``.

    Only non-empty detail values are copied, so the summary's own value
    survives wherever the detail record has nothing better.
    """
    if detail is None:
        return summary
    changes = {}
    for name in fields:
        value = getattr(detail, name, None)
        if not _is_empty(value):
            changes[name] = value
    return replace(summary, **changes) if changes else summary
