"""Conflict marking for priced intervals.

Two intervals conflict when their validity ranges share an instant and their
amounts differ. Labels (kind, subkind, currency) play no part here.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import structlog

from priceservice.models import PricedInterval

logger = structlog.get_logger(__name__)


def ranges_overlap(
    start1: datetime, end1: datetime, start2: datetime, end2: datetime
) -> bool:
    """Half-open overlap test: ranges that only touch at an endpoint do not overlap."""
    return start1 < end2 and start2 < end1


def mark_conflicts(intervals: Sequence[PricedInterval]) -> list[PricedInterval]:
    """Flag every interval that overlaps another interval with a different amount.

    Compares all unordered pairs. Returns a new list in input order; intervals
    whose flag changes are replaced by updated copies, the rest are passed
    through as-is.
    """
    flags = [interval.conflicted for interval in intervals]

    for i in range(len(intervals)):
        first = intervals[i]
        for j in range(i + 1, len(intervals)):
            second = intervals[j]
            if not ranges_overlap(
                first.valid_from, first.valid_to, second.valid_from, second.valid_to
            ):
                continue
            if first.amount != second.amount:
                flags[i] = flags[j] = True
                logger.debug(
                    "conflict_detected",
                    first=_describe(first),
                    second=_describe(second),
                )

    return _apply_flags(intervals, flags)


def mark_conflicts_sweep(intervals: Sequence[PricedInterval]) -> list[PricedInterval]:
    """Sweep-line variant of mark_conflicts with identical output.

    Visits intervals by start time and compares each one only against the
    intervals still open at that start.
    """
    flags = [interval.conflicted for interval in intervals]
    order = sorted(range(len(intervals)), key=lambda idx: intervals[idx].valid_from)
    active: list[int] = []

    for idx in order:
        current = intervals[idx]
        active = [a for a in active if intervals[a].valid_to > current.valid_from]
        for other_idx in active:
            if intervals[other_idx].amount != current.amount:
                flags[idx] = flags[other_idx] = True
        active.append(idx)

    return _apply_flags(intervals, flags)


def _apply_flags(
    intervals: Sequence[PricedInterval], flags: list[bool]
) -> list[PricedInterval]:
    return [
        interval.model_copy(update={"conflicted": True})
        if flag and not interval.conflicted
        else interval
        for interval, flag in zip(intervals, flags)
    ]


def _describe(interval: PricedInterval) -> str:
    return (
        f"{interval.subkind} {interval.amount} "
        f"[{interval.valid_from.isoformat()}, {interval.valid_to.isoformat()})"
    )
