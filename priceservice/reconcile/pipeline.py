"""Reconciliation entry point: conflict marking followed by range merging."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from priceservice.models import PricedInterval
from priceservice.reconcile.merger import merge_ranges
from priceservice.reconcile.overlap import mark_conflicts, mark_conflicts_sweep

logger = structlog.get_logger(__name__)

_MARKERS = {
    "pairwise": mark_conflicts,
    "sweep": mark_conflicts_sweep,
}


def reconcile(
    intervals: Sequence[PricedInterval], strategy: str = "pairwise"
) -> list[PricedInterval]:
    """Reconcile one article's intervals.

    Args:
        intervals: Unordered intervals of a single article
        strategy: Conflict marking algorithm, "pairwise" or "sweep"

    Returns:
        New list of intervals: conflicts flagged, same-key overlaps merged

    Raises:
        ValueError: If the strategy is unknown
    """
    try:
        marker = _MARKERS[strategy]
    except KeyError:
        raise ValueError(f"Unknown reconcile strategy '{strategy}'") from None

    marked = marker(intervals)
    reconciled = merge_ranges(marked)

    logger.debug(
        "prices_reconciled",
        strategy=strategy,
        input_count=len(intervals),
        output_count=len(reconciled),
        conflicted_count=sum(1 for interval in reconciled if interval.conflicted),
    )
    return reconciled
