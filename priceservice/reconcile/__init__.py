"""Price interval reconciliation: conflict marking and range merging."""

from priceservice.reconcile.merger import (
    collapse,
    find_connected_ranges,
    group_by_key,
    merge_ranges,
)
from priceservice.reconcile.overlap import (
    mark_conflicts,
    mark_conflicts_sweep,
    ranges_overlap,
)
from priceservice.reconcile.pipeline import reconcile

__all__ = [
    "collapse",
    "find_connected_ranges",
    "group_by_key",
    "mark_conflicts",
    "mark_conflicts_sweep",
    "merge_ranges",
    "ranges_overlap",
    "reconcile",
]
