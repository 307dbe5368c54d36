"""Range merging for priced intervals sharing an identity key.

Intervals with the same (kind, subkind, currency, amount) that are linked by a
chain of time overlaps collapse into one interval spanning the whole chain.

Output order is deterministic: groups appear in order of their first interval
in the input, and within a group components appear in order of their first
member.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from priceservice.models import IntervalKey, PricedInterval

logger = structlog.get_logger(__name__)


def group_by_key(
    intervals: Sequence[PricedInterval],
) -> dict[IntervalKey, list[PricedInterval]]:
    """Partition intervals by identity key, keeping input order in each group."""
    groups: dict[IntervalKey, list[PricedInterval]] = {}
    for interval in intervals:
        groups.setdefault(interval.key, []).append(interval)
    return groups


def find_connected_ranges(group: Sequence[PricedInterval]) -> list[list[PricedInterval]]:
    """Split a group into components connected through pairwise overlaps.

    Each component grows from its first unprocessed interval: unprocessed
    intervals overlapping any current member join it, and the scan repeats
    until a full pass adds nothing.
    """
    components: list[list[PricedInterval]] = []
    processed = [False] * len(group)

    for i, seed in enumerate(group):
        if processed[i]:
            continue

        component = [seed]
        processed[i] = True

        found_new = True
        while found_new:
            found_new = False
            for j, candidate in enumerate(group):
                if processed[j]:
                    continue
                if any(member.overlaps(candidate) for member in component):
                    component.append(candidate)
                    processed[j] = True
                    found_new = True

        components.append(component)

    return components


def collapse(component: Sequence[PricedInterval]) -> PricedInterval:
    """Merge one component into a single interval covering all its members.

    Raises:
        ValueError: If the component is empty
    """
    if not component:
        raise ValueError("cannot collapse an empty component")

    reference = component[0]
    if len(component) == 1:
        return reference

    return reference.model_copy(
        update={
            "valid_from": min(member.valid_from for member in component),
            "valid_to": max(member.valid_to for member in component),
            "conflicted": any(member.conflicted for member in component),
        }
    )


def merge_ranges(intervals: Sequence[PricedInterval]) -> list[PricedInterval]:
    """Collapse same-key overlapping intervals; everything else passes through."""
    result: list[PricedInterval] = []

    for key, group in group_by_key(intervals).items():
        if len(group) == 1:
            result.append(group[0])
            continue

        for component in find_connected_ranges(group):
            merged = collapse(component)
            if len(component) > 1:
                logger.debug(
                    "intervals_merged",
                    key=key,
                    count=len(component),
                    valid_from=merged.valid_from.isoformat(),
                    valid_to=merged.valid_to.isoformat(),
                    conflicted=merged.conflicted,
                )
            result.append(merged)

    return result
