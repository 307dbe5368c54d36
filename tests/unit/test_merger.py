"""Unit tests for range merging."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from priceservice.reconcile.merger import (
    collapse,
    find_connected_ranges,
    group_by_key,
    merge_ranges,
)


class TestGroupByKey:
    def test_groups_on_full_key(self, make_interval):
        prices = [
            make_interval("10", "2024-01-01", "2024-02-01"),
            make_interval("10", "2024-01-01", "2024-02-01", currency="USD"),
            make_interval("10", "2024-03-01", "2024-04-01"),
            make_interval("10", "2024-01-01", "2024-02-01", subkind="discounted"),
        ]

        groups = group_by_key(prices)

        assert list(groups) == [
            ("retail", "regular", "CAD", Decimal("10")),
            ("retail", "regular", "USD", Decimal("10")),
            ("retail", "discounted", "CAD", Decimal("10")),
        ]
        assert groups[("retail", "regular", "CAD", Decimal("10"))] == [prices[0], prices[2]]

    def test_delimiters_in_labels_do_not_collide(self, make_interval):
        prices = [
            make_interval("10", "2024-01-01", "2024-02-01", kind="a_b", subkind="c"),
            make_interval("10", "2024-01-01", "2024-02-01", kind="a", subkind="b_c"),
        ]

        assert len(group_by_key(prices)) == 2

    def test_amount_equality_ignores_scale(self, make_interval):
        prices = [
            make_interval("60.0", "2024-01-01", "2024-02-01"),
            make_interval("60.00", "2024-01-15", "2024-03-01"),
        ]

        assert len(group_by_key(prices)) == 1


class TestFindConnectedRanges:
    def test_chain_is_one_component(self, make_interval):
        a = make_interval("10", "2024-01-01", "2024-02-01")
        b = make_interval("10", "2024-01-20", "2024-03-01")
        c = make_interval("10", "2024-02-20", "2024-04-01")

        assert not a.overlaps(c)
        assert find_connected_ranges([a, b, c]) == [[a, b, c]]

    def test_chain_found_regardless_of_order(self, make_interval):
        a = make_interval("10", "2024-01-01", "2024-02-01")
        b = make_interval("10", "2024-01-20", "2024-03-01")
        c = make_interval("10", "2024-02-20", "2024-04-01")

        components = find_connected_ranges([a, c, b])

        assert len(components) == 1
        assert components[0] == [a, b, c]

    def test_disjoint_members_stay_apart(self, make_interval):
        a = make_interval("10", "2024-01-01", "2024-02-01")
        b = make_interval("10", "2024-02-01", "2024-03-01")
        c = make_interval("10", "2024-05-01", "2024-06-01")

        assert find_connected_ranges([a, b, c]) == [[a], [b], [c]]

    def test_components_ordered_by_first_member(self, make_interval):
        a = make_interval("10", "2024-05-01", "2024-06-01")
        b = make_interval("10", "2024-01-01", "2024-02-01")
        c = make_interval("10", "2024-05-15", "2024-07-01")

        assert find_connected_ranges([a, b, c]) == [[a, c], [b]]

    def test_empty_group(self):
        assert find_connected_ranges([]) == []


class TestCollapse:
    def test_single_member_returned_unchanged(self, make_interval):
        only = make_interval("10", "2024-01-01", "2024-02-01")

        assert collapse([only]) is only

    def test_span_and_flag(self, make_interval):
        members = [
            make_interval("10", "2024-02-01", "2024-03-15"),
            make_interval("10", "2024-01-01", "2024-02-10", conflicted=True),
            make_interval("10", "2024-03-01", "2024-03-10"),
        ]

        merged = collapse(members)

        assert merged.valid_from == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert merged.valid_to == datetime(2024, 3, 15, tzinfo=timezone.utc)
        assert merged.conflicted is True
        assert merged.key == members[0].key

    def test_empty_component_rejected(self):
        with pytest.raises(ValueError):
            collapse([])


class TestMergeRanges:
    def test_same_amount_overlap_is_merged(self, make_interval):
        prices = [
            make_interval("60.0", "2024-01-01", "2024-06-30", subkind="same-amount"),
            make_interval("60.0", "2024-06-01", "2024-08-31", subkind="same-amount"),
        ]

        merged = merge_ranges(prices)

        assert len(merged) == 1
        assert merged[0].valid_from == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert merged[0].valid_to == datetime(2024, 8, 31, tzinfo=timezone.utc)
        assert merged[0].conflicted is False

    def test_different_keys_never_merge(self, make_interval):
        prices = [
            make_interval("60.0", "2024-01-01", "2024-06-30"),
            make_interval("61.0", "2024-01-01", "2024-06-30"),
            make_interval("60.0", "2024-01-01", "2024-06-30", currency="USD"),
        ]

        assert merge_ranges(prices) == prices

    def test_output_order_follows_first_occurrence(self, make_interval):
        a1 = make_interval("10", "2024-01-01", "2024-02-01")
        b = make_interval("20", "2024-01-01", "2024-02-01")
        a2 = make_interval("10", "2024-01-15", "2024-03-01")
        a3 = make_interval("10", "2024-06-01", "2024-07-01")

        merged = merge_ranges([a1, b, a2, a3])

        assert [m.amount for m in merged] == [Decimal("10"), Decimal("10"), Decimal("20")]
        assert merged[0].valid_to == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert merged[1] is a3
        assert merged[2] is b

    def test_empty_input(self):
        assert merge_ranges([]) == []
