"""Tests for core/aggregator.py."""

from __future__ import annotations

import pytest

from gapwise.core.aggregator import (
    average,
    compliance_percentage,
    count_compliant,
    group_by_domain,
    group_by_standard,
    natural_key,
    round_display,
)

from factories import make_item


class TestAverage:
    def test_empty_is_zero(self):
        assert average([]) == 0.0

    def test_mean(self):
        items = [make_item("A.1", 1), make_item("A.2", 2), make_item("A.3", 4)]
        assert average(items) == pytest.approx(7 / 3)

    def test_full_precision_kept(self):
        items = [make_item("A.1", 1), make_item("A.2", 1), make_item("A.3", 2)]
        assert average(items) != round_display(average(items))


class TestRoundDisplay:
    def test_two_decimals(self):
        assert round_display(7 / 3) == 2.33

    def test_half_up(self):
        assert round_display(2.5, 0) == 3.0
        assert round_display(0.125) == 0.13

    def test_float_noise(self):
        assert round_display(32.00000000000001 + 21 + 15 + 15, 0) == 83.0

    def test_zero(self):
        assert round_display(0) == 0.0


class TestCompliance:
    def test_counts_maturity_three_and_above(self):
        items = [make_item("A.1", 2), make_item("A.2", 3), make_item("A.3", 4)]
        assert count_compliant(items) == 2

    def test_percentage(self):
        items = [make_item(f"R.{i}", 3 if i < 6 else 1) for i in range(10)]
        assert compliance_percentage(items) == 60.0

    def test_percentage_empty(self):
        assert compliance_percentage([]) == 0.0


class TestNaturalKey:
    def test_numeric_segments(self):
        codes = ["A.5.10", "A.5.9", "A.5.1"]
        assert sorted(codes, key=natural_key) == ["A.5.1", "A.5.9", "A.5.10"]

    def test_empty(self):
        assert natural_key("") == ()


class TestGroupByDomain:
    def test_null_domain_goes_to_other(self):
        items = [make_item("A.1", 1, domain=None), make_item("A.2", 2, domain="")]
        groups = group_by_domain(items)
        assert len(groups) == 1
        assert groups[0].domain == "Other"
        assert groups[0].count == 2

    def test_conservation(self):
        items = [
            make_item("A.1", 1, domain="Org"),
            make_item("A.2", 2, domain=None),
            make_item("A.3", 3, domain="Tech"),
            make_item("A.4", 4, domain="Org"),
            make_item("A.5", 0, domain="  "),
        ]
        groups = group_by_domain(items)
        assert sum(g.count for g in groups) == len(items)

    def test_group_averages(self):
        items = [make_item("A.1", 1, domain="Org"), make_item("A.2", 4, domain="Org")]
        assert group_by_domain(items)[0].average == 2.5

    def test_domains_and_items_sorted(self):
        items = [
            make_item("10.2", 1, domain="10"),
            make_item("9.10", 1, domain="9"),
            make_item("9.2", 1, domain="9"),
        ]
        groups = group_by_domain(items)
        assert [g.domain for g in groups] == ["9", "10"]
        assert [i.code for i in groups[0].items] == ["9.2", "9.10"]

    def test_empty(self):
        assert group_by_domain([]) == []


class TestGroupByStandard:
    def test_two_levels(self):
        items = [
            make_item("A.1", 4, domain="Org", standard_id="iso27001"),
            make_item("A.2", 2, domain="Tech", standard_id="iso27001"),
            make_item("4.1", 1, domain="4", standard_id="iso9001"),
        ]
        groups = group_by_standard(items)
        assert [g.standard_id for g in groups] == ["iso27001", "iso9001"]
        assert groups[0].average == 3.0
        assert [d.domain for d in groups[0].domain_groups] == ["Org", "Tech"]
        assert groups[0].count == 2
        assert groups[1].standard_name == "Standard iso9001"

    def test_empty(self):
        assert group_by_standard([]) == []
