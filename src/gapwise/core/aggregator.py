"""Maturity aggregation over arbitrary groupings of scored items.

Averages are returned at full precision so they can be chained; rounding for
display happens once, at report construction, through round_display().
"""

from __future__ import annotations

import math
import re
from collections import defaultdict
from typing import Iterable

from ..models.maturity import DomainGroup, ScoredItem, StandardGroup

_DIGITS = re.compile(r"(\d+)")


def natural_key(text: str) -> tuple:
    """Numeric-aware sort key, so "A.5.10" sorts after "A.5.9"."""
    parts = _DIGITS.split(text or "")
    return tuple((0, int(p), "") if p.isdigit() else (1, 0, p.lower()) for p in parts if p)


def round_display(value: float, digits: int = 2) -> float:
    """Round half away from zero (dashboard rounding), not banker's rounding."""
    factor = 10 ** digits
    scaled = abs(value) * factor
    # Absorb float noise such as 82.49999999999999 before flooring.
    rounded = math.floor(round(scaled, 6) + 0.5) / factor
    return math.copysign(rounded, value) if value else 0.0


def average(items: Iterable[ScoredItem]) -> float:
    """Arithmetic mean of item maturity; 0.0 for no items."""
    values = [item.maturity for item in items]
    if not values:
        return 0.0
    return sum(values) / len(values)


def count_compliant(items: Iterable[ScoredItem]) -> int:
    return sum(1 for item in items if item.compliant)


def compliance_percentage(items: list[ScoredItem]) -> float:
    """Share of items at maturity >= 3, as 0-100; 0.0 for no items."""
    total = len(items)
    if total == 0:
        return 0.0
    return 100 * count_compliant(items) / total


def group_by_domain(items: Iterable[ScoredItem]) -> list[DomainGroup]:
    """Partition items by domain label.

    Items without a domain land in the "Other" group, so the group counts
    always add up to the number of input items.
    """
    groups: dict[str, list[ScoredItem]] = defaultdict(list)
    for item in items:
        groups[item.domain_label].append(item)

    result: list[DomainGroup] = []
    for domain in sorted(groups, key=natural_key):
        domain_items = sorted(groups[domain], key=lambda i: natural_key(i.code))
        result.append(DomainGroup(
            domain=domain,
            items=domain_items,
            average=average(domain_items),
        ))
    return result


def group_by_standard(items: Iterable[ScoredItem]) -> list[StandardGroup]:
    """Two-level grouping: standard (first-seen order) -> domain -> items."""
    standards: dict[str, list[ScoredItem]] = {}
    for item in items:
        standards.setdefault(item.standard_id, []).append(item)

    result: list[StandardGroup] = []
    for standard_id, standard_items in standards.items():
        first = standard_items[0]
        result.append(StandardGroup(
            standard_id=standard_id,
            standard_code=first.standard_code,
            standard_name=first.standard_name,
            average=average(standard_items),
            domain_groups=group_by_domain(standard_items),
        ))
    return result
