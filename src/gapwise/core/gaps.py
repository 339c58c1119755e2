"""Gap calculation, ranking and the project gap report."""

from __future__ import annotations

from typing import Iterable

from ..models.gap import (
    DistributionBucket,
    DomainSummary,
    GapItem,
    GapReport,
    GapSeverity,
    OverallMetrics,
    StandardSummary,
)
from ..models.maturity import MATURITY_LABELS, MaturityLevel, ScoredItem
from .aggregator import average, count_compliant, group_by_standard, natural_key, round_display
from .errors import validate_count, validate_maturity

DEFAULT_TOP_GAPS = 10

# Gap thresholds: one level short is a warning, two or more is critical.
WARNING_GAP = 1
CRITICAL_GAP = 2


def gap(item: ScoredItem, target_maturity: int) -> int:
    """Shortfall of an item against the target; never negative."""
    target = validate_maturity(target_maturity, "target_maturity")
    return max(0, target - item.maturity)


def classify_gap_severity(value: int) -> GapSeverity:
    """0 -> ok, 1 -> warning, 2+ -> critical."""
    value = validate_count(value, "gap")
    if value >= CRITICAL_GAP:
        return GapSeverity.CRITICAL
    if value >= WARNING_GAP:
        return GapSeverity.WARNING
    return GapSeverity.OK


def annotate(item: ScoredItem, target_maturity: int) -> GapItem:
    item_gap = gap(item, target_maturity)
    return GapItem(item=item, gap=item_gap, severity=classify_gap_severity(item_gap))


def top_gaps(
    items: Iterable[ScoredItem],
    target_maturity: int,
    n: int = DEFAULT_TOP_GAPS,
) -> list[GapItem]:
    """Return the n items furthest below target.

    Items already at or above target are excluded. Ties on gap are broken by
    lowest current maturity, then by natural code order, so the ranking is
    deterministic regardless of input order.
    """
    n = validate_count(n, "n")
    annotated = [annotate(item, target_maturity) for item in items]
    ranked = sorted(
        (g for g in annotated if g.gap > 0),
        key=lambda g: (-g.gap, g.item.maturity, natural_key(g.item.code), g.item.id),
    )
    return ranked[:n]


def maturity_distribution(items: Iterable[ScoredItem]) -> list[DistributionBucket]:
    """Histogram of maturity values; always emits all five levels."""
    counts = {level: 0 for level in MaturityLevel}
    for item in items:
        counts[MaturityLevel(item.maturity)] += 1
    return [
        DistributionBucket(level=int(level), label=MATURITY_LABELS[level], count=counts[level])
        for level in MaturityLevel
    ]


def overall_metrics(items: list[ScoredItem]) -> OverallMetrics:
    total = len(items)
    compliant = count_compliant(items)
    gap_pct = 100 * (total - compliant) / total if total > 0 else 0.0
    return OverallMetrics(
        total_items=total,
        average_maturity=round_display(average(items)),
        compliant_count=compliant,
        gap_percentage=round_display(gap_pct),
    )


def build_gap_report(
    items: Iterable[ScoredItem],
    target_maturity: int,
    top_n: int = DEFAULT_TOP_GAPS,
) -> GapReport:
    """Build the full gap analysis report for one project's items."""
    target = validate_maturity(target_maturity, "target_maturity")
    items = list(items)

    by_standard = [
        StandardSummary(
            standard_id=group.standard_id,
            standard_code=group.standard_code,
            standard_name=group.standard_name,
            avg_maturity=round_display(group.average),
            by_domain=[
                DomainSummary(
                    domain=domain_group.domain,
                    avg_maturity=round_display(domain_group.average),
                    items=[annotate(i, target) for i in domain_group.items],
                )
                for domain_group in group.domain_groups
            ],
        )
        for group in group_by_standard(items)
    ]

    return GapReport(
        target_maturity=target,
        overall=overall_metrics(items),
        by_standard=by_standard,
        maturity_distribution=maturity_distribution(items),
        top_gaps=top_gaps(items, target, top_n),
    )
