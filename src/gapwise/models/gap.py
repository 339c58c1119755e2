"""Gap analysis report models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .maturity import ScoredItem


class GapSeverity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class GapItem(BaseModel):
    """A scored item annotated with its gap against the project target."""

    item: ScoredItem
    gap: int
    severity: GapSeverity


class OverallMetrics(BaseModel):
    total_items: int = 0
    average_maturity: float = 0.0
    compliant_count: int = 0
    gap_percentage: float = 0.0


class DomainSummary(BaseModel):
    domain: str
    avg_maturity: float
    items: list[GapItem] = []


class StandardSummary(BaseModel):
    standard_id: str
    standard_code: str = ""
    standard_name: str = ""
    avg_maturity: float
    by_domain: list[DomainSummary] = []


class DistributionBucket(BaseModel):
    level: int
    label: str
    count: int = 0


class GapReport(BaseModel):
    target_maturity: int
    overall: OverallMetrics = OverallMetrics()
    by_standard: list[StandardSummary] = []
    maturity_distribution: list[DistributionBucket] = []
    top_gaps: list[GapItem] = []
