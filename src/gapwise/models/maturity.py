"""Maturity scale and scored-item data models."""

from __future__ import annotations

from enum import IntEnum
from typing import Literal, Optional

from pydantic import BaseModel, Field

OTHER_DOMAIN = "Other"

# Maturity at or above this level counts as compliant everywhere in the engine.
COMPLIANT_MATURITY = 3


class MaturityLevel(IntEnum):
    NONEXISTENT = 0
    INITIAL = 1
    DEFINED = 2
    MANAGED = 3
    OPTIMIZED = 4

    @property
    def label(self) -> str:
        return MATURITY_LABELS[self]


MATURITY_LABELS: dict[int, str] = {
    MaturityLevel.NONEXISTENT: "Nonexistent",
    MaturityLevel.INITIAL: "Initial",
    MaturityLevel.DEFINED: "Defined",
    MaturityLevel.MANAGED: "Managed",
    MaturityLevel.OPTIMIZED: "Optimized",
}


class ScoredItem(BaseModel):
    """A requirement (project x clause) or control (project x standard control)."""

    id: str
    code: str
    title: str = ""
    kind: Literal["requirement", "control"] = "control"
    domain: Optional[str] = None
    maturity: int = Field(strict=True, ge=MaturityLevel.NONEXISTENT, le=MaturityLevel.OPTIMIZED)
    project_id: str = ""
    standard_id: str = ""
    standard_code: str = ""
    standard_name: str = ""

    @property
    def domain_label(self) -> str:
        if self.domain and self.domain.strip():
            return self.domain
        return OTHER_DOMAIN

    @property
    def compliant(self) -> bool:
        return self.maturity >= COMPLIANT_MATURITY


class DomainGroup(BaseModel):
    """Items sharing one domain label, with their mean maturity."""

    domain: str
    items: list[ScoredItem] = []
    average: float = 0.0

    @property
    def count(self) -> int:
        return len(self.items)


class StandardGroup(BaseModel):
    standard_id: str
    standard_code: str = ""
    standard_name: str = ""
    average: float = 0.0
    domain_groups: list[DomainGroup] = []

    @property
    def count(self) -> int:
        return sum(g.count for g in self.domain_groups)
