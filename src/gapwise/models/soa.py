"""Statement of Applicability data models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ImplementationStatus(str, Enum):
    NOT_IMPLEMENTED = "not_implemented"
    PARTIALLY_IMPLEMENTED = "partially_implemented"
    FULLY_IMPLEMENTED = "fully_implemented"


class StandardControl(BaseModel):
    """A control from a standard's catalogue (e.g. an ISO 27001 Annex A control)."""

    id: str
    code: str
    title: str = ""
    domain: Optional[str] = None
    standard_id: str = ""


class SoAEntry(BaseModel):
    """Applicability decision for one control within one project.

    A non-applicable entry may still carry an implementation status left over
    from before it was toggled; readers ignore it.
    """

    project_id: str
    control_id: str
    applicable: bool = True
    implementation_status: Optional[ImplementationStatus] = None
    justification: Optional[str] = None


class SoASummary(BaseModel):
    total: int = 0
    applicable: int = 0
    not_applicable: int = 0
    implemented: int = 0
    partially_implemented: int = 0
    implementation_percentage: float = 0.0


class SoARow(BaseModel):
    control_id: str
    code: str = ""
    title: str = ""
    domain: Optional[str] = None
    applicable: bool = True
    implementation_status: Optional[ImplementationStatus] = None
    effective_status: Optional[ImplementationStatus] = None
    justification: Optional[str] = None


class SoAReport(BaseModel):
    project_id: str
    summary: SoASummary = SoASummary()
    entries: list[SoARow] = []
