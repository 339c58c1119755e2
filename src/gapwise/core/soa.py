"""Applicability ledger (Statement of Applicability).

Writes are lenient: toggling applicability never clears the implementation
status or justification, and a status may be set on a non-applicable entry.
Reads are strict: every count below only looks at implementation status for
applicable entries. Entries are immutable; each operation returns a copy.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..models.soa import (
    ImplementationStatus,
    SoAEntry,
    SoAReport,
    SoARow,
    SoASummary,
    StandardControl,
)
from .aggregator import round_display
from .errors import EngineInputError


def set_applicable(entry: SoAEntry, applicable: bool) -> SoAEntry:
    return entry.model_copy(update={"applicable": applicable})


def set_implementation_status(
    entry: SoAEntry,
    status: Optional[ImplementationStatus | str],
) -> SoAEntry:
    if status is not None:
        try:
            status = ImplementationStatus(status)
        except ValueError:
            raise EngineInputError(
                "implementation_status", status, "unknown implementation status"
            ) from None
    return entry.model_copy(update={"implementation_status": status})


def set_justification(entry: SoAEntry, justification: Optional[str]) -> SoAEntry:
    return entry.model_copy(update={"justification": justification})


def effective_status(entry: SoAEntry) -> Optional[ImplementationStatus]:
    """Implementation status as seen by readers: None when not applicable."""
    if not entry.applicable:
        return None
    return entry.implementation_status


def generate_missing(
    project_id: str,
    all_controls: Iterable[StandardControl],
    existing_entries: Iterable[SoAEntry],
) -> list[SoAEntry]:
    """Default entries for every control that has none yet.

    Running it again after the returned entries are stored yields nothing.
    """
    covered = {e.control_id for e in existing_entries if e.project_id == project_id}
    created: list[SoAEntry] = []
    for control in all_controls:
        if control.id in covered:
            continue
        covered.add(control.id)
        created.append(SoAEntry(project_id=project_id, control_id=control.id))
    return created


def upsert_entry(entries: Iterable[SoAEntry], entry: SoAEntry) -> list[SoAEntry]:
    """Replace the entry for the same (project, control) or append it."""
    result: list[SoAEntry] = []
    replaced = False
    for existing in entries:
        if (existing.project_id, existing.control_id) == (entry.project_id, entry.control_id):
            result.append(entry)
            replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(entry)
    return result


def summarize(entries: Iterable[SoAEntry]) -> SoASummary:
    entries = list(entries)
    applicable = [e for e in entries if e.applicable]
    implemented = sum(
        1 for e in applicable if effective_status(e) == ImplementationStatus.FULLY_IMPLEMENTED
    )
    partial = sum(
        1 for e in applicable if effective_status(e) == ImplementationStatus.PARTIALLY_IMPLEMENTED
    )
    pct = 100 * implemented / len(applicable) if applicable else 0.0

    return SoASummary(
        total=len(entries),
        applicable=len(applicable),
        not_applicable=len(entries) - len(applicable),
        implemented=implemented,
        partially_implemented=partial,
        implementation_percentage=round_display(pct),
    )


def build_soa_report(
    project_id: str,
    entries: Iterable[SoAEntry],
    controls: Iterable[StandardControl] = (),
) -> SoAReport:
    """Summary plus one row per entry, joined with its catalogue control.

    Rows carry the stored implementation status even for non-applicable
    entries; `effective_status` is the value the summary counts.
    """
    entries = [e for e in entries if e.project_id == project_id]
    catalogue = {c.id: c for c in controls}

    rows: list[SoARow] = []
    for entry in entries:
        control = catalogue.get(entry.control_id)
        rows.append(SoARow(
            control_id=entry.control_id,
            code=control.code if control else "",
            title=control.title if control else "",
            domain=control.domain if control else None,
            applicable=entry.applicable,
            implementation_status=entry.implementation_status,
            effective_status=effective_status(entry),
            justification=entry.justification,
        ))

    return SoAReport(project_id=project_id, summary=summarize(entries), entries=rows)
