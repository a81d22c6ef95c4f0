"""Report wizard: section navigation and the draft -> completed transition.

Steps:  checklist → summary → completed

Walking forward past the last checklist section lands on the summary step.
Moving back from the summary to the checklist never changes report status;
only completing the summary does, and that is one-way.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from qareport.core.errors import InvalidTransition, NotFound
from qareport.core.next_steps import generate_next_steps
from qareport.core.rating import calculate_overall_rating
from qareport.core.schemas_qa import (
    ChecklistCategory,
    ChecklistSection,
    PrioritySummary,
    QAReport,
    ReportStatus,
)


class WizardStep(str, Enum):
    CHECKLIST = "checklist"
    SUMMARY = "summary"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SectionCursor:
    category_index: int = 0
    section_index: int = 0


# =============================================================================
# Navigation
# =============================================================================


def get_section(checklist: Sequence[ChecklistCategory], cursor: SectionCursor) -> ChecklistSection:
    """Section under the cursor. Raises NotFound when out of range."""
    if not 0 <= cursor.category_index < len(checklist):
        raise NotFound(f"Category {cursor.category_index} not found")
    sections = checklist[cursor.category_index].sections
    if not 0 <= cursor.section_index < len(sections):
        raise NotFound(
            f"Section {cursor.section_index} not found in category {cursor.category_index}"
        )
    return sections[cursor.section_index]


def next_position(
    checklist: Sequence[ChecklistCategory], cursor: SectionCursor
) -> Optional[SectionCursor]:
    """
    Cursor after ``cursor``, or None once the last section is passed.

    None means the checklist walk is done and the summary step comes next.
    Empty categories are skipped. Raises NotFound for an out-of-range cursor.
    """
    get_section(checklist, cursor)
    category = checklist[cursor.category_index]
    if cursor.section_index < len(category.sections) - 1:
        return SectionCursor(cursor.category_index, cursor.section_index + 1)

    for category_index in range(cursor.category_index + 1, len(checklist)):
        if checklist[category_index].sections:
            return SectionCursor(category_index, 0)
    return None


def previous_position(
    checklist: Sequence[ChecklistCategory], cursor: SectionCursor
) -> SectionCursor:
    """
    Cursor before ``cursor``; stays put on the very first section.

    Raises NotFound for an out-of-range cursor.
    """
    get_section(checklist, cursor)
    if cursor.section_index > 0:
        return SectionCursor(cursor.category_index, cursor.section_index - 1)

    for category_index in range(cursor.category_index - 1, -1, -1):
        sections = checklist[category_index].sections
        if sections:
            return SectionCursor(category_index, len(sections) - 1)
    return cursor


def last_position(checklist: Sequence[ChecklistCategory]) -> Optional[SectionCursor]:
    """Cursor of the final section, used when stepping back from the summary."""
    for category_index in range(len(checklist) - 1, -1, -1):
        sections = checklist[category_index].sections
        if sections:
            return SectionCursor(category_index, len(sections) - 1)
    return None


def wizard_step_for(report: QAReport, cursor: Optional[SectionCursor]) -> WizardStep:
    """Which wizard step a report is on given the user's cursor (None = summary)."""
    if report.status == ReportStatus.COMPLETED:
        return WizardStep.COMPLETED
    if cursor is None:
        return WizardStep.SUMMARY
    return WizardStep.CHECKLIST


# =============================================================================
# Checklist edits
# =============================================================================


def toggle_item(section: ChecklistSection, item_id: str) -> ChecklistSection:
    """Flip one item's checked state and refresh the section's completed flag."""
    for item in section.items:
        if item.id == item_id:
            item.checked = not item.checked
            section.refresh_completed()
            return section
    raise NotFound(f"Checklist item {item_id} not found")


def find_item_section(
    checklist: Sequence[ChecklistCategory], item_id: str
) -> ChecklistSection:
    """Section holding ``item_id``. Raises NotFound if no section has it."""
    for category in checklist:
        for section in category.sections:
            if any(item.id == item_id for item in section.items):
                return section
    raise NotFound(f"Checklist item {item_id} not found")


def find_section(checklist: Sequence[ChecklistCategory], section_id: str) -> ChecklistSection:
    """Section by its ``sectionId``. Raises NotFound if absent."""
    for category in checklist:
        for section in category.sections:
            if section.section_id == section_id:
                return section
    raise NotFound(f"Checklist section {section_id} not found")


def replace_section(
    checklist: list[ChecklistCategory],
    cursor: SectionCursor,
    section: ChecklistSection,
) -> list[ChecklistCategory]:
    """Swap the section under ``cursor`` in place, recomputing its completed flag."""
    get_section(checklist, cursor)
    section.refresh_completed()
    checklist[cursor.category_index].sections[cursor.section_index] = section
    return checklist


# =============================================================================
# Status transitions
# =============================================================================


def ensure_transition(current: ReportStatus, target: ReportStatus) -> None:
    """
    Validate a status change.

    Raises:
        InvalidTransition: For completed -> draft, which the lifecycle never allows
    """
    current = ReportStatus(current)
    target = ReportStatus(target)
    if current == ReportStatus.COMPLETED and target == ReportStatus.DRAFT:
        raise InvalidTransition("A completed report cannot return to draft")


def apply_priority_summary(report: QAReport, priority_summary: PrioritySummary) -> QAReport:
    """Copy of ``report`` with the new summary and recomputed rating/next steps.

    Status is left untouched, so this serves both the live preview while a
    draft is being summarized and later edits to a completed report.
    """
    rating = calculate_overall_rating(report.checklist_data, priority_summary)
    return report.model_copy(
        update={
            "priority_summary": priority_summary.model_copy(deep=True),
            "overall_rating": rating,
            "next_steps": generate_next_steps(rating, priority_summary),
        },
        deep=True,
    )


def complete_report(report: QAReport, priority_summary: PrioritySummary) -> QAReport:
    """Apply the summary and mark the report completed in one step."""
    ensure_transition(report.status, ReportStatus.COMPLETED)
    updated = apply_priority_summary(report, priority_summary)
    updated.status = ReportStatus.COMPLETED
    return updated
