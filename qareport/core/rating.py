"""Overall rating, progress and unchecked-item helpers for QA reports.

Pure functions over checklist data and the priority summary. No I/O.

Rating rules (first match wins), with U = unchecked items and C = critical
issues in the priority summary:

    U == 0  and C == 0   -> excellent
    U <= 3  and C == 0   -> good
    U <= 10 and C <= 2   -> fair
    otherwise            -> poor
"""

from typing import Iterator, Sequence

from qareport.core.next_steps import generate_next_steps
from qareport.core.schemas_qa import (
    ChecklistCategory,
    ChecklistItem,
    PrioritySummary,
    QAReport,
    Rating,
    ReportSummary,
    UncheckedGroup,
)

GOOD_MAX_UNCHECKED = 3
FAIR_MAX_UNCHECKED = 10
FAIR_MAX_CRITICAL = 2


def _iter_items(checklist: Sequence[ChecklistCategory]) -> Iterator[ChecklistItem]:
    for category in checklist:
        for section in category.sections:
            yield from section.items


def count_unchecked_items(checklist: Sequence[ChecklistCategory]) -> int:
    """Count unchecked items across every category and section."""
    return sum(1 for item in _iter_items(checklist) if not item.checked)


def calculate_overall_rating(
    checklist: Sequence[ChecklistCategory],
    priority_summary: PrioritySummary,
) -> Rating:
    """Rate a report from its unchecked items and critical issue count."""
    unchecked = count_unchecked_items(checklist)
    critical = len(priority_summary.critical)

    if unchecked == 0 and critical == 0:
        return Rating.EXCELLENT
    if unchecked <= GOOD_MAX_UNCHECKED and critical == 0:
        return Rating.GOOD
    if unchecked <= FAIR_MAX_UNCHECKED and critical <= FAIR_MAX_CRITICAL:
        return Rating.FAIR
    return Rating.POOR


def calculate_progress(checklist: Sequence[ChecklistCategory]) -> int:
    """
    Percentage of checked items, 0-100.

    Halves round up. An empty checklist has 0% progress.
    """
    total = 0
    checked = 0
    for item in _iter_items(checklist):
        total += 1
        if item.checked:
            checked += 1

    if total == 0:
        return 0
    # Integer form of floor(100 * checked / total + 0.5)
    return (200 * checked + total) // (2 * total)


def get_unchecked_items(checklist: Sequence[ChecklistCategory]) -> list[UncheckedGroup]:
    """
    Group unchecked item texts by section, in checklist order.

    Sections where every item is checked are left out. Each group carries the
    section's issue notes so a reviewer sees both together.
    """
    groups: list[UncheckedGroup] = []
    for category in checklist:
        for section in category.sections:
            unchecked = [item.text for item in section.items if not item.checked]
            if unchecked:
                groups.append(
                    UncheckedGroup(
                        category=category.category,
                        section=section.section_title,
                        items=unchecked,
                        issues_found=section.issues_found.model_copy(deep=True),
                    )
                )
    return groups


def get_rating_explanation(rating: Rating, unchecked_count: int, critical_count: int) -> str:
    """Human-readable reason for a rating."""
    rating = Rating(rating)
    critical_clause = (
        f" including {critical_count} critical issue(s)" if critical_count > 0 else ""
    )

    if rating == Rating.EXCELLENT:
        return "All checklist items passed with no critical issues. Site is ready for launch."
    if rating == Rating.GOOD:
        return (
            f"{unchecked_count} minor issue(s) found. "
            "Site is in good shape with minor improvements needed."
        )
    if rating == Rating.FAIR:
        return (
            f"{unchecked_count} issue(s) found{critical_clause}. "
            "Several improvements recommended before launch."
        )
    return (
        f"{unchecked_count} issue(s) found{critical_clause}. "
        "Significant work needed before launch."
    )


def summarize_report(report: QAReport) -> ReportSummary:
    """
    Recompute every derived figure for a report.

    ``derived_in_sync`` is True when the stored rating and next steps match
    what the engine produces now. Draft reports that were never rated count
    as in sync.
    """
    unchecked_count = count_unchecked_items(report.checklist_data)
    critical_count = len(report.priority_summary.critical)
    rating = calculate_overall_rating(report.checklist_data, report.priority_summary)
    next_steps = generate_next_steps(rating, report.priority_summary)

    if report.overall_rating is None:
        in_sync = not report.next_steps
    else:
        in_sync = report.overall_rating == rating and report.next_steps == next_steps

    return ReportSummary(
        progress=calculate_progress(report.checklist_data),
        unchecked_count=unchecked_count,
        critical_count=critical_count,
        rating=rating,
        explanation=get_rating_explanation(rating, unchecked_count, critical_count),
        next_steps=next_steps,
        unchecked=get_unchecked_items(report.checklist_data),
        derived_in_sync=in_sync,
    )
