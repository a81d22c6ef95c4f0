"""Plain-text rendering of a QA report for download."""

from datetime import date

from qareport.core.schemas_qa import QAReport

CHECKED_GLYPH = "✓"
UNCHECKED_GLYPH = "✗"
BULLET = "•"

PRIORITY_TIERS = [
    ("critical", "Critical Issues"),
    ("high", "High Priority"),
    ("medium", "Medium Priority"),
    ("low", "Low Priority"),
]


def format_review_date(value: date) -> str:
    """Medium date like ``Jan 5, 2025``."""
    return f"{value:%b} {value.day}, {value.year}"


def _heading(title: str, underline: str) -> str:
    return f"{title}\n{underline * len(title)}\n\n"


def render_report_text(report: QAReport) -> str:
    """
    Render a report as a human-readable text document.

    The layout is fixed: header block, each category and section with
    underlined titles, ✓/✗ items and any issue notes, then the priority
    summary and next steps as bullet lists.
    """
    text = "QA REPORT\n"
    text += "==========\n\n"
    text += f"Website Name: {report.website_name}\n"
    text += f"URL: {report.url}\n"
    text += f"Date Reviewed: {format_review_date(report.date_reviewed)}\n"
    text += f"Reviewer: {report.reviewer_name}\n"
    text += f"Priority Level: {report.priority_level.value.upper()}\n"
    if report.overall_rating:
        text += f"Overall Rating: {report.overall_rating.value.upper()}\n"
    text += "\n"

    for category in report.checklist_data:
        text += _heading(category.category, "=")

        for section in category.sections:
            text += _heading(section.section_title, "-")

            for item in section.items:
                glyph = CHECKED_GLYPH if item.checked else UNCHECKED_GLYPH
                text += f"{glyph} {item.text}\n"

            issues = section.issues_found
            if not issues.is_empty:
                text += "\nIssues Found:\n"
                if issues.text:
                    text += f"{issues.text}\n"
                if issues.images:
                    text += f"Images: {len(issues.images)} image(s)\n"
            text += "\n"

    # Fixed 15-character rule under the title
    text += "PRIORITY SUMMARY\n"
    text += f"{'=' * 15}\n\n"
    for tier, label in PRIORITY_TIERS:
        issues_in_tier = getattr(report.priority_summary, tier)
        if issues_in_tier:
            text += f"{label}:\n"
            for issue in issues_in_tier:
                text += f"  {BULLET} {issue}\n"
            text += "\n"

    if report.next_steps:
        text += "NEXT STEPS\n"
        text += f"{'=' * 10}\n\n"
        for step in report.next_steps:
            text += f"  {BULLET} {step}\n"

    return text


def export_filename(report: QAReport) -> str:
    """Download filename, e.g. ``Acme-QA-Report-2025-01-05.txt``."""
    return f"{report.website_name}-QA-Report-{report.date_reviewed.isoformat()}.txt"
