"""Tests for plain-text report export."""

from qareport.core.report_export import export_filename, format_review_date, render_report_text
from qareport.core.schemas_qa import (
    ChecklistCategory,
    ChecklistItem,
    ChecklistSection,
    IssuesFound,
    PrioritySummary,
)
from tests.fixtures_qa import make_report


def _report(**overrides):
    checklist = [
        ChecklistCategory(
            category="Content",
            sections=[
                ChecklistSection(
                    section_id="copy",
                    section_title="Copy Review",
                    items=[
                        ChecklistItem(id="copy-1", text="Spelling checked", checked=True),
                        ChecklistItem(id="copy-2", text="Legal pages linked", checked=False),
                    ],
                    issues_found=IssuesFound(
                        text="Privacy policy missing",
                        images=["https://cdn.example.com/1.png", "https://cdn.example.com/2.png"],
                    ),
                ),
                ChecklistSection(
                    section_id="media",
                    section_title="Media",
                    items=[ChecklistItem(id="media-1", text="Alt text", checked=True)],
                ),
            ],
        )
    ]
    data = {
        "checklist_data": checklist,
        "priority_summary": PrioritySummary(critical=["No privacy policy"], low=["Favicon"]),
        "overall_rating": "fair",
        "next_steps": ["Step one", "Step two"],
        "status": "completed",
    }
    data.update(overrides)
    return make_report(**data)


def test_full_document():
    expected = (
        "QA REPORT\n"
        "==========\n\n"
        "Website Name: Acme\n"
        "URL: https://acme.example.com\n"
        "Date Reviewed: Jan 5, 2025\n"
        "Reviewer: Sam Reviewer\n"
        "Priority Level: HIGH\n"
        "Overall Rating: FAIR\n"
        "\n"
        "Content\n"
        "=======\n\n"
        "Copy Review\n"
        "-----------\n\n"
        "✓ Spelling checked\n"
        "✗ Legal pages linked\n"
        "\nIssues Found:\n"
        "Privacy policy missing\n"
        "Images: 2 image(s)\n"
        "\n"
        "Media\n"
        "-----\n\n"
        "✓ Alt text\n"
        "\n"
        "PRIORITY SUMMARY\n"
        "===============\n\n"
        "Critical Issues:\n"
        "  • No privacy policy\n"
        "\n"
        "Low Priority:\n"
        "  • Favicon\n"
        "\n"
        "NEXT STEPS\n"
        "==========\n\n"
        "  • Step one\n"
        "  • Step two\n"
    )
    assert render_report_text(_report()) == expected


def test_unrated_report_has_no_rating_line_or_next_steps():
    text = render_report_text(
        _report(overall_rating=None, next_steps=[], priority_summary=PrioritySummary())
    )

    assert "Overall Rating" not in text
    assert "NEXT STEPS" not in text
    assert text.endswith("PRIORITY SUMMARY\n===============\n\n")


def test_issue_block_with_images_only():
    report = _report()
    report.checklist_data[0].sections[0].issues_found = IssuesFound(
        images=["https://cdn.example.com/1.png"]
    )

    text = render_report_text(report)

    assert "\nIssues Found:\nImages: 1 image(s)\n" in text


def test_is_deterministic():
    report = _report()
    assert render_report_text(report) == render_report_text(report)


def test_format_review_date_has_no_zero_padding():
    assert format_review_date(make_report().date_reviewed) == "Jan 5, 2025"


def test_export_filename():
    assert export_filename(make_report()) == "Acme-QA-Report-2025-01-05.txt"
