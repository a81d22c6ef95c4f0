"""Tests for QA report, revision, comment and profile database operations."""

import uuid
from unittest.mock import MagicMock, patch

import pytest

from qareport.core.errors import NotFound, PersistenceFailed
from qareport.core.schemas_qa import CommentCreate, QAReportCreate
from tests.fixtures_qa import REPORT_ID, USER_ID, make_report, report_row, summary


def _response(data):
    response = MagicMock()
    response.data = data
    return response


# =============================================================================
# Reports
# =============================================================================


class TestQAReportsDb:
    def test_create_report_seeds_template_checklist(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.return_value = _response(
            [report_row(make_report())]
        )

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import create_report

            report = create_report(
                USER_ID,
                QAReportCreate(
                    website_name="Acme",
                    url="https://acme.example.com",
                    reviewer_name="Sam Reviewer",
                ),
            )

        payload = mock_supabase.table.return_value.insert.call_args[0][0]
        assert payload["created_by"] == str(USER_ID)
        assert payload["status"] == "draft"
        assert payload["priority_level"] == "medium"
        assert payload["next_steps"] == []
        first_section = payload["checklist_data"][0]["sections"][0]
        assert "sectionId" in first_section and "issuesFound" in first_section
        assert all(not item["checked"] for item in first_section["items"])
        assert report.id == REPORT_ID

    def test_create_report_failure(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.side_effect = Exception("boom")

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import create_report

            with pytest.raises(PersistenceFailed):
                create_report(
                    USER_ID,
                    QAReportCreate(
                        website_name="Acme",
                        url="https://acme.example.com",
                        reviewer_name="Sam",
                    ),
                )

    def test_get_report_not_found(self):
        mock_supabase = MagicMock()
        (
            mock_supabase.table.return_value.select.return_value.eq.return_value
            .limit.return_value.execute.return_value
        ) = _response([])

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import get_report

            with pytest.raises(NotFound):
                get_report(uuid.uuid4())

    def test_get_report_parses_camel_case_checklist(self):
        mock_supabase = MagicMock()
        (
            mock_supabase.table.return_value.select.return_value.eq.return_value
            .limit.return_value.execute.return_value
        ) = _response([report_row(make_report())])

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import get_report

            report = get_report(REPORT_ID)

        assert report.checklist_data[0].sections[0].section_id == "c1-s1"
        assert report.checklist_data[0].sections[0].completed is True

    def test_list_reports_newest_first(self):
        mock_supabase = MagicMock()
        chain = mock_supabase.table.return_value.select.return_value.eq.return_value
        chain.order.return_value.limit.return_value.execute.return_value = _response(
            [report_row(make_report())]
        )

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import list_reports

            reports = list_reports(USER_ID, limit=10)

        chain.order.assert_called_once_with("created_at", desc=True)
        chain.order.return_value.limit.assert_called_once_with(10)
        assert len(reports) == 1

    def test_update_checklist_writes_camel_case(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.update.return_value.eq.return_value.execute.return_value = (
            _response([{"id": str(REPORT_ID)}])
        )

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import update_checklist

            update_checklist(REPORT_ID, make_report().checklist_data)

        update = mock_supabase.table.return_value.update.call_args[0][0]
        assert list(update) == ["checklist_data"]
        assert update["checklist_data"][0]["sections"][0]["sectionTitle"] == "C1 S1"

    def test_update_checklist_missing_report(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.update.return_value.eq.return_value.execute.return_value = (
            _response([])
        )

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import update_checklist

            with pytest.raises(NotFound):
                update_checklist(REPORT_ID, [])

    def test_save_summary_writes_derived_fields_together(self):
        report = make_report(
            priority_summary=summary(critical=1),
            overall_rating="poor",
            next_steps=["step"],
            status="completed",
        )
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.update.return_value.eq.return_value.execute.return_value = (
            _response([report_row(report)])
        )

        with patch("qareport.db.qa_reports.get_supabase", return_value=mock_supabase):
            from qareport.db.qa_reports import save_summary

            saved = save_summary(report)

        update = mock_supabase.table.return_value.update.call_args[0][0]
        assert update == {
            "priority_summary": {"critical": ["critical 0"], "high": [], "medium": [], "low": []},
            "overall_rating": "poor",
            "next_steps": ["step"],
            "status": "completed",
        }
        assert saved.status.value == "completed"


# =============================================================================
# Revisions & comments
# =============================================================================


class TestRevisionsDb:
    def test_insert_revision_snapshots_summary(self):
        report = make_report(priority_summary=summary(high=1), overall_rating="fair", next_steps=["a"])
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.return_value = _response(
            [
                {
                    "id": str(uuid.uuid4()),
                    "qa_report_id": str(REPORT_ID),
                    "revised_by": str(USER_ID),
                    "changes": {},
                    "revision_note": "client call",
                }
            ]
        )

        with patch("qareport.db.revisions.get_supabase", return_value=mock_supabase):
            from qareport.db.revisions import insert_revision

            revision = insert_revision(report, USER_ID, "client call")

        payload = mock_supabase.table.return_value.insert.call_args[0][0]
        assert payload["changes"] == {
            "priority_summary": {"critical": [], "high": ["high 0"], "medium": [], "low": []},
            "overall_rating": "fair",
            "next_steps": ["a"],
        }
        assert payload["revision_note"] == "client call"
        assert revision.qa_report_id == REPORT_ID

    def test_list_revisions_newest_first(self):
        mock_supabase = MagicMock()
        chain = mock_supabase.table.return_value.select.return_value.eq.return_value
        chain.order.return_value.limit.return_value.execute.return_value = _response([])

        with patch("qareport.db.revisions.get_supabase", return_value=mock_supabase):
            from qareport.db.revisions import list_revisions

            assert list_revisions(REPORT_ID) == []

        chain.order.assert_called_once_with("revised_at", desc=True)


class TestCommentsDb:
    def test_add_comment(self):
        comment_id = str(uuid.uuid4())
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.return_value = _response(
            [
                {
                    "id": comment_id,
                    "qa_report_id": str(REPORT_ID),
                    "user_id": str(USER_ID),
                    "section_key": "forms",
                    "comment_text": "Submit button is hidden on mobile",
                }
            ]
        )

        with patch("qareport.db.comments.get_supabase", return_value=mock_supabase):
            from qareport.db.comments import add_comment

            comment = add_comment(
                REPORT_ID,
                USER_ID,
                CommentCreate(section_key="forms", comment_text="Submit button is hidden on mobile"),
            )

        assert str(comment.id) == comment_id
        mock_supabase.table.assert_called_with("qa_report_comments")

    def test_list_comments_filters_by_section(self):
        mock_supabase = MagicMock()
        base = mock_supabase.table.return_value.select.return_value.eq.return_value
        base.eq.return_value.order.return_value.execute.return_value = _response([])

        with patch("qareport.db.comments.get_supabase", return_value=mock_supabase):
            from qareport.db.comments import list_comments

            list_comments(REPORT_ID, section_key="forms")

        base.eq.assert_called_once_with("section_key", "forms")
        base.eq.return_value.order.assert_called_once_with("created_at")

    def test_comment_text_must_not_be_blank(self):
        with pytest.raises(ValueError):
            CommentCreate(section_key="forms", comment_text="   ")


# =============================================================================
# Profiles
# =============================================================================


class TestProfilesDb:
    def test_existing_profile_is_returned(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.select.return_value.eq.return_value.execute.return_value = (
            _response([{"id": str(USER_ID), "email": "sam@example.com"}])
        )

        with patch("qareport.db.profiles.get_client", return_value=mock_supabase):
            from qareport.db.profiles import get_or_create_profile

            profile, created = get_or_create_profile(USER_ID, "sam@example.com")

        assert created is False
        assert profile.id == USER_ID
        mock_supabase.table.return_value.insert.assert_not_called()

    def test_missing_profile_is_created_with_lowercase_email(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.select.return_value.eq.return_value.execute.return_value = (
            _response([])
        )
        mock_supabase.table.return_value.insert.return_value.execute.return_value = _response(
            [{"id": str(USER_ID), "email": "sam@example.com", "full_name": "Sam"}]
        )

        with patch("qareport.db.profiles.get_client", return_value=mock_supabase):
            from qareport.db.profiles import get_or_create_profile

            profile, created = get_or_create_profile(USER_ID, "Sam@Example.com", full_name="Sam")

        assert created is True
        payload = mock_supabase.table.return_value.insert.call_args[0][0]
        assert payload["email"] == "sam@example.com"
        assert profile.full_name == "Sam"
