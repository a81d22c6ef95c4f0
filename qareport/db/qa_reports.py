"""QA reports database operations."""

from typing import Any, Sequence
from uuid import UUID

from qareport.core.checklist_template import build_initial_checklist
from qareport.core.errors import NotFound, PersistenceFailed
from qareport.core.logging import get_logger
from qareport.core.schemas_qa import (
    ChecklistCategory,
    PrioritySummary,
    QAReport,
    QAReportCreate,
    ReportStatus,
)
from qareport.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "qa_reports"


def checklist_payload(checklist: Sequence[ChecklistCategory]) -> list[dict[str, Any]]:
    """Checklist as stored JSON (camelCase keys)."""
    return [category.model_dump(mode="json", by_alias=True) for category in checklist]


def create_report(created_by: UUID, data: QAReportCreate) -> QAReport:
    """
    Create a draft report with a fresh copy of the checklist template.

    Args:
        created_by: Owner user UUID
        data: Validated creation input

    Returns:
        Created report

    Raises:
        PersistenceFailed: If the insert fails or returns nothing
    """
    supabase = get_supabase()

    payload = {
        "created_by": str(created_by),
        "website_name": data.website_name,
        "url": data.url,
        "date_reviewed": data.date_reviewed.isoformat(),
        "reviewer_name": data.reviewer_name,
        "priority_level": data.priority_level.value,
        "checklist_data": checklist_payload(build_initial_checklist()),
        "priority_summary": PrioritySummary().model_dump(),
        "next_steps": [],
        "status": ReportStatus.DRAFT.value,
    }

    try:
        response = supabase.table(TABLE).insert(payload).execute()
    except Exception as e:
        logger.error(f"Failed to create report for {data.website_name}: {e}")
        raise PersistenceFailed(f"Failed to create report: {e}") from e

    if not response.data:
        raise PersistenceFailed("No data returned from create_report")

    report = QAReport(**response.data[0])
    logger.info(
        f"Created report {report.id}: {report.website_name}",
        extra={"report_id": str(report.id), "user_id": str(created_by)},
    )
    return report


def get_report(report_id: UUID) -> QAReport:
    """
    Get a single report by ID.

    Raises:
        NotFound: If no report has this ID
        PersistenceFailed: If the query fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .select("*")
            .eq("id", str(report_id))
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to get report {report_id}: {e}")
        raise PersistenceFailed(f"Failed to load report: {e}") from e

    if not response.data:
        raise NotFound(f"Report {report_id} not found")

    return QAReport(**response.data[0])


def list_reports(created_by: UUID, limit: int = 100) -> list[QAReport]:
    """List a user's reports, newest first."""
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .select("*")
            .eq("created_by", str(created_by))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to list reports for user {created_by}: {e}")
        raise PersistenceFailed(f"Failed to list reports: {e}") from e

    return [QAReport(**row) for row in response.data or []]


def update_checklist(report_id: UUID, checklist: Sequence[ChecklistCategory]) -> None:
    """
    Overwrite a report's checklist data.

    Used both by the debounced autosave and by explicit saves.
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .update({"checklist_data": checklist_payload(checklist)})
            .eq("id", str(report_id))
            .execute()
        )
    except Exception as e:
        logger.error(
            f"Failed to save checklist for report {report_id}: {e}",
            extra={"report_id": str(report_id)},
        )
        raise PersistenceFailed(f"Failed to save checklist: {e}") from e

    if not response.data:
        raise NotFound(f"Report {report_id} not found")


def save_summary(report: QAReport) -> QAReport:
    """
    Persist priority summary, rating, next steps and status together.

    The caller computes the derived fields (see ``qareport.core.wizard``);
    this only writes them, so the report is never stored half-updated.
    """
    supabase = get_supabase()

    update = {
        "priority_summary": report.priority_summary.model_dump(),
        "overall_rating": report.overall_rating.value if report.overall_rating else None,
        "next_steps": report.next_steps,
        "status": report.status.value,
    }

    try:
        response = (
            supabase.table(TABLE)
            .update(update)
            .eq("id", str(report.id))
            .execute()
        )
    except Exception as e:
        logger.error(
            f"Failed to save summary for report {report.id}: {e}",
            extra={"report_id": str(report.id)},
        )
        raise PersistenceFailed(f"Failed to save summary: {e}") from e

    if not response.data:
        raise NotFound(f"Report {report.id} not found")

    logger.info(
        f"Saved summary for report {report.id} ({report.overall_rating}, {report.status.value})",
        extra={"report_id": str(report.id)},
    )
    return QAReport(**response.data[0])
