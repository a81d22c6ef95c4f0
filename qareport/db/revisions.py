"""Report revision database operations (append-only audit trail)."""

from uuid import UUID

from qareport.core.errors import PersistenceFailed
from qareport.core.logging import get_logger
from qareport.core.schemas_qa import QAReport, Revision
from qareport.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "qa_report_revisions"


def insert_revision(report: QAReport, revised_by: UUID, revision_note: str) -> Revision:
    """
    Snapshot a report's priority summary, rating and next steps.

    Args:
        report: Report as just saved
        revised_by: User making the change
        revision_note: Free-text reason for the change

    Returns:
        Inserted revision

    Raises:
        PersistenceFailed: If the insert fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .insert(
                {
                    "qa_report_id": str(report.id),
                    "revised_by": str(revised_by),
                    "changes": {
                        "priority_summary": report.priority_summary.model_dump(),
                        "overall_rating": (
                            report.overall_rating.value if report.overall_rating else None
                        ),
                        "next_steps": report.next_steps,
                    },
                    "revision_note": revision_note,
                }
            )
            .execute()
        )
    except Exception as e:
        logger.error(
            f"Failed to insert revision: {e}",
            extra={"report_id": str(report.id)},
        )
        raise PersistenceFailed(f"Failed to record revision: {e}") from e

    if not response.data:
        raise PersistenceFailed("No data returned from insert_revision")

    revision = Revision(**response.data[0])
    logger.info(
        f"Inserted revision {revision.id} for report {report.id}",
        extra={"report_id": str(report.id), "revision_id": str(revision.id)},
    )
    return revision


def list_revisions(report_id: UUID, limit: int = 50) -> list[Revision]:
    """
    List revisions for a report, newest first.

    Raises:
        PersistenceFailed: If the query fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .select("*")
            .eq("qa_report_id", str(report_id))
            .order("revised_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.error(
            f"Failed to list revisions for report {report_id}: {e}",
            extra={"report_id": str(report_id)},
        )
        raise PersistenceFailed(f"Failed to list revisions: {e}") from e

    return [Revision(**row) for row in response.data or []]
