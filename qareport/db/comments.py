"""Section comment database operations."""

from typing import Optional
from uuid import UUID

from qareport.core.errors import PersistenceFailed
from qareport.core.logging import get_logger
from qareport.core.schemas_qa import Comment, CommentCreate
from qareport.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "qa_report_comments"


def add_comment(report_id: UUID, user_id: UUID, data: CommentCreate) -> Comment:
    """Append a comment to a report section."""
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .insert(
                {
                    "qa_report_id": str(report_id),
                    "user_id": str(user_id),
                    "section_key": data.section_key,
                    "comment_text": data.comment_text,
                }
            )
            .execute()
        )
    except Exception as e:
        logger.error(
            f"Failed to add comment: {e}",
            extra={"report_id": str(report_id), "section_key": data.section_key},
        )
        raise PersistenceFailed(f"Failed to add comment: {e}") from e

    if not response.data:
        raise PersistenceFailed("No data returned from add_comment")

    return Comment(**response.data[0])


def list_comments(report_id: UUID, section_key: Optional[str] = None) -> list[Comment]:
    """List a report's comments oldest first, optionally for one section."""
    supabase = get_supabase()

    try:
        query = supabase.table(TABLE).select("*").eq("qa_report_id", str(report_id))
        if section_key:
            query = query.eq("section_key", section_key)
        response = query.order("created_at").execute()
    except Exception as e:
        logger.error(
            f"Failed to list comments for report {report_id}: {e}",
            extra={"report_id": str(report_id)},
        )
        raise PersistenceFailed(f"Failed to list comments: {e}") from e

    return [Comment(**row) for row in response.data or []]
