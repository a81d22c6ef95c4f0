"""Share grant database operations."""

from uuid import UUID

from qareport.core.errors import NotFound, PersistenceFailed
from qareport.core.logging import get_logger
from qareport.core.schemas_qa import ShareLink
from qareport.core.share_links import generate_share_token, is_well_formed_token
from qareport.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "qa_report_share_links"


def create_share_link(report_id: UUID, created_by: UUID) -> ShareLink:
    """Issue and store a new random share token for a report."""
    supabase = get_supabase()
    token = generate_share_token()

    try:
        response = (
            supabase.table(TABLE)
            .insert(
                {
                    "token": token,
                    "qa_report_id": str(report_id),
                    "created_by": str(created_by),
                }
            )
            .execute()
        )
    except Exception as e:
        logger.error(
            f"Failed to create share link: {e}",
            extra={"report_id": str(report_id)},
        )
        raise PersistenceFailed(f"Failed to create share link: {e}") from e

    if not response.data:
        raise PersistenceFailed("No data returned from create_share_link")

    logger.info(
        f"Issued share link for report {report_id}",
        extra={"report_id": str(report_id), "user_id": str(created_by)},
    )
    return ShareLink(**response.data[0])


def resolve_share_token(token: str) -> UUID:
    """
    Report ID granted by a share token.

    Raises:
        NotFound: If the token is malformed or was never issued
        PersistenceFailed: If the lookup fails
    """
    if not is_well_formed_token(token):
        raise NotFound("Share link is invalid")

    supabase = get_supabase()
    try:
        response = (
            supabase.table(TABLE)
            .select("qa_report_id")
            .eq("token", token)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to resolve share token: {e}")
        raise PersistenceFailed(f"Failed to resolve share link: {e}") from e

    if not response.data:
        raise NotFound("Share link is invalid")

    return UUID(response.data[0]["qa_report_id"])
