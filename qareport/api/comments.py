"""API endpoints for section comments."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from qareport.api.reports import load_owned_report
from qareport.core.auth_middleware import AuthContext, require_auth
from qareport.core.logging import get_logger
from qareport.core.schemas_qa import Comment, CommentCreate
from qareport.db.comments import add_comment, list_comments

logger = get_logger(__name__)

router = APIRouter()


class ListCommentsResponse(BaseModel):
    """Response for listing comments."""

    comments: list[Comment]
    total: int


@router.get("/reports/{report_id}/comments", response_model=ListCommentsResponse)
async def list_report_comments(
    report_id: UUID,
    section_key: Optional[str] = Query(None, description="Only comments on this section"),
    auth: AuthContext = Depends(require_auth),
) -> ListCommentsResponse:
    """List comments on a report, oldest first."""
    load_owned_report(report_id, auth)
    comments = list_comments(report_id, section_key=section_key)
    return ListCommentsResponse(comments=comments, total=len(comments))


@router.post("/reports/{report_id}/comments", response_model=Comment, status_code=201)
async def post_comment(
    report_id: UUID,
    data: CommentCreate,
    auth: AuthContext = Depends(require_auth),
) -> Comment:
    """Add a comment to one checklist section."""
    load_owned_report(report_id, auth)
    comment = add_comment(report_id, auth.user_id, data)
    logger.info(
        f"Comment {comment.id} added to report {report_id}",
        extra={"report_id": str(report_id), "section_key": data.section_key},
    )
    return comment
