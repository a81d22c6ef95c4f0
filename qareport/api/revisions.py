"""API endpoints for report revisions."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from qareport.api.reports import load_owned_report
from qareport.core.auth_middleware import AuthContext, require_auth
from qareport.core.schemas_qa import Revision
from qareport.db.revisions import list_revisions

router = APIRouter()


class ListRevisionsResponse(BaseModel):
    """Response for listing revisions."""

    revisions: list[Revision]
    total: int


@router.get("/reports/{report_id}/revisions", response_model=ListRevisionsResponse)
async def list_report_revisions(
    report_id: UUID,
    limit: int = Query(50, description="Maximum number of revisions to return", ge=1, le=100),
    auth: AuthContext = Depends(require_auth),
) -> ListRevisionsResponse:
    """List the audit revisions of a report, newest first."""
    load_owned_report(report_id, auth)
    revisions = list_revisions(report_id, limit=limit)
    return ListRevisionsResponse(revisions=revisions, total=len(revisions))
