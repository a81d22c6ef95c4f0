"""API endpoints for share links and the public report view."""

from uuid import UUID

from fastapi import APIRouter, Depends

from qareport.api.reports import load_owned_report
from qareport.core.auth_middleware import AuthContext, require_auth
from qareport.core.config import get_settings
from qareport.core.rating import summarize_report
from qareport.core.schemas_qa import ReportDetailResponse, ShareLink
from qareport.core.share_links import build_share_url
from qareport.db.qa_reports import get_report
from qareport.db.share_links import create_share_link, resolve_share_token

router = APIRouter()


@router.post("/reports/{report_id}/share", response_model=ShareLink, status_code=201)
async def share_report(
    report_id: UUID,
    auth: AuthContext = Depends(require_auth),
) -> ShareLink:
    """Issue a read-only share link for a report."""
    load_owned_report(report_id, auth)
    link = create_share_link(report_id, auth.user_id)
    link.url = build_share_url(get_settings().PUBLIC_APP_URL, link.token)
    return link


@router.get("/share/{token}", response_model=ReportDetailResponse)
async def view_shared_report(token: str) -> ReportDetailResponse:
    """Public read-only view of a shared report. No authentication."""
    report = get_report(resolve_share_token(token))
    return ReportDetailResponse(report=report, summary=summarize_report(report))
