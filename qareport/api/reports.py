"""API endpoints for QA reports: creation, checklist wizard and completion."""

from typing import Optional
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from qareport.core.auth_middleware import AuthContext, ensure_report_owner, require_auth
from qareport.core.autosave import DebouncedSaver, get_checklist_saver
from qareport.core.logging import get_logger
from qareport.core.rating import calculate_progress, get_rating_explanation, summarize_report
from qareport.core.report_export import export_filename, render_report_text
from qareport.core.schemas_qa import (
    ChecklistCategory,
    ChecklistSection,
    ChecklistUpdate,
    PrioritySummary,
    PrioritySummaryUpdate,
    QAReport,
    QAReportCreate,
    Rating,
    ReportDetailResponse,
    ReportListResponse,
)
from qareport.core.wizard import (
    SectionCursor,
    WizardStep,
    apply_priority_summary,
    complete_report,
    find_item_section,
    get_section,
    last_position,
    next_position,
    previous_position,
    toggle_item,
    wizard_step_for,
)
from qareport.db.qa_reports import create_report, get_report, list_reports, save_summary
from qareport.db.revisions import insert_revision

logger = get_logger(__name__)

router = APIRouter()


class ChecklistSaveResponse(BaseModel):
    """Outcome of a checklist edit."""

    saved: bool
    pending: bool
    progress: int
    last_error: Optional[str] = None


class ItemToggleResponse(ChecklistSaveResponse):
    """Checklist edit outcome plus the section that changed."""

    section: ChecklistSection


class CursorOut(BaseModel):
    category_index: int
    section_index: int


class WizardResponse(BaseModel):
    """Where the user is in the wizard and where next/previous lead."""

    step: WizardStep
    cursor: Optional[CursorOut] = None
    category: Optional[str] = None
    section: Optional[ChecklistSection] = None
    next: Optional[CursorOut] = None
    next_step: WizardStep
    previous: Optional[CursorOut] = None
    progress: int


class SummaryPreviewResponse(BaseModel):
    """Rating and next steps a summary would produce, not yet saved."""

    overall_rating: Rating
    explanation: str
    next_steps: list[str]


def load_owned_report(report_id: UUID, auth: AuthContext) -> QAReport:
    return ensure_report_owner(get_report(report_id), auth)


async def load_flushed_report(
    report_id: UUID, auth: AuthContext, saver: DebouncedSaver
) -> QAReport:
    """Owned report, reloaded after writing any queued autosave for it."""
    report = load_owned_report(report_id, auth)
    if saver.pending(report.id):
        await saver.flush(report.id)
        report = get_report(report.id)
    return report


def current_checklist(
    report: QAReport, saver: DebouncedSaver
) -> list[ChecklistCategory]:
    """Latest checklist: a queued autosave payload beats the stored one."""
    pending = saver.pending_checklist(report.id)
    return pending if pending is not None else report.checklist_data


def _cursor_out(cursor: Optional[SectionCursor]) -> Optional[CursorOut]:
    if cursor is None:
        return None
    return CursorOut(category_index=cursor.category_index, section_index=cursor.section_index)


# =============================================================================
# Reports
# =============================================================================


@router.post("/reports", response_model=QAReport, status_code=201)
async def create_qa_report(
    data: QAReportCreate,
    auth: AuthContext = Depends(require_auth),
) -> QAReport:
    """Create a draft report with a fresh checklist."""
    return create_report(auth.user_id, data)


@router.get("/reports", response_model=ReportListResponse)
async def list_qa_reports(
    limit: int = Query(100, description="Maximum number of reports", ge=1, le=500),
    auth: AuthContext = Depends(require_auth),
) -> ReportListResponse:
    """List the caller's reports, newest first."""
    reports = list_reports(auth.user_id, limit=limit)
    return ReportListResponse(reports=reports, total=len(reports))


@router.get("/reports/{report_id}", response_model=ReportDetailResponse)
async def get_qa_report(
    report_id: UUID,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> ReportDetailResponse:
    """
    Get a report with its progress, rating explanation and unchecked items.

    Any queued autosave is written first so the response reflects it.
    """
    report = await load_flushed_report(report_id, auth, saver)
    summary = summarize_report(report)
    if not summary.derived_in_sync:
        logger.warning(
            f"Stored rating/next steps out of date for report {report_id}",
            extra={"report_id": str(report_id)},
        )
    return ReportDetailResponse(report=report, summary=summary)


# =============================================================================
# Checklist
# =============================================================================


@router.patch("/reports/{report_id}/checklist", response_model=ChecklistSaveResponse)
async def autosave_checklist(
    report_id: UUID,
    update: ChecklistUpdate,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> ChecklistSaveResponse:
    """Queue a checklist write behind the debounce window."""
    report = load_owned_report(report_id, auth)
    saver.schedule(report.id, update.checklist_data)
    return ChecklistSaveResponse(
        saved=False,
        pending=True,
        progress=calculate_progress(update.checklist_data),
        last_error=saver.last_error(report.id),
    )


@router.put("/reports/{report_id}/checklist", response_model=ChecklistSaveResponse)
async def save_checklist(
    report_id: UUID,
    update: ChecklistUpdate,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> ChecklistSaveResponse:
    """Write the checklist immediately (explicit save)."""
    report = load_owned_report(report_id, auth)
    await saver.save_now(report.id, update.checklist_data)
    logger.info(f"Saved checklist for report {report_id}", extra={"report_id": str(report_id)})
    return ChecklistSaveResponse(
        saved=True,
        pending=False,
        progress=calculate_progress(update.checklist_data),
    )


@router.post(
    "/reports/{report_id}/items/{item_id}/toggle",
    response_model=ItemToggleResponse,
)
async def toggle_checklist_item(
    report_id: UUID,
    item_id: str,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> ItemToggleResponse:
    """Flip one checklist item; the write is debounced."""
    report = load_owned_report(report_id, auth)
    checklist = current_checklist(report, saver)

    section = toggle_item(find_item_section(checklist, item_id), item_id)
    saver.schedule(report.id, checklist)

    return ItemToggleResponse(
        saved=False,
        pending=True,
        progress=calculate_progress(checklist),
        last_error=saver.last_error(report.id),
        section=section,
    )


@router.get("/reports/{report_id}/wizard", response_model=WizardResponse)
async def get_wizard_position(
    report_id: UUID,
    category_index: int = Query(0, ge=0),
    section_index: int = Query(0, ge=0),
    at_summary: bool = Query(False, description="Cursor is on the summary step"),
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> WizardResponse:
    """Resolve a wizard cursor to its section and neighbours."""
    report = load_owned_report(report_id, auth)
    checklist = current_checklist(report, saver)
    progress = calculate_progress(checklist)

    if at_summary:
        return WizardResponse(
            step=wizard_step_for(report, None),
            next_step=WizardStep.COMPLETED,
            previous=_cursor_out(last_position(checklist)),
            progress=progress,
        )

    cursor = SectionCursor(category_index, section_index)
    section = get_section(checklist, cursor)
    following = next_position(checklist, cursor)

    return WizardResponse(
        step=wizard_step_for(report, cursor),
        cursor=_cursor_out(cursor),
        category=checklist[category_index].category,
        section=section,
        next=_cursor_out(following),
        next_step=WizardStep.CHECKLIST if following else WizardStep.SUMMARY,
        previous=_cursor_out(previous_position(checklist, cursor)),
        progress=progress,
    )


# =============================================================================
# Summary & completion
# =============================================================================


@router.post("/reports/{report_id}/summary/preview", response_model=SummaryPreviewResponse)
async def preview_summary(
    report_id: UUID,
    priority_summary: PrioritySummary,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> SummaryPreviewResponse:
    """Rating and next steps for a priority summary, without saving."""
    report = load_owned_report(report_id, auth)
    report.checklist_data = current_checklist(report, saver)
    preview = apply_priority_summary(report, priority_summary)

    summary = summarize_report(preview)
    return SummaryPreviewResponse(
        overall_rating=preview.overall_rating,
        explanation=get_rating_explanation(
            preview.overall_rating, summary.unchecked_count, summary.critical_count
        ),
        next_steps=preview.next_steps,
    )


@router.post("/reports/{report_id}/complete", response_model=QAReport)
async def complete_qa_report(
    report_id: UUID,
    priority_summary: PrioritySummary,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> QAReport:
    """
    Save the priority summary and mark the report completed.

    Pending checklist edits are written first so the rating reflects them.
    """
    report = await load_flushed_report(report_id, auth, saver)

    completed = save_summary(complete_report(report, priority_summary))
    logger.info(
        f"Completed report {report_id} with rating {completed.overall_rating}",
        extra={"report_id": str(report_id), "user_id": str(auth.user_id)},
    )
    return completed


@router.patch("/reports/{report_id}/summary", response_model=QAReport)
async def edit_summary(
    report_id: UUID,
    update: PrioritySummaryUpdate,
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> QAReport:
    """
    Edit a report's priority summary without changing its status.

    A non-blank revision note records an audit revision of the new values.
    """
    report = await load_flushed_report(report_id, auth, saver)

    saved = save_summary(apply_priority_summary(report, update.priority_summary))

    note = (update.revision_note or "").strip()
    if note:
        insert_revision(saved, auth.user_id, note)

    return saved


# =============================================================================
# Export
# =============================================================================


@router.get("/reports/{report_id}/export", response_class=PlainTextResponse)
async def export_report(
    report_id: UUID,
    auth: AuthContext = Depends(require_auth),
) -> PlainTextResponse:
    """Download the report as a plain-text document."""
    report = load_owned_report(report_id, auth)
    filename = export_filename(report)
    return PlainTextResponse(
        content=render_report_text(report),
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )
