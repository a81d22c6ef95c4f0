"""API endpoint for issue image uploads."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from qareport.api.reports import current_checklist, load_owned_report
from qareport.core.auth_middleware import AuthContext, require_auth
from qareport.core.autosave import DebouncedSaver, get_checklist_saver
from qareport.core.wizard import find_section
from qareport.db.storage import upload_issue_image

router = APIRouter()


class ImageUploadResponse(BaseModel):
    """Uploaded image URL and the section's full image list."""

    url: str
    images: list[str]


@router.post(
    "/reports/{report_id}/sections/{section_id}/images",
    response_model=ImageUploadResponse,
    status_code=201,
)
async def upload_section_image(
    report_id: UUID,
    section_id: str,
    file: UploadFile = File(...),
    auth: AuthContext = Depends(require_auth),
    saver: DebouncedSaver = Depends(get_checklist_saver),
) -> ImageUploadResponse:
    """
    Upload an image documenting a section's issues.

    The public URL is appended to the section's ``issuesFound.images`` and
    the checklist is saved right away.
    """
    report = load_owned_report(report_id, auth)
    checklist = current_checklist(report, saver)
    section = find_section(checklist, section_id)

    file_bytes = await file.read()
    url = upload_issue_image(section_id, file.filename, file_bytes, file.content_type)

    section.issues_found.images.append(url)
    await saver.save_now(report.id, checklist)

    return ImageUploadResponse(url=url, images=section.issues_found.images)
