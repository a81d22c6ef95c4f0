"""Issue image uploads to Supabase Storage."""

import time

from qareport.core.config import get_settings
from qareport.core.errors import UploadFailed
from qareport.core.logging import get_logger
from qareport.db.supabase_client import get_supabase

logger = get_logger(__name__)


def validate_image(file_bytes: bytes, content_type: str | None) -> None:
    """
    Reject empty, oversized or non-image uploads.

    Raises:
        UploadFailed: With too_large=True when over MAX_IMAGE_UPLOAD_BYTES
    """
    settings = get_settings()

    if not file_bytes:
        raise UploadFailed("Empty file")
    if len(file_bytes) > settings.MAX_IMAGE_UPLOAD_BYTES:
        limit_mb = settings.MAX_IMAGE_UPLOAD_BYTES // (1024 * 1024)
        raise UploadFailed(f"Image must be less than {limit_mb}MB", too_large=True)
    if not content_type or not content_type.startswith("image/"):
        raise UploadFailed(f"Unsupported file type: {content_type or 'unknown'}")


def image_storage_path(section_id: str, filename: str | None) -> str:
    """Object path ``qa-images/{section_id}/{epoch_ms}.{ext}``."""
    ext = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else "bin"
    return f"qa-images/{section_id}/{int(time.time() * 1000)}.{ext}"


def upload_issue_image(
    section_id: str,
    filename: str | None,
    file_bytes: bytes,
    content_type: str | None,
) -> str:
    """
    Upload one image and return its public URL.

    Args:
        section_id: Checklist section the image documents
        filename: Original filename (for the extension)
        file_bytes: Image content
        content_type: MIME type from the upload

    Returns:
        Publicly resolvable URL of the stored image

    Raises:
        UploadFailed: If validation fails or storage rejects the write
    """
    validate_image(file_bytes, content_type)

    settings = get_settings()
    storage_path = image_storage_path(section_id, filename)

    try:
        bucket = get_supabase().storage.from_(settings.IMAGE_BUCKET)
        bucket.upload(
            path=storage_path,
            file=file_bytes,
            file_options={"content-type": content_type},
        )
        public_url = bucket.get_public_url(storage_path)
    except Exception as e:
        logger.error(
            f"Failed to upload image to storage: {e}",
            extra={"section_id": section_id},
        )
        raise UploadFailed(f"Failed to upload image: {e}") from e

    logger.info(f"Uploaded image {storage_path}", extra={"section_id": section_id})
    return public_url
