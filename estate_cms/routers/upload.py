"""
Image upload endpoint for property listings.
"""

from fastapi import APIRouter, Depends, UploadFile, File, status

from estate_cms.schemas.upload import ImageUploadResponse
from estate_cms.utils.auth import TokenPayload
from estate_cms.utils.dependencies import get_current_admin
from estate_cms.utils.file_utils import FileValidator, FileStorage
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


def get_file_storage() -> FileStorage:
    return FileStorage()


@router.post(
    "/upload",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload property image",
    description="Upload a JPEG, PNG, WebP or GIF image up to 10MB. Requires an admin session."
)
async def upload_image(
    file: UploadFile = File(..., description="Image file to upload"),
    admin: TokenPayload = Depends(get_current_admin),
    storage: FileStorage = Depends(get_file_storage)
) -> ImageUploadResponse:
    """
    Validate and store an image, returning its public URL.

    Raises:
        UnsupportedFileTypeError: If the declared type is not an accepted image type
        FileSizeExceededError: If the file is larger than the configured limit
        FileUploadError: If the content is not a valid image or cannot be saved
    """
    try:
        content, mime_type, extension = await FileValidator.validate_upload_file(file)
    finally:
        await file.close()

    filename, url = await storage.save(content, extension)
    logger.info(f"Image uploaded by {admin.email}: {filename} ({mime_type})")

    return ImageUploadResponse(url=url, filename=filename)
