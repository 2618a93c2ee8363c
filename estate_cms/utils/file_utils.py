"""
File upload utilities for property image validation and storage.
"""

import io
import time
import uuid
import logging
from pathlib import Path
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from estate_cms.config import get_settings
from estate_cms.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError
)

settings = get_settings()
logger = logging.getLogger(__name__)


class FileValidator:
    """Utility class for image upload validation."""

    # MIME type -> (Pillow format, accepted extensions; first is canonical)
    SUPPORTED_FORMATS = {
        "image/jpeg": ("JPEG", [".jpg", ".jpeg"]),
        "image/jpg": ("JPEG", [".jpg", ".jpeg"]),
        "image/png": ("PNG", [".png"]),
        "image/webp": ("WEBP", [".webp"]),
        "image/gif": ("GIF", [".gif"]),
    }

    @classmethod
    def validate_mime_type(cls, mime_type: Optional[str]) -> str:
        """
        Validate the declared MIME type.

        Raises:
            UnsupportedFileTypeError: If the type is not an accepted image type
        """
        mime_type = (mime_type or "").lower()
        if mime_type not in settings.allowed_file_types or mime_type not in cls.SUPPORTED_FORMATS:
            raise UnsupportedFileTypeError(mime_type or "unknown", settings.allowed_file_types)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If file size exceeds limit
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)

        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes, mime_type: str) -> str:
        """
        Check that the bytes decode as the image format the MIME type claims.

        Returns:
            The Pillow format name

        Raises:
            FileUploadError: If the content is not a readable image of that format
        """
        expected_format = cls.SUPPORTED_FORMATS[mime_type][0]
        try:
            with Image.open(io.BytesIO(content)) as img:
                image_format = img.format
                img.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file: {e}")

        if image_format != expected_format:
            raise FileUploadError(
                f"Image format '{image_format}' doesn't match MIME type '{mime_type}'"
            )
        return image_format

    @classmethod
    def extension_for(cls, filename: Optional[str], mime_type: str) -> str:
        """Keep the client's extension when it fits the type, else use the canonical one."""
        extensions = cls.SUPPORTED_FORMATS[mime_type][1]
        suffix = Path(filename or "").suffix.lower()
        return suffix if suffix in extensions else extensions[0]

    @classmethod
    async def validate_upload_file(cls, file: UploadFile) -> Tuple[bytes, str, str]:
        """
        Comprehensive validation of an uploaded image.

        Returns:
            Tuple of (content, mime_type, extension)
        """
        mime_type = cls.validate_mime_type(file.content_type)

        await file.seek(0)
        # One byte over the limit is enough to reject
        content = await file.read(settings.max_file_size + 1)
        cls.validate_file_size(len(content))
        cls.validate_image_content(content, mime_type)

        return content, mime_type, cls.extension_for(file.filename, mime_type)


class FileStorage:
    """Stores property images under the public uploads directory."""

    def __init__(self, base_dir: Optional[Path] = None, url_prefix: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")
        self.properties_dir.mkdir(parents=True, exist_ok=True)

    @property
    def properties_dir(self) -> Path:
        return self.base_dir / "properties"

    def generate_unique_filename(self, extension: str) -> str:
        """
        Generate a collision-resistant filename.

        Format: property-<unix ms>-<13 random hex chars><extension>
        """
        timestamp = int(time.time() * 1000)
        random_part = uuid.uuid4().hex[:13]
        return f"property-{timestamp}-{random_part}{extension}"

    def public_url(self, filename: str) -> str:
        return f"{self.url_prefix}/properties/{filename}"

    async def save(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write image bytes to disk.

        Returns:
            Tuple of (filename, public url)

        Raises:
            FileUploadError: If the file cannot be written
        """
        filename = self.generate_unique_filename(extension)
        file_path = self.properties_dir / filename

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Failed to write upload {file_path}: {e}")
            if file_path.exists():
                file_path.unlink()
            raise FileUploadError("Failed to save file")

        logger.info(f"Stored upload {filename} ({len(content)} bytes)")
        return filename, self.public_url(filename)
