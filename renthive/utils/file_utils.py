"""
File upload utilities for image validation and bucket storage.
Files live under ``{upload_dir}/{storage_bucket}/users/{user_id}/``.
"""

import io
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
import aiofiles.os
from fastapi import UploadFile

from renthive.config import get_settings
from renthive.utils.exceptions import (
    FileSizeExceededError,
    FileUploadError,
    UnsupportedFileTypeError,
)

settings = get_settings()


class FileValidator:
    """Utility class for file validation operations."""

    # Supported image formats and their extensions
    SUPPORTED_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp']
    }

    # Format names reported by Pillow
    PIL_FORMATS = {
        'image/jpeg': 'jpeg',
        'image/png': 'png',
        'image/webp': 'webp'
    }

    MAX_WIDTH = 10000
    MAX_HEIGHT = 10000

    @classmethod
    def validate_file_extension(cls, filename: str) -> str:
        """
        Validate file extension.

        Returns:
            Lowercase file extension

        Raises:
            FileUploadError: If extension is missing or not supported
        """
        if not filename:
            raise FileUploadError("Filename is required")

        extension = Path(filename).suffix.lower()
        if not extension:
            raise FileUploadError("File must have an extension")

        supported_extensions = [ext for exts in cls.SUPPORTED_FORMATS.values() for ext in exts]
        if extension not in supported_extensions:
            raise FileUploadError(
                f"File extension '{extension}' not supported. "
                f"Supported extensions: {', '.join(supported_extensions)}"
            )

        return extension

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        allowed = [t for t in settings.allowed_file_types if t in cls.SUPPORTED_FORMATS]
        if mime_type not in allowed:
            raise UnsupportedFileTypeError(mime_type or "unknown", allowed)
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
    async def validate_upload_file(cls, file: UploadFile) -> Tuple[bytes, str, str]:
        """
        Comprehensive validation of an uploaded image.

        Args:
            file: FastAPI UploadFile object

        Returns:
            Tuple of (content, mime_type, extension)

        Raises:
            FileUploadError: If any validation fails
        """
        extension = cls.validate_file_extension(file.filename or "")
        mime_type = cls.validate_mime_type(file.content_type or "")

        if extension not in cls.SUPPORTED_FORMATS[mime_type]:
            raise FileUploadError(f"File extension '{extension}' doesn't match MIME type '{mime_type}'")

        await file.seek(0)
        content = await file.read()
        cls.validate_file_size(len(content))

        # Verify the bytes really are an image of the declared format
        try:
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
                pil_format = (img.format or "").lower()
        except (UnidentifiedImageError, OSError) as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

        if pil_format != cls.PIL_FORMATS[mime_type]:
            raise FileUploadError(f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'")

        if width > cls.MAX_WIDTH or height > cls.MAX_HEIGHT:
            raise FileUploadError(f"Image dimensions {width}x{height} exceed {cls.MAX_WIDTH}x{cls.MAX_HEIGHT}")

        return content, mime_type, extension


class FileStorage:
    """
    Local bucket storage.

    Paths handed to and returned from this class are bucket-relative POSIX
    paths such as ``users/<uid>/<name>.jpg``.
    """

    def __init__(self, base_dir: Optional[Path] = None, public_url: Optional[str] = None):
        self.base_dir = Path(base_dir or Path(settings.upload_dir) / settings.storage_bucket)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_url = (public_url or settings.public_storage_url).rstrip("/")

    @staticmethod
    def user_prefix(user_id: uuid.UUID) -> str:
        return f"users/{user_id}"

    def generate_path(self, user_id: uuid.UUID, extension: str) -> str:
        """Random, collision-free path inside the user's namespace."""
        return f"{self.user_prefix(user_id)}/{uuid.uuid4().hex}{extension}"

    def public_url_for(self, path: str) -> str:
        return f"{self.public_url}/{path}"

    def owns_path(self, user_id: uuid.UUID, path: str) -> bool:
        """Whether ``path`` lies inside the user's namespace."""
        parts = PurePosixPath(path).parts
        return len(parts) >= 3 and parts[0] == "users" and parts[1] == str(user_id) and ".." not in parts

    def resolve(self, path: str) -> Path:
        """
        Absolute filesystem location of a bucket path.

        Raises:
            FileUploadError: If the path escapes the bucket
        """
        full_path = (self.base_dir / path).resolve()
        if not full_path.is_relative_to(self.base_dir.resolve()):
            raise FileUploadError("Invalid file path")
        return full_path

    async def save(self, path: str, content: bytes) -> int:
        """
        Write ``content`` to ``path``.

        Returns:
            Number of bytes written
        """
        full_path = self.resolve(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(full_path, 'wb') as f:
                await f.write(content)
        except OSError:
            if await aiofiles.os.path.exists(full_path):
                await aiofiles.os.remove(full_path)
            raise
        return len(content)

    async def delete(self, path: str) -> bool:
        """
        Delete a stored file.

        Returns:
            True if a file was removed, False if nothing was there
        """
        full_path = self.resolve(path)
        if not await aiofiles.os.path.exists(full_path):
            return False
        await aiofiles.os.remove(full_path)
        return True

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.exists(self.resolve(path))
