"""
Upload service for listing photos.
Validates images, stores them in the user's bucket namespace and keeps
listings consistent when a file is deleted.
"""

from typing import Dict, List, Optional
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from renthive.config import get_settings
from renthive.models.user import User
from renthive.services.property import PropertyService
from renthive.utils.file_utils import FileStorage, FileValidator
from renthive.utils.exceptions import (
    BackendError,
    BadRequestError,
    FileOwnershipError,
)
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


class UploadService:
    """Service for uploading and deleting listing images."""

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db_session = db_session
        self.storage = storage or FileStorage()
        self.property_service = PropertyService(db_session)

    async def upload_files(self, user: User, files: List[UploadFile]) -> List[Dict[str, str]]:
        """
        Store one or more images under ``users/{user_id}/``.

        Every file is validated before anything is written, so a bad file
        rejects the whole batch.

        Returns:
            List of ``{"path", "url"}`` dicts in upload order

        Raises:
            BadRequestError: No files, too many files or an invalid file
            BackendError: Writing to storage failed
        """
        files = [f for f in files or [] if f is not None]
        if not files:
            raise BadRequestError("No files provided")

        if len(files) > settings.max_files_per_upload:
            raise BadRequestError(f"Maximum {settings.max_files_per_upload} files allowed per upload")

        validated = []
        for file in files:
            content, _mime_type, extension = await FileValidator.validate_upload_file(file)
            validated.append((content, extension))

        stored: List[Dict[str, str]] = []
        try:
            for content, extension in validated:
                path = self.storage.generate_path(user.id, extension)
                await self.storage.save(path, content)
                stored.append({"path": path, "url": self.storage.public_url_for(path)})
        except OSError as e:
            await self._discard(stored)
            raise BackendError("upload files", e)

        logger.info(f"User {user.id} uploaded {len(stored)} files")
        return stored

    async def delete_file(self, user: User, path: Optional[str]) -> str:
        """
        Delete one of the user's files and drop its URL from their listings.
        Deleting a file that is already gone succeeds.

        Raises:
            BadRequestError: No path given
            FileOwnershipError: The path is outside the user's namespace
        """
        if not path or not path.strip():
            raise BadRequestError("No file path provided")

        path = path.strip().lstrip("/")
        if not self.storage.owns_path(user.id, path):
            raise FileOwnershipError()

        try:
            removed = await self.storage.delete(path)
        except OSError as e:
            raise BackendError("delete file", e)

        url = self.storage.public_url_for(path)
        changed = await self.property_service.remove_image_from_listings(user, url)

        logger.info(f"User {user.id} deleted file {path} (existed={removed}, listings updated={changed})")
        return "File deleted successfully"

    async def _discard(self, stored: List[Dict[str, str]]) -> None:
        for item in stored:
            try:
                await self.storage.delete(item["path"])
            except OSError as e:
                logger.warning(f"Failed to clean up partial upload {item['path']}: {e}")
