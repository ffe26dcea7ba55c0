"""
Client-side store for listing photo uploads.
"""

from typing import Dict, List, Optional
import logging

from renthive.client.api import ApiClient, ApiError, FileTuple

logger = logging.getLogger(__name__)


class UploadStore:
    """Tracks upload progress state; ``uploaded`` keeps the files sent from this store."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.uploaded: List[Dict[str, str]] = []
        self.uploading = False
        self.error: Optional[str] = None

    async def upload(self, files: List[FileTuple]) -> Optional[List[Dict[str, str]]]:
        """Upload a batch; returns ``[{path, url}]`` or None on failure."""
        self.uploading = True
        self.error = None

        try:
            stored = await self.api.upload_files(files)
        except ApiError as exc:
            logger.info(f"Upload of {len(files)} file(s) failed: {exc.message}")
            self.error = exc.message
            return None
        finally:
            self.uploading = False

        self.uploaded.extend(stored)
        return stored

    async def delete(self, path: str) -> bool:
        self.error = None
        try:
            await self.api.delete_file(path)
        except ApiError as exc:
            self.error = exc.message
            return False

        self.uploaded = [item for item in self.uploaded if item["path"] != path]
        return True
