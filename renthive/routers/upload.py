"""
Upload API endpoints for listing photos.
"""

from fastapi import APIRouter, Body, Depends, File, UploadFile
from typing import List, Optional, Union

from renthive.models.user import User
from renthive.services.upload import UploadService
from renthive.services.error_handler import ERROR_RESPONSES
from renthive.schemas.upload import (
    DeleteFileRequest,
    DeleteFileResponse,
    UploadedFileResponse,
    UploadResponse,
)
from renthive.utils.dependencies import get_current_user, get_upload_service


router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post(
    "",
    response_model=UploadResponse,
    summary="Upload images",
    description="Upload one or more JPEG, PNG or WebP images in the multipart field 'files'.",
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401], 500: ERROR_RESPONSES[500]}
)
async def upload_files(
    current_user: User = Depends(get_current_user),
    files: Optional[List[Union[UploadFile, str]]] = File(None, description="Image files"),
    upload_service: UploadService = Depends(get_upload_service)
) -> UploadResponse:
    # An empty file input arrives as a part with no filename
    selected = [item for item in files or [] if not isinstance(item, str) and item.filename]
    stored = await upload_service.upload_files(current_user, selected)
    return UploadResponse(
        success=True,
        files=[UploadedFileResponse(**item) for item in stored]
    )


@router.delete(
    "",
    response_model=DeleteFileResponse,
    summary="Delete uploaded file",
    description=(
        "Delete one of your uploaded files. Its URL is also removed from the "
        "images of your listings."
    ),
    responses={
        400: ERROR_RESPONSES[400],
        401: ERROR_RESPONSES[401],
        403: ERROR_RESPONSES[403],
        500: ERROR_RESPONSES[500],
    }
)
async def delete_file(
    payload: Optional[DeleteFileRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    upload_service: UploadService = Depends(get_upload_service)
) -> DeleteFileResponse:
    message = await upload_service.delete_file(current_user, payload.path if payload else None)
    return DeleteFileResponse(success=True, message=message)
