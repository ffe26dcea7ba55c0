"""
Pydantic schemas for file upload requests and responses.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class UploadedFileResponse(BaseModel):
    path: str = Field(..., description="Storage path inside the bucket", examples=["users/1f0c/ab12cd.jpg"])
    url: str = Field(..., description="Public URL of the stored file")


class UploadResponse(BaseModel):
    success: bool = True
    files: List[UploadedFileResponse]


class DeleteFileRequest(BaseModel):
    path: Optional[str] = Field(None, description="Storage path returned by the upload")


class DeleteFileResponse(BaseModel):
    success: bool = True
    message: str = "File deleted successfully"
