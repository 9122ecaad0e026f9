from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Bytes or a readable binary file object; streamed to storage as-is.
    body: Any = Field(repr=False)
    filename: str
    content_type: str = Field(default="application/octet-stream")
    size: int | None = None


class StorageObjectDescriptor(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    bucket: str
    key: str
    body: Any = Field(repr=False)
    content_type: str


class UploadResult(BaseModel):
    success: bool
    file_url: str | None = None
    error: str | None = None


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "File uploaded successfully!"
    file_url: str = Field(..., alias="fileUrl")


class UploadErrorResponse(BaseModel):
    message: str = "Error uploading file."
    error: str


class MessageResponse(BaseModel):
    message: str
