from image_uploader.schemas.credentials import Credentials, StorageClientConfig
from image_uploader.schemas.upload import (
    MessageResponse,
    StorageObjectDescriptor,
    UploadErrorResponse,
    UploadRequest,
    UploadResponse,
    UploadResult,
)

__all__ = [
    "Credentials",
    "StorageClientConfig",
    "UploadRequest",
    "StorageObjectDescriptor",
    "UploadResult",
    "UploadResponse",
    "UploadErrorResponse",
    "MessageResponse",
]
