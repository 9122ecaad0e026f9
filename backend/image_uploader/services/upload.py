import logging
import time
from collections.abc import Callable

from image_uploader.core.config import get_settings
from image_uploader.core.exceptions import PayloadTooLarge
from image_uploader.schemas import StorageClientConfig, UploadRequest, UploadResult
from image_uploader.services.secrets import SecretProvider, get_secret_provider
from image_uploader.services.storage import (
    StorageService,
    configure_storage,
    generate_upload_key,
)

logger = logging.getLogger(__name__)


StorageFactory = Callable[[StorageClientConfig], StorageService]
Clock = Callable[[], int]


def _now_ms() -> int:
    return int(time.time() * 1000)


class UploadService:
    """Moves one uploaded file into the bucket: one fetch, one configure, one write."""

    def __init__(
        self,
        secrets: SecretProvider | None = None,
        storage_factory: StorageFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = get_settings()
        self.secrets = secrets or get_secret_provider()
        self.storage_factory: StorageFactory = storage_factory or StorageService
        self._clock = clock or _now_ms

    def _check_size(self, upload: UploadRequest) -> None:
        limit = self.settings.max_upload_bytes
        if not limit:
            return
        size = upload.size
        if size is None and isinstance(upload.body, (bytes, bytearray)):
            size = len(upload.body)
        if size is not None and size > limit:
            raise PayloadTooLarge(size, limit)

    async def handle_upload(self, upload: UploadRequest) -> UploadResult:
        self._check_size(upload)

        try:
            credentials = await self.secrets.fetch_credentials()
            config = configure_storage(
                credentials,
                self.settings.aws_region,
                str(self.settings.s3_endpoint) if self.settings.s3_endpoint else None,
            )
            storage = self.storage_factory(config)
            key = generate_upload_key(
                upload.filename,
                self._clock(),
                self.settings.upload_key_strategy,
            )
            descriptor = storage.describe(key, upload.body, upload.content_type)
            file_url = await storage.put_object(descriptor)
        except Exception as exc:
            logger.exception("Upload of %s failed", upload.filename)
            # Credentials may have been rotated; force a re-fetch next time.
            self.secrets.invalidate()
            return UploadResult(success=False, error=str(exc))

        return UploadResult(success=True, file_url=file_url)
