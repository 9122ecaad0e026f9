import asyncio
import logging
from typing import Any, Literal
from urllib.parse import quote
from uuid import uuid4

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from image_uploader.core.config import get_settings
from image_uploader.core.exceptions import StorageWriteFailure
from image_uploader.schemas import Credentials, StorageClientConfig, StorageObjectDescriptor

logger = logging.getLogger(__name__)


def configure_storage(
    credentials: Credentials,
    region: str | None,
    endpoint_url: str | None = None,
) -> StorageClientConfig:
    """Bind freshly fetched credentials to the storage client settings of one request."""
    return StorageClientConfig(
        credentials=credentials,
        region=region,
        endpoint_url=endpoint_url,
    )


def generate_upload_key(
    filename: str,
    timestamp_ms: int,
    strategy: Literal["timestamp", "random"] = "timestamp",
) -> str:
    # The timestamp form collides for equal names within one millisecond.
    if strategy == "random":
        return f"{timestamp_ms}-{uuid4().hex[:12]}-{filename}"
    return f"{timestamp_ms}-{filename}"


class StorageService:
    """S3-compatible storage client scoped to one set of credentials."""

    def __init__(
        self,
        config: StorageClientConfig,
        bucket: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.settings = get_settings()
        self.config = config
        self.bucket = bucket or self.settings.s3_bucket_name
        if client is None:
            session = boto3.session.Session()
            client = session.client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.credentials.access_key_id,
                aws_secret_access_key=config.credentials.secret_access_key.get_secret_value(),
                region_name=config.region,
                config=Config(signature_version="s3v4"),
            )
        self.client = client

    def object_url(self, key: str) -> str:
        quoted = quote(key, safe="/")
        if self.config.endpoint_url:
            return f"{self.config.endpoint_url.rstrip('/')}/{self.bucket}/{quoted}"
        if self.config.region:
            return f"https://{self.bucket}.s3.{self.config.region}.amazonaws.com/{quoted}"
        return f"https://{self.bucket}.s3.amazonaws.com/{quoted}"

    def describe(self, key: str, body: Any, content_type: str) -> StorageObjectDescriptor:
        return StorageObjectDescriptor(
            bucket=self.bucket,
            key=key,
            body=body,
            content_type=content_type,
        )

    async def put_object(self, descriptor: StorageObjectDescriptor) -> str:
        """Write the object and return its URL."""

        def _upload() -> None:
            self.client.put_object(
                Bucket=descriptor.bucket,
                Key=descriptor.key,
                Body=descriptor.body,
                ContentType=descriptor.content_type,
            )

        try:
            await asyncio.to_thread(_upload)
        except (BotoCoreError, ClientError) as exc:
            raise StorageWriteFailure(str(exc)) from exc

        logger.info("Stored s3://%s/%s", descriptor.bucket, descriptor.key)
        return self.object_url(descriptor.key)
