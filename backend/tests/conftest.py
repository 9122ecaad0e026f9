import importlib
import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from image_uploader.core.config import get_settings
from image_uploader.schemas import Credentials, StorageClientConfig, StorageObjectDescriptor
from image_uploader.services import secrets as secrets_service
from image_uploader.services.storage import StorageService
from image_uploader.services.upload import UploadService

FIXED_NOW_MS = 1_700_000_000_000
BUCKET = "test-bucket"
REGION = "us-east-1"


class DummySecretProvider(secrets_service.SecretProvider):
    def __init__(  # type: ignore[super-init-not-called]
        self,
        credentials: Credentials | None = None,
        error: Exception | None = None,
    ) -> None:
        self.settings = get_settings()
        self.credentials = credentials or Credentials(
            access_key_id="AKIATEST",
            secret_access_key="test-secret",
        )
        self.error = error
        self.calls = 0
        self.invalidations = 0

    async def fetch_credentials(self) -> Credentials:  # type: ignore[override]
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.credentials

    def invalidate(self) -> None:  # type: ignore[override]
        self.invalidations += 1


class DummyStorage(StorageService):
    def __init__(  # type: ignore[super-init-not-called]
        self,
        config: StorageClientConfig,
        writes: list[dict],
        error: Exception | None = None,
    ) -> None:
        self.settings = get_settings()
        self.config = config
        self.bucket = self.settings.s3_bucket_name
        self.writes = writes
        self.error = error

    async def put_object(self, descriptor: StorageObjectDescriptor) -> str:  # type: ignore[override]
        if self.error is not None:
            raise self.error
        body = descriptor.body
        data = bytes(body) if isinstance(body, (bytes, bytearray)) else body.read()
        self.writes.append(
            {
                "access_key_id": self.config.credentials.access_key_id,
                "bucket": descriptor.bucket,
                "key": descriptor.key,
                "content_type": descriptor.content_type,
                "data": data,
            }
        )
        return self.object_url(descriptor.key)


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["ENV"] = "test"
    os.environ["AWS_REGION"] = REGION
    os.environ["AWS_S3_BUCKET_NAME"] = BUCKET
    os.environ["AWS_SECRET_ID"] = "AWS-keys2"
    os.environ["MAX_UPLOAD_BYTES"] = "1024"
    os.environ["UPLOAD_KEY_STRATEGY"] = "timestamp"
    os.environ["SECRET_CACHE_TTL_SECONDS"] = "0"
    # Ambient credentials so boto3 clients can be built without a profile.
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ.pop("S3_ENDPOINT_URL", None)
    os.environ.pop("SECRETS_ENDPOINT_URL", None)
    get_settings.cache_clear()
    secrets_service.reset_secret_provider()


@pytest.fixture(scope="session")
def app_instance(configure_environment):
    from image_uploader import main as app_module

    importlib.reload(app_module)
    return app_module.app


@pytest.fixture
def secrets():
    return DummySecretProvider()


@pytest.fixture
def storage_writes() -> list[dict]:
    return []


@pytest.fixture
def storage_factory(storage_writes):
    def _factory(config: StorageClientConfig) -> DummyStorage:
        return DummyStorage(config, storage_writes)

    return _factory


@pytest.fixture
def upload_service(secrets, storage_factory):
    return UploadService(
        secrets=secrets,
        storage_factory=storage_factory,
        clock=lambda: FIXED_NOW_MS,
    )


@pytest_asyncio.fixture
async def client(app_instance, upload_service):
    # Mimic the lifespan hook, which ASGITransport does not run.
    app_instance.state.upload_service = upload_service
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
