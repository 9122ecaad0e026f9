import asyncio
import json
import logging
import time
from collections.abc import Callable
from typing import Any, Final

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from image_uploader.core.config import get_settings
from image_uploader.core.exceptions import SecretMalformed, SecretUnavailable
from image_uploader.schemas import Credentials

logger = logging.getLogger(__name__)

ACCESS_KEY_FIELD: Final[str] = "AWS_ACCESS_KEY_ID"
SECRET_KEY_FIELD: Final[str] = "AWS_SECRET_ACCESS_KEY"


def parse_secret(secret_string: str | None) -> Credentials:
    """Extract the storage key pair from a vault secret string."""
    if not secret_string:
        raise SecretMalformed("Unable to retrieve secrets: Secret not found")

    try:
        record = json.loads(secret_string)
    except json.JSONDecodeError as exc:
        raise SecretMalformed("Unable to retrieve secrets: secret is not valid JSON") from exc
    if not isinstance(record, dict):
        raise SecretMalformed("Unable to retrieve secrets: secret is not a JSON object")

    missing = [field for field in (ACCESS_KEY_FIELD, SECRET_KEY_FIELD) if not record.get(field)]
    if missing:
        raise SecretMalformed(
            f"Unable to retrieve secrets: missing field(s) {', '.join(missing)}"
        )

    return Credentials(
        access_key_id=str(record[ACCESS_KEY_FIELD]),
        secret_access_key=str(record[SECRET_KEY_FIELD]),
    )


class SecretProvider:
    """Reads storage credentials from AWS Secrets Manager."""

    def __init__(
        self,
        client: Any | None = None,
        secret_id: str | None = None,
        cache_ttl: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = get_settings()
        self._client = client
        self.secret_id = secret_id or self.settings.secret_id
        self.cache_ttl = self.settings.secret_cache_ttl if cache_ttl is None else cache_ttl
        self._clock = clock
        self._cached: Credentials | None = None
        self._cached_at = 0.0

    def _get_client(self) -> Any:
        # Built on first use so a missing region fails the request, not startup.
        if self._client is None:
            session = boto3.session.Session()
            self._client = session.client(
                "secretsmanager",
                endpoint_url=(
                    str(self.settings.secrets_endpoint) if self.settings.secrets_endpoint else None
                ),
                region_name=self.settings.aws_region,
            )
        return self._client

    async def fetch_credentials(self) -> Credentials:
        cached = self._cached
        if cached is not None and self._clock() - self._cached_at < self.cache_ttl:
            return cached

        try:
            client = self._get_client()
            response = await asyncio.to_thread(client.get_secret_value, SecretId=self.secret_id)
        except (BotoCoreError, ClientError) as exc:
            raise SecretUnavailable(f"Unable to retrieve secrets: {exc}") from exc

        credentials = parse_secret(response.get("SecretString"))
        if self.cache_ttl > 0:
            self._cached = credentials
            self._cached_at = self._clock()
            logger.debug("Cached credentials from %s for %ss", self.secret_id, self.cache_ttl)
        return credentials

    def invalidate(self) -> None:
        if self._cached is not None:
            logger.info("Dropping cached credentials for %s", self.secret_id)
        self._cached = None
        self._cached_at = 0.0


_secret_provider: SecretProvider | None = None


def get_secret_provider() -> SecretProvider:
    global _secret_provider
    if _secret_provider is None:
        _secret_provider = SecretProvider()
    return _secret_provider


def reset_secret_provider() -> None:
    global _secret_provider
    _secret_provider = None
