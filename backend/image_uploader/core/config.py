from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        protected_namespaces=(),
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    aws_region: str | None = Field(default=None, alias="AWS_REGION")
    s3_bucket_name: str = Field(default="image-uploads", alias="AWS_S3_BUCKET_NAME")
    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")

    secret_id: str = Field(default="AWS-keys2", alias="AWS_SECRET_ID")
    secrets_endpoint: HttpUrl | None = Field(default=None, alias="SECRETS_ENDPOINT_URL")
    secret_cache_ttl: int = Field(default=0, ge=0, alias="SECRET_CACHE_TTL_SECONDS")

    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=0, alias="MAX_UPLOAD_BYTES")
    upload_key_strategy: Literal["timestamp", "random"] = Field(
        default="timestamp", alias="UPLOAD_KEY_STRATEGY"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
