from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_key_id: str = Field(..., min_length=1)
    secret_access_key: SecretStr


class StorageClientConfig(BaseModel):
    """Everything needed to build one request's storage client."""

    model_config = ConfigDict(frozen=True)

    credentials: Credentials
    region: str | None = None
    endpoint_url: str | None = None
