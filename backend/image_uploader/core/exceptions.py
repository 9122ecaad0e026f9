class UploadError(Exception):
    """Base class for failures raised while handling an upload."""


class MissingFile(UploadError):
    """The request did not carry a file under the expected field."""

    def __init__(self, message: str = "No file uploaded.") -> None:
        super().__init__(message)


class PayloadTooLarge(UploadError):
    """The uploaded file exceeds the configured size cap."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"File is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit


class SecretError(UploadError):
    """Raised when storage credentials cannot be obtained from the vault."""


class SecretUnavailable(SecretError):
    """The vault call itself failed."""


class SecretMalformed(SecretError):
    """The vault answered, but the secret is absent or lacks expected fields."""


class StorageWriteFailure(UploadError):
    """The object storage rejected or failed the write."""


class UnexpectedFile(UploadError):
    """More than one file arrived under the single-file field."""

    def __init__(self, field: str, count: int) -> None:
        super().__init__(f"Expected a single file under '{field}', got {count}.")
        self.field = field
        self.count = count
