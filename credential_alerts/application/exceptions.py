"""Application layer exceptions."""


class ApplicationError(Exception):
    """Base exception for application errors."""


class RemoteError(ApplicationError):
    """Raised when a remote API call fails in a non-retryable way."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ThrottlingError(RemoteError):
    """Raised when a remote API rejects a call due to rate limiting."""

    def __init__(self, message: str, *, retry_after: float | None = None, status_code: int = 429) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class TransientFailure(ApplicationError):
    """Raised when the retry budget for a throttled call is exhausted."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class SnapshotNotFoundError(ApplicationError):
    """Raised when no snapshot has been written under the report name."""


class SnapshotWriteError(ApplicationError):
    """Raised when persisting a snapshot fails."""


class CollectionFailedError(ApplicationError):
    """Raised when the directory cannot be enumerated at all."""


class ConfigurationMissingError(ApplicationError):
    """Raised when required configuration is absent at startup."""
