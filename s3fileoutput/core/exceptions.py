"""Exception hierarchy for the s3fileoutput package."""


class S3OutputError(Exception):
    """Base exception for all s3fileoutput errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(S3OutputError):
    """Raised when job or plugin configuration is invalid."""

    pass


class IllegalStateError(S3OutputError):
    """Raised when the output lifecycle is driven out of order."""

    pass


class StagingIOError(S3OutputError):
    """Raised when a local staging file cannot be created, written or deleted."""

    pass


class UploadError(S3OutputError):
    """Raised when putting an object to S3 fails."""

    pass


class StateError(S3OutputError):
    """Raised when resume state cannot be loaded or saved."""

    pass


class EngineError(S3OutputError):
    """Raised when the local execution engine fails a job."""

    pass
