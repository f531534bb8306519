"""Core module for s3fileoutput package."""

from s3fileoutput.core.exceptions import (
    ConfigurationError,
    EngineError,
    IllegalStateError,
    S3OutputError,
    StagingIOError,
    StateError,
    UploadError,
)
from s3fileoutput.core.state_backend import LocalStateBackend, StateBackend

__all__ = [
    "S3OutputError",
    "ConfigurationError",
    "IllegalStateError",
    "StagingIOError",
    "UploadError",
    "StateError",
    "EngineError",
    "StateBackend",
    "LocalStateBackend",
]
