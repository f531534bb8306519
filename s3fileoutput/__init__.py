"""s3fileoutput - S3 file output plugin.

Stages each output unit of a task in a local file and uploads it to S3 as one
object, driven by a transactional host lifecycle.
"""

__version__ = "0.1.0"

# Public API
from s3fileoutput.api import from_yaml, resume_job, run_job, run_job_from_yaml

# Exceptions
from s3fileoutput.core.exceptions import (
    ConfigurationError,
    EngineError,
    IllegalStateError,
    S3OutputError,
    StagingIOError,
    StateError,
    UploadError,
)
from s3fileoutput.core.engine import JobReport
from s3fileoutput.core.state_backend import LocalStateBackend, StateBackend

# Models and outputs
from s3fileoutput.models.job import JobConfig
from s3fileoutput.outputs.s3 import S3FileOutput, S3FileOutputPlugin, S3OutputConfig

__all__ = [
    # Version
    "__version__",
    # Public API
    "from_yaml",
    "run_job",
    "run_job_from_yaml",
    "resume_job",
    # Core classes
    "JobConfig",
    "JobReport",
    "StateBackend",
    "LocalStateBackend",
    "S3FileOutput",
    "S3FileOutputPlugin",
    "S3OutputConfig",
    # Exceptions
    "S3OutputError",
    "ConfigurationError",
    "IllegalStateError",
    "StagingIOError",
    "UploadError",
    "StateError",
    "EngineError",
]
