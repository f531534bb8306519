"""Public Python API for s3fileoutput package.

This module provides the main entry points for loading and executing jobs.
"""

from pathlib import Path
from typing import Sequence

from s3fileoutput.core import engine
from s3fileoutput.core.engine import JobReport
from s3fileoutput.core.state_backend import LocalStateBackend, StateBackend
from s3fileoutput.models.job import JobConfig
from s3fileoutput.models.loader import load_job


def from_yaml(path: str, cli_vars: dict[str, str] | None = None) -> JobConfig:
    """Load a job from a YAML file, rendering templates.

    Raises:
        ConfigurationError: If file not found, invalid YAML or validation fails

    Example:
        >>> job = from_yaml("examples/csv_export/jobs/csv_to_s3.yml")
        >>> print(job.name)
        csv_to_s3
    """
    return load_job(path, cli_vars=cli_vars)


def run_job(
    job: JobConfig,
    inputs: Sequence[str | Path],
    state_backend: StateBackend,
) -> JobReport:
    """Upload local files through the job's output.

    Each input file becomes one uploaded object. When a task fails, the
    resume state is written to ``state_backend`` before the error is raised.

    Raises:
        ConfigurationError: If the output configuration is invalid
        EngineError: If any task fails

    Example:
        >>> from s3fileoutput import from_yaml, LocalStateBackend
        >>> job = from_yaml("examples/csv_export/jobs/csv_to_s3.yml")
        >>> run_job(job, ["data/part-0.csv"], LocalStateBackend(".state"))
    """
    return engine.execute(job, inputs, state_backend)


def resume_job(job: JobConfig, state_backend: StateBackend) -> JobReport:
    """Rerun the tasks that failed in the previous run of ``job``.

    Raises:
        EngineError: If there is nothing to resume or a task fails again
    """
    return engine.resume(job, state_backend)


def run_job_from_yaml(
    job_path: str,
    inputs: Sequence[str | Path],
    state_dir: str = ".state",
) -> JobReport:
    """Load and execute a job from a YAML file.

    Convenience function that combines `from_yaml()` and `run_job()` with a
    LocalStateBackend in ``state_dir``.
    """
    job = from_yaml(job_path)
    return run_job(job, inputs, LocalStateBackend(state_dir))
