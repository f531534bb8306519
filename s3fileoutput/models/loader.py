"""Job loader with YAML parsing and template rendering."""

from pathlib import Path
from typing import Dict

import yaml
from pydantic import ValidationError

from s3fileoutput.core.exceptions import ConfigurationError
from s3fileoutput.models.job import JobConfig
from s3fileoutput.models.templates import render_templates


def load_job(path: str, cli_vars: Dict[str, str] | None = None) -> JobConfig:
    """
    Load a job from a YAML file.

    Args:
        path: Path to job YAML file
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        Validated JobConfig instance

    Raises:
        ConfigurationError: If file not found, invalid YAML or validation fails
    """
    job_path = Path(path)

    try:
        with open(job_path, "r", encoding="utf-8") as f:
            job_dict = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Job file not found: {path}", context={"path": str(path)}
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in job file: {e}", context={"path": str(path)}
        ) from e

    if not isinstance(job_dict, dict):
        raise ConfigurationError(
            "Job file must contain a YAML dictionary",
            context={"path": str(path)},
        )

    job_dict = render_templates(job_dict, cli_vars)

    try:
        return JobConfig.from_dict(job_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Job validation failed: {e}", context={"path": str(path)}
        ) from e
