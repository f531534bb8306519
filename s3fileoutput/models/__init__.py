"""Job configuration models."""

from s3fileoutput.models.exec_config import ExecConfig
from s3fileoutput.models.job import JobConfig
from s3fileoutput.models.loader import load_job
from s3fileoutput.models.templates import render_templates

__all__ = ["ExecConfig", "JobConfig", "load_job", "render_templates"]
