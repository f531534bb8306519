"""Execution configuration model for job definitions."""

from typing import Optional

from pydantic import BaseModel, Field


class ExecConfig(BaseModel):
    """Configuration for how the local engine drives output tasks."""

    max_threads: int = Field(
        default=1,
        description="Number of tasks run concurrently (1 = sequential)",
        ge=1,
    )
    task_count: Optional[int] = Field(
        default=None,
        description="Number of output tasks (default: one per input file)",
        ge=1,
    )
    chunk_size: int = Field(
        default=64 * 1024,
        description="Bytes handed to the output per write call",
        gt=0,
    )
