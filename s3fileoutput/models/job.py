"""Job model combining engine and output configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from s3fileoutput.models.exec_config import ExecConfig


class JobConfig(BaseModel):
    """Complete job definition.

    ``out`` is kept as a raw mapping: the output plugin named by
    ``out.type`` maps and validates it during its transaction.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Job name (required)")
    exec_config: ExecConfig = Field(
        default_factory=ExecConfig,
        description="Execution configuration",
        alias="exec",
    )
    out: dict[str, Any] = Field(description="Output plugin configuration")

    @field_validator("out")
    @classmethod
    def validate_out_type(cls, v):
        """Validate the output section names a plugin type."""
        if not v.get("type"):
            raise ValueError("out.type is required")
        return v

    @property
    def output_type(self) -> str:
        return self.out["type"]

    @classmethod
    def from_dict(cls, data: dict) -> "JobConfig":
        """Create JobConfig from dictionary (after template rendering)."""
        return cls(**data)
