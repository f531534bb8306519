"""S3 file output plugin: job transaction and per-task outputs."""

import logging
from typing import Any

from pydantic import ValidationError

from s3fileoutput.core.exceptions import ConfigurationError
from s3fileoutput.outputs.base import ConfigDiff, Control, TaskReport, TaskSource
from s3fileoutput.outputs.registry import register_output
from s3fileoutput.outputs.s3.config import S3OutputConfig
from s3fileoutput.outputs.s3.file_output import S3FileOutput
from s3fileoutput.outputs.s3.sequence import validate_sequence_format

logger = logging.getLogger(__name__)


class S3FileOutputPlugin:
    """Uploads every output unit of every task as one S3 object.

    The plugin keeps no state of its own across runs: resuming a job simply
    reruns tasks against the same task source.
    """

    def load_config(self, config: dict[str, Any]) -> S3OutputConfig:
        """Map and validate the job's ``out`` section.

        Raises:
            ConfigurationError: If a field is missing or invalid, or the
                sequence format cannot be applied.
        """
        try:
            task = S3OutputConfig.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid s3 output configuration: {e}",
                context={"output_type": "s3"},
            ) from e
        validate_sequence_format(task.sequence_format)
        return task

    def transaction(
        self, config: dict[str, Any], task_count: int, control: Control
    ) -> ConfigDiff:
        task = self.load_config(config)
        logger.info(
            "Starting s3 output transaction: bucket=%s, tasks=%d",
            task.bucket,
            task_count,
        )
        return self.resume(task.to_task_source(), task_count, control)

    def resume(
        self, task_source: TaskSource, task_count: int, control: Control
    ) -> ConfigDiff:
        control(task_source)
        return {}

    def cleanup(
        self,
        task_source: TaskSource,
        task_count: int,
        success_task_reports: list[TaskReport],
    ) -> None:
        pass

    def open(self, task_source: TaskSource, task_index: int) -> S3FileOutput:
        task = S3OutputConfig.from_task_source(task_source)
        return S3FileOutput(task, task_index)


@register_output("s3")
def create_s3_output_plugin() -> S3FileOutputPlugin:
    """Factory function for creating S3FileOutputPlugin instances."""
    return S3FileOutputPlugin()
