"""Base protocols for file output plugins.

This module defines the contract between a host that produces files and the
output plugins that store them:
- TransactionalFileOutput: per-task sink driven unit by unit
- FileOutputPlugin: job-level transaction that opens one output per task
"""

from typing import Any, Callable, Protocol, runtime_checkable

TaskSource = dict[str, Any]
TaskReport = dict[str, Any]
ConfigDiff = dict[str, Any]

# Runs every pending task against the task source and returns their reports
Control = Callable[[TaskSource], list[TaskReport]]


@runtime_checkable
class TransactionalFileOutput(Protocol):
    """Per-task output that receives a sequence of files ("units").

    The host calls ``start_new_unit()`` before each file, streams its bytes
    with ``write()``, then ends the task with exactly one of ``finish()`` or
    ``abort()``, and finally ``commit()`` on success and ``close()`` always.

    Example:
        output = plugin.open(task_source, task_index)
        try:
            for chunk_iter in files:
                output.start_new_unit()
                for chunk in chunk_iter:
                    output.write(chunk)
            output.finish()
            report = output.commit()
        except Exception:
            output.abort()
            raise
        finally:
            output.close()
    """

    def start_new_unit(self) -> None:
        """Close the current unit (if any) and open a new one."""
        ...

    def write(self, data: bytes) -> None:
        """Append bytes to the current unit.

        Raises:
            IllegalStateError: If no unit has been started.
        """
        ...

    def finish(self) -> None:
        """Complete the current unit and flush everything to storage."""
        ...

    def abort(self) -> None:
        """Discard any incomplete unit. Must not raise."""
        ...

    def close(self) -> None:
        """Release resources held by the output."""
        ...

    def commit(self) -> TaskReport:
        """Return the report of a successfully finished task."""
        ...


@runtime_checkable
class FileOutputPlugin(Protocol):
    """Job-level side of a file output."""

    def transaction(
        self, config: dict[str, Any], task_count: int, control: Control
    ) -> ConfigDiff:
        """Validate ``config``, then run all tasks through ``control``.

        Raises:
            ConfigurationError: If the configuration is invalid. Raised
                before ``control`` is invoked.
        """
        ...

    def resume(
        self, task_source: TaskSource, task_count: int, control: Control
    ) -> ConfigDiff:
        """Run the tasks again from a previously serialized task source."""
        ...

    def cleanup(
        self,
        task_source: TaskSource,
        task_count: int,
        success_task_reports: list[TaskReport],
    ) -> None:
        """Called once every task has reported success."""
        ...

    def open(self, task_source: TaskSource, task_index: int) -> TransactionalFileOutput:
        """Create the output for one task."""
        ...
