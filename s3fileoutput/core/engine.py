"""Local execution engine driving a file output plugin.

The engine plays the host role: it splits local input files across tasks,
runs the tasks through the plugin's transaction, and remembers which tasks
failed so that ``resume`` can rerun only those.
"""

import logging
import time
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Sequence

from s3fileoutput.core.exceptions import EngineError, S3OutputError
from s3fileoutput.core.parallel import AsyncTaskExecutor, run_async
from s3fileoutput.core.state_backend import StateBackend
from s3fileoutput.models.job import JobConfig
from s3fileoutput.outputs import (
    ConfigDiff,
    FileOutputPlugin,
    TaskReport,
    TaskSource,
    get_output_plugin,
)

logger = logging.getLogger(__name__)


@dataclass
class JobReport:
    """Outcome of a successful job run."""

    job_name: str
    task_count: int
    config_diff: ConfigDiff
    task_reports: list[TaskReport]
    execution_time: float = 0.0


@dataclass
class _TaskRun:
    job: JobConfig
    plugin: FileOutputPlugin
    output_type: str
    inputs: list[str]
    task_count: int
    state_backend: StateBackend
    reports: dict[int, TaskReport] = field(default_factory=dict)
    task_source: TaskSource | None = None

    def assigned_inputs(self, task_index: int) -> list[str]:
        return self.inputs[task_index :: self.task_count]

    def control(self, task_source: TaskSource) -> list[TaskReport]:
        self.task_source = task_source
        pending = [i for i in range(self.task_count) if i not in self.reports]

        logger.info(
            f"Running {len(pending)} of {self.task_count} tasks",
            extra={"job_name": self.job.name},
        )

        executor = AsyncTaskExecutor(self.job.exec_config.max_threads)
        outcomes = run_async(executor.run_tasks(pending, self._run_task))

        failed = []
        for outcome in outcomes:
            if outcome.ok:
                self.reports[outcome.index] = outcome.result
            else:
                failed.append(outcome)

        if failed:
            self._save_resume_state()
            first = failed[0]
            raise EngineError(
                f"{len(failed)} of {self.task_count} tasks failed: {first.error}",
                context={
                    "job_name": self.job.name,
                    "failed_tasks": [o.index for o in failed],
                },
            ) from first.error

        return [self.reports[i] for i in range(self.task_count)]

    def _run_task(self, task_index: int) -> TaskReport:
        output = self.plugin.open(self.task_source, task_index)
        chunk_size = self.job.exec_config.chunk_size
        try:
            for path in self.assigned_inputs(task_index):
                output.start_new_unit()
                with open(path, "rb") as f:
                    for chunk in iter(partial(f.read, chunk_size), b""):
                        output.write(chunk)
            output.finish()
            return output.commit()
        except Exception:
            logger.error(
                "Task failed",
                exc_info=True,
                extra={"job_name": self.job.name, "task_index": task_index},
            )
            output.abort()
            raise
        finally:
            output.close()

    def _save_resume_state(self) -> None:
        self.state_backend.save(
            self.job.name,
            {
                "output_type": self.output_type,
                "task_source": self.task_source,
                "task_count": self.task_count,
                "inputs": self.inputs,
                "task_reports": {str(i): r for i, r in self.reports.items()},
            },
        )


def execute(
    job: JobConfig,
    inputs: Sequence[str | Path],
    state_backend: StateBackend,
) -> JobReport:
    """Upload ``inputs`` through the job's output plugin.

    Each input file becomes one output unit. Files are assigned round-robin
    to ``exec.task_count`` tasks (default: one task per file), and at most
    ``exec.max_threads`` tasks run at once.

    Args:
        job: Job configuration
        inputs: Local files to write
        state_backend: Backend where resume state is kept when tasks fail

    Returns:
        JobReport with the plugin's config diff and every task report

    Raises:
        ConfigurationError: If the output configuration is invalid
        EngineError: If any task fails (resume state is saved first)
    """
    paths = [str(Path(p)) for p in inputs]
    task_count = job.exec_config.task_count or max(len(paths), 1)
    plugin = get_output_plugin(job.output_type)
    run = _TaskRun(
        job=job,
        plugin=plugin,
        output_type=job.output_type,
        inputs=paths,
        task_count=task_count,
        state_backend=state_backend,
    )

    logger.info(
        f"Starting job with {len(paths)} inputs and {task_count} tasks",
        extra={"job_name": job.name},
    )
    start = time.time()
    config_diff = _run_guarded(job, lambda: plugin.transaction(job.out, task_count, run.control))
    return _complete(run, config_diff, start)


def resume(job: JobConfig, state_backend: StateBackend) -> JobReport:
    """Rerun the tasks that failed in the last run of ``job``.

    Raises:
        EngineError: If no resume state exists or a task fails again
    """
    state = state_backend.load(job.name)
    if not state:
        raise EngineError(
            "No resume state found",
            context={"job_name": job.name},
        )

    plugin = get_output_plugin(state["output_type"])
    run = _TaskRun(
        job=job,
        plugin=plugin,
        output_type=state["output_type"],
        inputs=list(state["inputs"]),
        task_count=state["task_count"],
        state_backend=state_backend,
        reports={int(i): r for i, r in state.get("task_reports", {}).items()},
    )

    logger.info(
        f"Resuming job: {len(run.reports)} of {run.task_count} tasks already done",
        extra={"job_name": job.name},
    )
    start = time.time()
    config_diff = _run_guarded(
        job, lambda: plugin.resume(state["task_source"], run.task_count, run.control)
    )
    return _complete(run, config_diff, start)


def _run_guarded(job: JobConfig, transaction: Callable[[], ConfigDiff]) -> ConfigDiff:
    try:
        return transaction()
    except S3OutputError:
        raise
    except Exception as e:
        error_msg = f"Execution failed: {e}"
        logger.error(error_msg, extra={"job_name": job.name}, exc_info=True)
        raise EngineError(error_msg, context={"job_name": job.name}) from e


def _complete(run: _TaskRun, config_diff: ConfigDiff, start: float) -> JobReport:
    reports = [run.reports[i] for i in range(run.task_count)]
    run.plugin.cleanup(run.task_source, run.task_count, reports)
    run.state_backend.delete(run.job.name)

    report = JobReport(
        job_name=run.job.name,
        task_count=run.task_count,
        config_diff=config_diff,
        task_reports=reports,
        execution_time=time.time() - start,
    )
    logger.info(
        f"Completed job in {report.execution_time:.2f}s",
        extra={"job_name": run.job.name},
    )
    return report
