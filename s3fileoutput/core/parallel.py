"""Async parallel execution of output tasks."""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

R = TypeVar("R")


@dataclass
class TaskOutcome(Generic[R]):
    """Result of one task: either a value or the exception it raised."""

    index: int
    result: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AsyncTaskExecutor:
    """Async executor running blocking task functions concurrently.

    Uses asyncio.Semaphore to limit concurrency and runs each task function
    in the default thread pool. A failing task does not cancel the others;
    every task's outcome is returned in input order.
    """

    def __init__(self, concurrency: int):
        """Initialize async task executor.

        Args:
            concurrency: Maximum number of tasks running at the same time
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency

    async def run_tasks(
        self,
        task_indices: Iterable[int],
        task_func: Callable[[int], R],
    ) -> list[TaskOutcome[R]]:
        """Run ``task_func(index)`` for every index.

        Args:
            task_indices: Task indices to run
            task_func: Blocking function executed once per task index

        Returns:
            One outcome per index, in the same order as ``task_indices``
        """
        semaphore = asyncio.Semaphore(self.concurrency)
        loop = asyncio.get_running_loop()

        async def _run(index: int) -> TaskOutcome[R]:
            async with semaphore:
                try:
                    result = await loop.run_in_executor(None, task_func, index)
                except Exception as e:
                    return TaskOutcome(index=index, error=e)
                return TaskOutcome(index=index, result=result)

        return list(await asyncio.gather(*(_run(i) for i in task_indices)))


def run_async(coro: Any) -> Any:
    """Run async coroutine in sync context."""
    return asyncio.run(coro)
