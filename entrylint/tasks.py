"""Task set used to run independent checks concurrently."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class TaskQueue:
    """Set of concurrent tasks joined on completion.

    Tasks start as soon as they are pushed. There are no priorities and no
    cancellation between siblings: an exception in one task is logged and
    isolated, the others keep running. Tasks may push more tasks while the
    queue is being awaited; `wait` returns once every task has finished.

    Must be used from within a running event loop.
    """

    def __init__(self, name: str = "lint") -> None:
        self.name = name
        self._pending: list[asyncio.Task[Any]] = []
        self._count = 0

    def push(self, fn: Callable[[], Awaitable[Any]], label: str | None = None) -> None:
        """Start a task.

        Args:
            fn: Zero-argument callable returning an awaitable
            label: Optional name used in logs
        """
        self._count += 1
        task_name = f"{self.name}:{label or self._count}"
        self._pending.append(asyncio.create_task(_run(fn), name=task_name))

    async def wait(self) -> None:
        """Wait until every pushed task, including tasks pushed meanwhile, is done."""
        while self._pending:
            batch, self._pending = self._pending, []
            results = await asyncio.gather(*batch, return_exceptions=True)
            for task, result in zip(batch, results):
                if isinstance(result, Exception):
                    logger.error(
                        f"Check {task.get_name()} failed: {result!r}",
                        exc_info=(type(result), result, result.__traceback__),
                    )
                elif isinstance(result, BaseException):
                    raise result


async def _run(fn: Callable[[], Awaitable[Any]]) -> Any:
    return await fn()
