"""Lifecycle tracking for background ingestion tasks."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)


class TaskManager:
    """Track pending image-normalization and file-decode tasks.

    Tasks complete in whatever order the event loop finishes them; the manager
    only guarantees that each is awaited or cancelled on teardown and that
    failures are logged instead of disappearing with the task object.
    """

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._pending)

    def spawn(
        self, coro: Coroutine[Any, Any, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Schedule *coro* on the running loop and track it until done."""
        task = asyncio.create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error(
                "tasks.failed",
                extra={
                    "event": "tasks.failed",
                    "task": task.get_name(),
                    "error": repr(exc),
                },
            )

    async def await_all(self) -> None:
        """Wait for every pending task, including ones spawned while waiting."""
        while self._pending:
            pending = list(self._pending)
            await asyncio.gather(*pending, return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every pending task and wait for them to unwind."""
        pending = [task for task in self._pending if not task.done()]
        for task in pending:
            task.cancel()
        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:  # noqa: BLE001 - already logged by _on_done.
                pass
        self._pending.clear()
