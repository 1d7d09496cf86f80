"""Deferred-execution primitives used by the composer.

The composer never sleeps. Work that must happen "a little later" (debounced
resizes, cursor repositioning after an insert) is handed to a ``Scheduler``.
``AsyncioScheduler`` runs on the current event loop; the Textual widgets wrap
their own timers with ``TextualScheduler``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from textual.dom import DOMNode


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Minimal timer interface: one-shot delayed calls and next-tick calls."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Cancellable: ...

    def call_soon(self, callback: Callable[[], Any]) -> None: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Cancellable:
        return self.loop.call_later(delay, callback)

    def call_soon(self, callback: Callable[[], Any]) -> None:
        self.loop.call_soon(callback)


class _TimerHandle:
    def __init__(self, timer: Any) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class TextualScheduler:
    """Scheduler that delegates to a mounted Textual node's timers."""

    def __init__(self, node: DOMNode) -> None:
        self._node = node

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Cancellable:
        return _TimerHandle(self._node.set_timer(delay, callback))

    def call_soon(self, callback: Callable[[], Any]) -> None:
        self._node.call_after_refresh(callback)
