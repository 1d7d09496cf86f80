"""Debounced height recomputation for the input."""

from __future__ import annotations

from collections.abc import Callable
import logging

from ..scheduling import Cancellable, Scheduler
from ..view import ComposerView

LOGGER = logging.getLogger(__name__)


class ResizeScheduler:
    """Collapse bursts of resize requests into one recomputation.

    While expanded the input fills the available space. While collapsed it
    grows with its content up to ``max_rows`` lines, then scrolls internally.
    """

    def __init__(
        self,
        view: ComposerView,
        scheduler: Scheduler,
        *,
        max_rows: int,
        delay: float,
        is_expanded: Callable[[], bool],
    ) -> None:
        self.view = view
        self.scheduler = scheduler
        self.max_rows = max_rows
        self.delay = delay
        self._is_expanded = is_expanded
        self._pending: Cancellable | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self) -> None:
        """Schedule a recomputation, replacing any pending one."""
        self.cancel()
        self._pending = self.scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self) -> None:
        self._pending = None
        self.resize_now()

    def resize_now(self) -> int | None:
        """Recompute immediately; return the applied height (None = fill)."""
        if self._is_expanded():
            self.view.apply_height(None)
            return None
        max_height = self.view.line_height() * self.max_rows
        natural = self.view.content_height()
        height = natural if natural <= max_height else max_height
        self.view.apply_height(height)
        self.scroll_if_overflowing()
        LOGGER.debug(
            "composer.resize",
            extra={"event": "composer.resize", "height": height, "natural": natural},
        )
        return height

    def scroll_if_overflowing(self) -> bool:
        """Keep the caret visible after large inserts."""
        if self.view.content_height() > self.view.viewport_height():
            self.view.scroll_to_bottom()
            return True
        return False
