"""Host widget contract the composer renders into."""

from __future__ import annotations

from typing import Protocol

from .state import Selection


class ComposerView(Protocol):
    """Operations the composer needs from the visible input widget.

    Heights are expressed in the widget's own units (terminal rows for the
    Textual host). ``apply_height(None)`` means "fill the available space".
    """

    def show_text(self, text: str) -> None: ...

    def read_selection(self) -> Selection | None: ...

    def apply_selection(self, selection: Selection) -> None: ...

    def focus_input(self) -> None: ...

    def reset_undo_history(self) -> None: ...

    def line_height(self) -> int: ...

    def content_height(self) -> int: ...

    def viewport_height(self) -> int: ...

    def apply_height(self, height: int | None) -> None: ...

    def scroll_to_bottom(self) -> None: ...

    def set_page_scroll_locked(self, locked: bool) -> None: ...


class DetachedView:
    """View used before a widget is attached; every operation is a no-op."""

    def show_text(self, text: str) -> None:
        return None

    def read_selection(self) -> Selection | None:
        return None

    def apply_selection(self, selection: Selection) -> None:
        return None

    def focus_input(self) -> None:
        return None

    def reset_undo_history(self) -> None:
        return None

    def line_height(self) -> int:
        return 1

    def content_height(self) -> int:
        return 0

    def viewport_height(self) -> int:
        return 0

    def apply_height(self, height: int | None) -> None:
        return None

    def scroll_to_bottom(self) -> None:
        return None

    def set_page_scroll_locked(self, locked: bool) -> None:
        return None
