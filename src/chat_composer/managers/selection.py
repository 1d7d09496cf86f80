"""Selection memory across focus loss."""

from __future__ import annotations

from ..state import Selection
from ..view import ComposerView


class SelectionTracker:
    """Remember the last known selection so focus can be restored exactly.

    Modal screens and mode switches steal focus from the input; the tracker
    keeps the offsets the user had before that happened.
    """

    def __init__(self, view: ComposerView) -> None:
        self.view = view
        self.last = Selection()

    def capture(self) -> Selection:
        """Read the live selection from the view, if it has one."""
        live = self.view.read_selection()
        if live is not None:
            self.last = live
        return self.last

    def remember(self, selection: Selection) -> None:
        self.last = selection

    def restore(self, length: int) -> Selection:
        """Focus the input and put back the remembered selection."""
        self.last = self.last.clamp(length)
        self.view.focus_input()
        self.view.apply_selection(self.last)
        return self.last
