"""Composition mode and selection value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidSelectionError


class CompositionMode(str, Enum):
    """Persistent UI mode of the composer."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


@dataclass(frozen=True)
class Selection:
    """Half-open ``[start, end)`` offsets into the buffer."""

    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise InvalidSelectionError(
                f"Selection offsets must be non-negative, got {self.start}..{self.end}"
            )
        if self.start > self.end:
            raise InvalidSelectionError(
                f"Selection start {self.start} is after end {self.end}"
            )

    @classmethod
    def caret(cls, offset: int) -> Selection:
        """Return a collapsed selection at *offset*."""
        return cls(offset, offset)

    @classmethod
    def spanning(cls, anchor: int, head: int) -> Selection:
        """Build a selection from two offsets in either order."""
        return cls(min(anchor, head), max(anchor, head))

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end

    def clamp(self, length: int) -> Selection:
        """Coerce both offsets into a buffer of *length* characters."""
        return Selection(min(self.start, length), min(self.end, length))

    def validate_for(self, length: int) -> None:
        """Raise when the selection does not fit a buffer of *length*."""
        if self.end > length:
            raise InvalidSelectionError(
                f"Selection end {self.end} exceeds buffer length {length}"
            )
