"""Read-only rendering of a sent user message."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.markdown import Markdown
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widget import Widget
from textual.widgets import Collapsible, Static

from ..constants import SNIPPET_MARKERS, SnippetMarkers
from ..managers.attachment import Attachment
from ..snippets import Segment, Snippet, split_snippets


def snippet_title(snippet: Snippet) -> str:
    """Collapsed header for a foldable snippet."""
    lines = snippet.text.count("\n") + 1 if snippet.text else 0
    first = snippet.text.split("\n", 1)[0].strip()
    if len(first) > 40:
        first = first[:37] + "..."
    noun = "line" if lines == 1 else "lines"
    return f"{first or 'Snippet'} ({lines} {noun})"


def render_segment(segment: Segment) -> Widget:
    """Build the widget for one parsed segment."""
    if isinstance(segment, Snippet):
        return Collapsible(
            Static(Text(segment.text), classes="snippet-body"),
            title=snippet_title(segment),
            collapsed=True,
            classes="snippet",
        )
    return Static(Markdown(segment.text), classes="prose-segment")


class UserContentBlock(Vertical):
    """Attachments summary followed by prose and foldable snippet sections."""

    DEFAULT_CSS = """
    UserContentBlock {
        height: auto;
    }
    UserContentBlock > .attachments {
        color: $text-muted;
        height: auto;
    }
    UserContentBlock > .prose-segment {
        height: auto;
    }
    UserContentBlock > .snippet {
        height: auto;
    }
    """

    def __init__(
        self,
        text: str,
        attachments: Sequence[Attachment] = (),
        markers: SnippetMarkers = SNIPPET_MARKERS,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.text = text
        self.attachments = list(attachments)
        self.segments = split_snippets(text, markers)

    def compose(self) -> ComposeResult:
        if self.attachments:
            names = ", ".join(attachment.filename for attachment in self.attachments)
            yield Static(Text(f"Attachments: {names}"), classes="attachments")
        for segment in self.segments:
            yield render_segment(segment)

