"""Message block widget for the conversation history."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.markdown import Markdown
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from ..constants import SNIPPET_MARKERS, SnippetMarkers
from ..managers.attachment import Attachment
from .user_content import UserContentBlock


class MessageBlock(Vertical):
    """Render one chat message with role header and optional timestamp.

    User messages go through ``UserContentBlock`` so snippets fold; assistant
    messages are plain markdown that can grow while a reply streams in.
    """

    DEFAULT_CSS = """
    MessageBlock {
        height: auto;
        margin-bottom: 1;
    }
    MessageBlock > #header-block {
        padding: 0;
    }
    MessageBlock > #content-block {
        height: auto;
    }
    """

    def __init__(
        self,
        content: str,
        role: str,
        timestamp: str = "",
        attachments: Sequence[Attachment] = (),
        markers: SnippetMarkers = SNIPPET_MARKERS,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.message_content = content
        self.role = role
        self.timestamp = timestamp
        self.attachments = list(attachments)
        self.markers = markers
        self.add_class(f"role-{role}")
        self._content_widget: Static | None = None

    @property
    def role_prefix(self) -> str:
        return "You" if self.role == "user" else "Assistant"

    def _compose_header(self) -> str:
        if self.timestamp:
            return f"**{self.role_prefix}**  _{self.timestamp}_"
        return f"**{self.role_prefix}**"

    def compose(self) -> ComposeResult:
        yield Static(Markdown(self._compose_header()), id="header-block")
        if self.role == "user":
            yield UserContentBlock(
                self.message_content, self.attachments, self.markers
            )
        else:
            self._content_widget = Static("", id="content-block")
            yield self._content_widget

    def on_mount(self) -> None:
        self._refresh_content()

    def _refresh_content(self) -> None:
        if self._content_widget is None:
            return
        text = self.message_content.rstrip()
        self._content_widget.update(Markdown(text) if text else "")

    def set_content(self, content: str) -> None:
        self.message_content = content
        self._refresh_content()

    def append_content(self, content_chunk: str) -> None:
        self.message_content += content_chunk
        self._refresh_content()
