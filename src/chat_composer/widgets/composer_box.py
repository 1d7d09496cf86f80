"""Textual host for the composer: text area, attachment chips, buttons, preview."""

from __future__ import annotations

import logging
import os
from typing import Any

from rich.markdown import Markdown
from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Static, TextArea
from textual.widgets.text_area import Selection as TextAreaSelection

from ..composer import Composer
from ..managers.paste import PasteDecision, PasteEvent
from ..media import FileSource
from ..scheduling import TextualScheduler
from ..shortcuts import KeyStroke
from ..state import Selection

LOGGER = logging.getLogger(__name__)

# Border rows added around the text area's content height.
_CHROME_ROWS = 2


def offset_to_location(text: str, offset: int) -> tuple[int, int]:
    """Convert a flat buffer offset into a ``(row, column)`` location."""
    before = text[:offset]
    row = before.count("\n")
    return row, offset - (before.rfind("\n") + 1)


def location_to_offset(text: str, location: tuple[int, int]) -> int:
    """Convert a ``(row, column)`` location into a flat buffer offset."""
    lines = text.split("\n")
    row = max(0, min(location[0], len(lines) - 1))
    column = max(0, min(location[1], len(lines[row])))
    return sum(len(line) + 1 for line in lines[:row]) + column


def extract_image_paths(text: str) -> list[FileSource]:
    """Treat a paste made only of existing image paths as dropped image files."""
    sources: list[FileSource] = []
    for token in text.strip().split():
        cleaned = token.strip().strip("'\"")
        if cleaned.startswith("file://"):
            cleaned = cleaned[len("file://") :]
        expanded = os.path.expanduser(cleaned)
        if not cleaned or not os.path.isfile(expanded):
            return []
        source = FileSource.from_path(expanded)
        if not source.is_image:
            return []
        sources.append(source)
    return sources


class ComposerTextArea(TextArea):
    """Text area that routes Enter and paste through the composer."""

    def __init__(self, composer: Composer, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.composer = composer

    async def _on_key(self, event: events.Key) -> None:
        if event.key in ("enter", "shift+enter"):
            event.stop()
            event.prevent_default()
            self.composer.handle_key(KeyStroke.parse(event.key))

    async def _on_paste(self, event: events.Paste) -> None:
        items = extract_image_paths(event.text) if event.text else []
        decision = self.composer.paste(PasteEvent(text=event.text, items=items))
        if decision is PasteDecision.SUPPRESS:
            event.stop()
            event.prevent_default()


class AttachmentChip(Button):
    """Removable label for one pending attachment."""

    def __init__(self, label: str, index: int) -> None:
        super().__init__(f"✕ {label}", classes="attachment-chip")
        self.index = index


class ComposerBox(Vertical):
    """Composer region; implements ``ComposerView`` for the state machine."""

    DEFAULT_CSS = """
    ComposerBox {
        height: auto;
    }
    ComposerBox.-expanded {
        height: 1fr;
    }
    ComposerBox > #attachment-row {
        height: auto;
    }
    ComposerBox > #editor-row {
        height: auto;
    }
    ComposerBox.-expanded > #editor-row {
        height: 1fr;
    }
    ComposerBox #message_input {
        width: 1fr;
        height: 3;
    }
    ComposerBox #preview {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
        border-left: solid $panel;
        overflow-y: auto;
    }
    ComposerBox > #button-row {
        height: auto;
    }
    ComposerBox .hidden {
        display: none;
    }
    """

    class PickRequested(Message):
        """Posted when the user clicks the attach button."""

    def __init__(self, composer: Composer, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.composer = composer
        self._input: ComposerTextArea | None = None
        self._preview: Static | None = None
        self._attachment_ids: tuple[str, ...] = ()

    def compose(self) -> ComposeResult:
        yield Horizontal(id="attachment-row", classes="hidden")
        with Horizontal(id="editor-row"):
            self._input = ComposerTextArea(self.composer, id="message_input")
            yield self._input
            self._preview = Static("", id="preview", classes="hidden")
            yield self._preview
        with Horizontal(id="button-row"):
            yield Button("Attach", id="attach_button")
            yield Button(self._expand_label(), id="expand_button")
            yield Button("Send", id="send_button", variant="success", disabled=True)
            yield Button("Stop", id="stop_button", variant="error", classes="hidden")

    def on_mount(self) -> None:
        self.composer.on_change(self._refresh)
        self.composer.attach_view(self, TextualScheduler(self))
        shortcuts = getattr(self.app, "shortcuts", None)
        if shortcuts is not None:
            self.composer.mount(shortcuts)
        self._refresh()

    def on_unmount(self) -> None:
        self.composer.unmount()

    @property
    def text_area(self) -> ComposerTextArea:
        if self._input is None:
            self._input = self.query_one("#message_input", ComposerTextArea)
        return self._input

    # -- ComposerView --------------------------------------------------------

    def show_text(self, text: str) -> None:
        if self.text_area.text != text:
            self.text_area.load_text(text)

    def read_selection(self) -> Selection | None:
        text = self.text_area.text
        start, end = self.text_area.selection
        return Selection.spanning(
            location_to_offset(text, start), location_to_offset(text, end)
        )

    def apply_selection(self, selection: Selection) -> None:
        text = self.text_area.text
        self.text_area.selection = TextAreaSelection(
            offset_to_location(text, selection.start),
            offset_to_location(text, selection.end),
        )

    def focus_input(self) -> None:
        self.text_area.focus()

    def reset_undo_history(self) -> None:
        history = getattr(self.text_area, "history", None)
        if history is not None:
            history.clear()

    def line_height(self) -> int:
        return 1

    def content_height(self) -> int:
        wrapped = getattr(self.text_area, "wrapped_document", None)
        if wrapped is not None:
            return int(wrapped.height)
        return self.text_area.document.line_count

    def viewport_height(self) -> int:
        return self.text_area.scrollable_content_region.height

    def apply_height(self, height: int | None) -> None:
        if height is None:
            self.text_area.styles.height = "1fr"
        else:
            self.text_area.styles.height = max(height, 1) + _CHROME_ROWS

    def scroll_to_bottom(self) -> None:
        self.text_area.scroll_end(animate=False)

    def set_page_scroll_locked(self, locked: bool) -> None:
        self.screen.set_class(locked, "-composer-expanded")

    # -- Events --------------------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        selection = self.read_selection()
        if event.text_area.text == self.composer.text:
            if selection is not None:
                self.composer.on_selection_changed(selection)
            return
        self.composer.on_input(event.text_area.text, selection)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        event.stop()
        selection = self.read_selection()
        if selection is not None and event.text_area.text == self.composer.text:
            self.composer.on_selection_changed(selection)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if isinstance(event.button, AttachmentChip):
            self.composer.remove_attachment(event.button.index)
            return
        button_id = event.button.id
        if button_id == "attach_button":
            self.post_message(self.PickRequested())
        elif button_id == "expand_button":
            self.composer.toggle_expanded()
        elif button_id == "send_button":
            if not self.composer.loading:
                self.composer.submit()
        elif button_id == "stop_button":
            self.composer.cancel()

    # -- Rendering -----------------------------------------------------------

    def _expand_label(self) -> str:
        verb = "Collapse" if self.composer.is_expanded else "Expand"
        return f"{verb} ({self.composer.shortcut.label})"

    def _refresh(self) -> None:
        if not self.is_mounted:
            return
        composer = self.composer
        expanded = composer.is_expanded
        self.set_class(expanded, "-expanded")
        self.text_area.show_line_numbers = expanded

        preview = self._preview or self.query_one("#preview", Static)
        preview.set_class(not expanded, "hidden")
        if expanded:
            preview.update(Markdown(composer.text) if composer.text else "")

        self.query_one("#expand_button", Button).label = self._expand_label()
        self.query_one("#send_button", Button).disabled = not composer.can_submit
        self.query_one("#send_button", Button).set_class(composer.loading, "hidden")
        self.query_one("#stop_button", Button).set_class(not composer.loading, "hidden")
        self._refresh_attachments()

    def _refresh_attachments(self) -> None:
        row = self.query_one("#attachment-row", Horizontal)
        attachments = self.composer.pending_attachments
        ids = tuple(attachment.id for attachment in attachments)
        if ids == self._attachment_ids:
            return
        self._attachment_ids = ids
        row.remove_children()
        row.set_class(not attachments, "hidden")
        if attachments:
            row.mount(
                *(
                    AttachmentChip(attachment.filename, index)
                    for index, attachment in enumerate(attachments)
                )
            )
