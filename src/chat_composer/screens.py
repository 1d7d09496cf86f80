"""Modal screens used by the composer host."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, Static


class PathPromptScreen(ModalScreen[str | None]):
    """Modal screen asking for one or more file paths to attach."""

    CSS = """
    PathPromptScreen {
        align: center middle;
    }

    #path-prompt-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #path-prompt-title {
        padding-bottom: 1;
        text-style: bold;
    }

    #path-prompt-types {
        color: $text-muted;
        padding-bottom: 1;
    }

    #path-prompt-input {
        width: 100%;
        margin-bottom: 1;
    }
    """

    def __init__(self, accepted_mime_types: list[str]) -> None:
        super().__init__()
        self._accepted = accepted_mime_types

    def compose(self) -> ComposeResult:
        with Container(id="path-prompt-dialog"):
            yield Static("Attach files", id="path-prompt-title")
            yield Static(
                "Accepted: " + ", ".join(self._accepted), id="path-prompt-types"
            )
            yield Input(
                placeholder="~/notes.md ~/screenshot.png",
                id="path-prompt-input",
            )
            yield Static("Enter to confirm | Esc to cancel", id="path-prompt-help")

    def on_mount(self) -> None:
        self.query_one("#path-prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "path-prompt-input":
            return
        value = event.value.strip()
        self.dismiss(value if value else "")

    def on_key(self, event: Any) -> None:  # noqa: ANN401
        if str(getattr(event, "key", "")).lower() == "escape":
            self.dismiss(None)
