"""Demo Textual application hosting the composer."""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from pathlib import Path
import shlex
from typing import Any

from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.events import Key
from textual.widgets import Footer, Header

from .composer import Composer
from .config import ComposerSettings, load_config
from .logging_utils import configure_logging
from .managers.attachment import Attachment
from .media import FileSource
from .responder import EchoResponder
from .screens import PathPromptScreen
from .shortcuts import KeyStroke, ShortcutRegistry
from .widgets.composer_box import ComposerBox
from .widgets.message import MessageBlock

LOGGER = logging.getLogger(__name__)


def parse_path_list(value: str) -> list[FileSource]:
    """Turn a shell-quoted list of paths into existing file sources."""
    try:
        tokens = shlex.split(value)
    except ValueError:
        tokens = value.split()
    sources: list[FileSource] = []
    for token in tokens:
        path = Path(token).expanduser()
        if path.is_file():
            sources.append(FileSource.from_path(path))
        else:
            LOGGER.warning(
                "app.pick.missing",
                extra={"event": "app.pick.missing", "path": str(path)},
            )
    return sources


class ComposerApp(App[None]):
    """Chat-style shell: message history above, composer below."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #history {
        height: 1fr;
        padding: 1;
    }

    Screen.-composer-expanded #history {
        display: none;
    }

    ComposerBox {
        padding: 0 1 1 1;
        border-top: solid $panel;
        background: $surface;
    }
    """

    def __init__(
        self,
        config_path: Path | None = None,
        responder: EchoResponder | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.config = load_config(config_path)
        configure_logging(self.config["logging"])
        self.title = self.config["app"]["title"]
        self.settings = ComposerSettings.from_config(self.config)
        self.shortcuts = ShortcutRegistry()
        self.responder = responder or EchoResponder(markers=self.settings.markers)
        self.composer = Composer(
            self._send_message, self._cancel_send, settings=self.settings
        )
        self._reply_task: asyncio.Task[None] | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(id="history")
        yield ComposerBox(self.composer, id="composer")
        yield Footer()

    def on_mount(self) -> None:
        self.composer.focus_textarea()

    def on_key(self, event: Key) -> None:
        if self.shortcuts.dispatch(KeyStroke.parse(event.key)):
            event.stop()
            event.prevent_default()

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _send_message(self, text: str, attachments: list[Attachment]) -> None:
        history = self.query_one("#history", VerticalScroll)
        history.mount(
            MessageBlock(
                text,
                "user",
                timestamp=self._timestamp(),
                attachments=attachments,
                markers=self.settings.markers,
            )
        )
        reply = MessageBlock("", "assistant", timestamp=self._timestamp())
        history.mount(reply)
        history.scroll_end(animate=False)
        self.composer.set_loading(True)
        self._reply_task = asyncio.create_task(
            self._stream_reply(text, attachments, reply)
        )

    async def _stream_reply(
        self, text: str, attachments: list[Attachment], bubble: MessageBlock
    ) -> None:
        try:
            async for chunk in self.responder.stream(text, attachments):
                bubble.append_content(chunk)
        except asyncio.CancelledError:
            bubble.append_content(" _(cancelled)_")
            raise
        finally:
            self.composer.set_loading(False)
            self._reply_task = None

    def _cancel_send(self) -> None:
        if self._reply_task is not None and not self._reply_task.done():
            self._reply_task.cancel()

    def on_composer_box_pick_requested(self, _message: ComposerBox.PickRequested) -> None:
        self.push_screen(
            PathPromptScreen(self.composer.picker.accepted_mime_types()),
            callback=self._on_paths_chosen,
        )

    def _on_paths_chosen(self, value: str | None) -> None:
        if value:
            self.composer.pick_files(parse_path_list(value))
        self.composer.focus_textarea()
