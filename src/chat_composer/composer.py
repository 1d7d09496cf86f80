"""Composer state machine: buffer, selection, attachments, and mode."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging

from .config import ComposerSettings
from .managers.attachment import (
    Attachment,
    AttachmentPicker,
    AttachmentStore,
    ImageNormalizer,
    TextDecoder,
)
from .managers.paste import PasteClassifier, PasteDecision, PasteEvent
from .managers.resize import ResizeScheduler
from .managers.selection import SelectionTracker
from .media import FileSource, encode_image, read_text_file
from .scheduling import AsyncioScheduler, Scheduler
from .shortcuts import KeyStroke, ShortcutBinding, ShortcutRegistry, Subscription
from .state import CompositionMode, Selection
from .task_manager import TaskManager
from .view import ComposerView, DetachedView

LOGGER = logging.getLogger(__name__)

SendMessage = Callable[[str, list[Attachment]], None]
CancelSend = Callable[[], None]

EXPAND_SHORTCUT_KEY = "e"


class Composer:
    """Own the draft buffer and orchestrate every edit made to it.

    The buffer is the single source of truth; the attached ``ComposerView``
    is pushed the new text after every mutation. Anything that has to wait
    (debounced resizes, caret repositioning after an insert) goes through
    the ``Scheduler``; asynchronous ingestion goes through the ``TaskManager``.
    """

    def __init__(
        self,
        send_message: SendMessage,
        cancel_send: CancelSend,
        *,
        settings: ComposerSettings | None = None,
        view: ComposerView | None = None,
        scheduler: Scheduler | None = None,
        tasks: TaskManager | None = None,
        normalize_image: ImageNormalizer = encode_image,
        decode_text_file: TextDecoder = read_text_file,
    ) -> None:
        self.settings = settings or ComposerSettings()
        self._send_message = send_message
        self._cancel_send = cancel_send
        self.view: ComposerView = view or DetachedView()
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.tasks = tasks or TaskManager()

        self._text = ""
        self._selection = Selection()
        self._mode = CompositionMode.COLLAPSED
        self._loading = False
        self._listeners: list[Callable[[], None]] = []
        self._subscription: Subscription | None = None

        self.attachments = AttachmentStore(
            self.settings.maximum_image_attachments_per_message
        )
        self.attachments.on_change(self._notify)
        self.selection_tracker = SelectionTracker(self.view)
        self.resizer = ResizeScheduler(
            self.view,
            self.scheduler,
            max_rows=self.settings.maximum_rows,
            delay=self.settings.resize_debounce_seconds,
            is_expanded=lambda: self.is_expanded,
        )
        self.paste_classifier = PasteClassifier(
            self.attachments,
            self.tasks,
            self.settings,
            normalize_image=normalize_image,
            insert_text=self.insert_at_cursor,
        )
        self.picker = AttachmentPicker(
            self.attachments,
            self.tasks,
            self.settings,
            normalize_image=normalize_image,
            decode_text_file=decode_text_file,
            insert_text=self.insert_at_cursor,
        )
        self.shortcut = ShortcutBinding.for_platform(EXPAND_SHORTCUT_KEY)

    # -- Observable state ----------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def mode(self) -> CompositionMode:
        return self._mode

    @property
    def is_expanded(self) -> bool:
        return self._mode is CompositionMode.EXPANDED

    @property
    def is_empty(self) -> bool:
        return self._text.strip() == ""

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def can_submit(self) -> bool:
        """Whether the submit affordance should be enabled."""
        return not self._loading and not self.is_empty

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after every state change."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback()

    def attach_view(self, view: ComposerView, scheduler: Scheduler | None = None) -> None:
        """Bind the composer to a live widget and push the current state into it."""
        self.view = view
        self.selection_tracker.view = view
        self.resizer.view = view
        if scheduler is not None:
            self.scheduler = scheduler
            self.resizer.scheduler = scheduler
        view.show_text(self._text)
        view.apply_selection(self._selection)
        self.resizer.request()

    # -- Lifecycle -----------------------------------------------------------

    def mount(self, shortcuts: ShortcutRegistry) -> Subscription:
        """Register the expand/collapse shortcut for as long as we are mounted."""
        self.unmount()
        self._subscription = shortcuts.subscribe(self.shortcut, self.toggle_expanded)
        return self._subscription

    def unmount(self) -> None:
        self.resizer.cancel()
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None

    # -- Buffer mutations ----------------------------------------------------

    def _commit(self, text: str, selection: Selection) -> None:
        self._text = text
        self._selection = selection.clamp(len(text))
        self.selection_tracker.remember(self._selection)
        self.view.show_text(text)
        self.view.apply_selection(self._selection)
        self._notify()

    def set_text(self, value: str) -> None:
        """Replace the whole buffer; the caret moves to the end."""
        self._commit(value, Selection.caret(len(value)))
        self.resizer.request()

    def insert_at_cursor(self, text: str) -> None:
        """Replace the current selection with *text* and put the caret after it."""
        start, end = self._selection.start, self._selection.end
        updated = self._text[:start] + text + self._text[end:]
        caret = Selection.caret(start + len(text))
        self._commit(updated, caret)
        self.resizer.request()
        self.scheduler.call_soon(lambda: self._settle_caret(caret))

    def _settle_caret(self, caret: Selection) -> None:
        if self._selection != caret:
            return
        self.view.apply_selection(caret)
        self.resizer.scroll_if_overflowing()

    def on_input(self, value: str, selection: Selection | None = None) -> None:
        """Record an edit the host widget already applied (typing, native paste)."""
        self._text = value
        if selection is None:
            selection = Selection.caret(len(value))
        self._selection = selection.clamp(len(value))
        self.selection_tracker.remember(self._selection)
        self._notify()
        self.resizer.request()
        self.resizer.scroll_if_overflowing()

    def on_selection_changed(self, selection: Selection) -> None:
        self._selection = selection.clamp(len(self._text))
        self.selection_tracker.remember(self._selection)

    def clear(self) -> None:
        """Empty buffer and attachments and drop the input's undo history."""
        self.attachments.clear()
        self._commit("", Selection())
        self.view.reset_undo_history()
        self.resizer.request()

    # -- Submit / cancel -----------------------------------------------------

    def set_loading(self, loading: bool) -> None:
        if self._loading == loading:
            return
        self._loading = loading
        self._notify()

    def submit(self) -> None:
        """Hand the draft to the send callback, then reset and collapse."""
        self.selection_tracker.capture()
        text = self._text
        attachments = (
            self.attachments.snapshot() if self.settings.forward_attachments else []
        )
        LOGGER.info(
            "composer.submit",
            extra={
                "event": "composer.submit",
                "length": len(text),
                "attachments": len(attachments),
            },
        )
        self._send_message(text, attachments)
        self.clear()
        self.selection_tracker.remember(Selection())
        self._set_mode(CompositionMode.COLLAPSED)
        self._refocus()

    def cancel(self) -> None:
        """Abort the outstanding send; the draft is left untouched."""
        if not self._loading:
            return
        LOGGER.info("composer.cancel", extra={"event": "composer.cancel"})
        self._cancel_send()
        self.set_loading(False)
        self._set_mode(CompositionMode.COLLAPSED)

    def handle_key(self, stroke: KeyStroke) -> bool:
        """Dispatch Enter variants; return True when the stroke was consumed."""
        if stroke.key != "enter":
            return False
        if stroke.shift or self._loading:
            self.insert_at_cursor("\n")
            return True
        self.submit()
        return True

    # -- Paste and pick ------------------------------------------------------

    def paste(self, event: PasteEvent) -> PasteDecision:
        """Classify a clipboard paste and apply it."""
        self.on_selection_changed(self.selection_tracker.capture())
        return self.paste_classifier.classify(event)

    def pick_files(self, files: Iterable[FileSource]) -> int:
        """Ingest files chosen in a file dialog."""
        return self.picker.pick(files)

    def remove_attachment(self, index: int) -> Attachment | None:
        return self.attachments.remove(index)

    @property
    def pending_attachments(self) -> Sequence[Attachment]:
        return self.attachments.snapshot()

    # -- Expanded mode -------------------------------------------------------

    def _set_mode(self, mode: CompositionMode) -> None:
        if self._mode is mode:
            return
        self._mode = mode
        self.view.set_page_scroll_locked(mode is CompositionMode.EXPANDED)
        LOGGER.debug(
            "composer.mode",
            extra={"event": "composer.mode", "mode": mode.value},
        )
        self._notify()
        self.resizer.request()

    def _refocus(self) -> None:
        self.scheduler.call_soon(
            lambda: self.selection_tracker.restore(len(self._text))
        )

    def expand(self) -> None:
        self.on_selection_changed(self.selection_tracker.capture())
        self._set_mode(CompositionMode.EXPANDED)
        self._refocus()

    def collapse(self) -> None:
        self.on_selection_changed(self.selection_tracker.capture())
        self._set_mode(CompositionMode.COLLAPSED)
        self._refocus()

    def toggle_expanded(self) -> None:
        if self.is_expanded:
            self.collapse()
        else:
            self.expand()

    # -- Imperative handle ---------------------------------------------------

    def clear_input_value(self) -> None:
        self.clear()

    def get_text_value(self) -> str:
        return self._text

    def reset(self) -> None:
        self.clear()

    def resize_text_area(self) -> None:
        self.resizer.resize_now()

    def focus_textarea(self) -> None:
        self._refocus()

    def paste_text(self, text: str) -> None:
        self.insert_at_cursor(text)
