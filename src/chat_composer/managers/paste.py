"""Paste classification: image ingestion, oversized-text wrapping, pass-through."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from ..media import FileSource
from ..snippets import has_marker, wrap_snippet
from .attachment import AttachmentStore, ImageNormalizer, Provenance, ingest_image

if TYPE_CHECKING:
    from ..config import ComposerSettings
    from ..task_manager import TaskManager

LOGGER = logging.getLogger(__name__)


class PasteDecision(str, Enum):
    """Whether the host should run its native paste."""

    DEFAULT = "default"
    SUPPRESS = "suppress"


@dataclass(frozen=True)
class PasteEvent:
    """Clipboard payload delivered by the host.

    ``text`` is ``None`` when the host could not read the clipboard.
    """

    text: str | None
    items: Sequence[FileSource] = field(default_factory=tuple)


class PasteClassifier:
    """Decide what a paste does to the buffer and the attachment store."""

    def __init__(
        self,
        store: AttachmentStore,
        tasks: TaskManager,
        settings: ComposerSettings,
        *,
        normalize_image: ImageNormalizer,
        insert_text: Callable[[str], None],
    ) -> None:
        self.store = store
        self.tasks = tasks
        self.settings = settings
        self._normalize_image = normalize_image
        self._insert_text = insert_text

    def is_oversized(self, text: str) -> bool:
        """Large or many-line pastes are folded into a snippet."""
        return (
            text.count("\n") >= self.settings.maximum_rows
            or len(text) > self.settings.oversized_length
        )

    def classify(self, event: PasteEvent) -> PasteDecision:
        decision = PasteDecision.DEFAULT

        for item in event.items:
            if not item.is_image or not self.settings.images_allowed:
                continue
            decision = PasteDecision.SUPPRESS
            self.tasks.spawn(self._ingest(item), name=f"paste-image:{item.name}")

        text = event.text
        if not text:
            return decision

        if has_marker(text, self.settings.markers):
            return decision

        if self.is_oversized(text):
            LOGGER.info(
                "composer.paste.wrapped",
                extra={
                    "event": "composer.paste.wrapped",
                    "length": len(text),
                    "newlines": text.count("\n"),
                },
            )
            self._insert_text(wrap_snippet(text, self.settings.markers))
            return PasteDecision.SUPPRESS
        return decision

    async def _ingest(self, item: FileSource) -> None:
        added = await ingest_image(
            self.store, self._normalize_image, item, Provenance.PASTED
        )
        if added and self.settings.allow_image_attachment == "warn":
            LOGGER.warning(
                "attachments.image_not_forwarded",
                extra={
                    "event": "attachments.image_not_forwarded",
                    "file_name": item.name,
                },
            )
