"""Pending attachments and the file-picker ingestion path."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

from ..constants import IMAGE_MIME_TYPES, PASTED_IMAGE_FILENAME, TEXT_MIME_TYPES
from ..exceptions import AttachmentDecodeError
from ..media import FileDescriptor, FileSource
from ..snippets import wrap_file

if TYPE_CHECKING:
    from ..config import ComposerSettings
    from ..task_manager import TaskManager

LOGGER = logging.getLogger(__name__)

ImageNormalizer = Callable[[FileSource], Awaitable[tuple[str, FileDescriptor]]]
TextDecoder = Callable[[FileSource], Awaitable[str]]


class AttachmentKind(str, Enum):
    IMAGE = "image"
    TEXT = "text"


class Provenance(str, Enum):
    PASTED = "pasted"
    PICKED = "picked"


@dataclass(frozen=True)
class Attachment:
    """A file waiting to be sent with the next message."""

    kind: AttachmentKind
    payload: str
    mime_type: str
    provenance: Provenance
    filename: str
    id: str = field(default_factory=lambda: uuid4().hex)


class AttachmentStore:
    """Ordered pending attachments with a per-message image cap.

    Adding an image once the cap is reached is a silent no-op: nothing is
    queued and nothing is raised.
    """

    def __init__(self, max_images: int) -> None:
        self.max_images = max_images
        self._items: list[Attachment] = []
        self._listeners: list[Callable[[], None]] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Attachment]:
        return iter(list(self._items))

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after every mutation."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback()

    @property
    def image_count(self) -> int:
        return sum(1 for item in self._items if item.kind is AttachmentKind.IMAGE)

    @property
    def is_full(self) -> bool:
        """True when no further image attachment would be accepted."""
        return self.image_count >= self.max_images

    def add(self, attachment: Attachment) -> bool:
        """Append *attachment*; return False when it was dropped by the cap."""
        if attachment.kind is AttachmentKind.IMAGE and self.is_full:
            LOGGER.debug(
                "attachments.cap_reached",
                extra={
                    "event": "attachments.cap_reached",
                    "file_name": attachment.filename,
                    "max_images": self.max_images,
                },
            )
            return False
        self._items.append(attachment)
        self._notify()
        return True

    def remove(self, index: int) -> Attachment | None:
        """Remove and return the attachment at *index*, if any."""
        if not 0 <= index < len(self._items):
            return None
        removed = self._items.pop(index)
        self._notify()
        return removed

    def clear(self) -> None:
        """Discard all pending attachments."""
        if not self._items:
            return
        self._items.clear()
        self._notify()

    def snapshot(self) -> list[Attachment]:
        """Return a copy that later mutations will not affect."""
        return list(self._items)


async def ingest_image(
    store: AttachmentStore,
    normalize_image: ImageNormalizer,
    source: FileSource,
    provenance: Provenance,
) -> bool:
    """Normalize *source* and append it to *store*.

    Pasted images keep the generic ``pasted-image`` filename; picked ones use
    the normalized descriptor's name.
    """
    if store.is_full:
        LOGGER.debug(
            "attachments.cap_reached",
            extra={"event": "attachments.cap_reached", "file_name": source.name},
        )
        return False
    try:
        encoded, descriptor = await normalize_image(source)
    except AttachmentDecodeError as exc:
        LOGGER.error(
            "attachments.decode_failed",
            extra={
                "event": "attachments.decode_failed",
                "file_name": source.name,
                "reason": str(exc),
            },
        )
        return False
    filename = (
        PASTED_IMAGE_FILENAME if provenance is Provenance.PASTED else descriptor.name
    )
    return store.add(
        Attachment(
            kind=AttachmentKind.IMAGE,
            payload=encoded,
            mime_type=descriptor.mime_type,
            provenance=provenance,
            filename=filename,
        )
    )


class AttachmentPicker:
    """Ingest user-picked files.

    Images become attachments with ``picked`` provenance. Text files are
    decoded and inserted at the cursor wrapped as a ``File: <name>:``
    snippet. Anything else is ignored.
    """

    def __init__(
        self,
        store: AttachmentStore,
        tasks: TaskManager,
        settings: ComposerSettings,
        *,
        normalize_image: ImageNormalizer,
        decode_text_file: TextDecoder,
        insert_text: Callable[[str], None],
    ) -> None:
        self.store = store
        self.tasks = tasks
        self.settings = settings
        self._normalize_image = normalize_image
        self._decode_text_file = decode_text_file
        self._insert_text = insert_text

    def accepted_mime_types(self) -> list[str]:
        """MIME types offered by the file dialog."""
        images = list(IMAGE_MIME_TYPES) if self.settings.images_allowed else []
        return images + list(TEXT_MIME_TYPES)

    def pick(self, files: Iterable[FileSource]) -> int:
        """Dispatch ingestion for each picked file; return how many were accepted."""
        dispatched = 0
        for source in files:
            if source.is_image:
                if not self.settings.images_allowed:
                    LOGGER.debug(
                        "attachments.images_disabled",
                        extra={
                            "event": "attachments.images_disabled",
                            "file_name": source.name,
                        },
                    )
                    continue
                if self.store.is_full:
                    continue
                self.tasks.spawn(
                    self._ingest_image(source), name=f"pick-image:{source.name}"
                )
                dispatched += 1
            elif source.is_text:
                self.tasks.spawn(
                    self._ingest_text(source), name=f"pick-text:{source.name}"
                )
                dispatched += 1
            else:
                LOGGER.debug(
                    "attachments.unsupported_type",
                    extra={
                        "event": "attachments.unsupported_type",
                        "file_name": source.name,
                        "mime_type": source.mime_type,
                    },
                )
        return dispatched

    async def _ingest_image(self, source: FileSource) -> None:
        added = await ingest_image(
            self.store, self._normalize_image, source, Provenance.PICKED
        )
        if added and self.settings.allow_image_attachment == "warn":
            LOGGER.warning(
                "attachments.image_not_forwarded",
                extra={
                    "event": "attachments.image_not_forwarded",
                    "file_name": source.name,
                },
            )

    async def _ingest_text(self, source: FileSource) -> None:
        try:
            content = await self._decode_text_file(source)
        except AttachmentDecodeError as exc:
            LOGGER.error(
                "attachments.decode_failed",
                extra={
                    "event": "attachments.decode_failed",
                    "file_name": source.name,
                    "reason": str(exc),
                },
            )
            return
        self._insert_text(wrap_file(source.name, content, self.settings.markers))
