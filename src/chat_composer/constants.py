"""Composer-wide defaults shared by config, managers, and widgets."""

from __future__ import annotations

from dataclasses import dataclass

MAX_ROWS = 20
MAX_IMAGE_ATTACHMENTS_PER_MESSAGE = 10
OVERSIZED_CHARS_PER_ROW = 80
RESIZE_DEBOUNCE_MS = 100

IMAGE_MIME_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/tiff",
)

TEXT_MIME_TYPES: tuple[str, ...] = (
    "text/plain",
    "text/markdown",
    "text/csv",
    "text/html",
    "text/css",
    "text/xml",
    "text/javascript",
    "text/x-python",
    "application/json",
    "application/xml",
    "application/x-yaml",
)

PASTED_IMAGE_FILENAME = "pasted-image"


@dataclass(frozen=True)
class SnippetMarkers:
    """Sentinel pair delimiting a verbatim block inside the buffer."""

    begin: str = "----BEGIN-SNIPPET----"
    end: str = "----END-SNIPPET----"


SNIPPET_MARKERS = SnippetMarkers()
