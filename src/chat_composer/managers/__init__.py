"""Collaborators composed by the ``Composer`` state machine.

- AttachmentStore / AttachmentPicker: pending attachments and file picks
- PasteClassifier: image ingestion and oversized-paste wrapping
- ResizeScheduler: debounced input height recomputation
- SelectionTracker: selection memory across focus loss
"""

from __future__ import annotations

from .attachment import (
    Attachment,
    AttachmentKind,
    AttachmentPicker,
    AttachmentStore,
    Provenance,
    ingest_image,
)
from .paste import PasteClassifier, PasteDecision, PasteEvent
from .resize import ResizeScheduler
from .selection import SelectionTracker

__all__ = [
    "Attachment",
    "AttachmentKind",
    "AttachmentPicker",
    "AttachmentStore",
    "PasteClassifier",
    "PasteDecision",
    "PasteEvent",
    "Provenance",
    "ResizeScheduler",
    "SelectionTracker",
    "ingest_image",
]
