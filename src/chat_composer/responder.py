"""Local stand-in for the send collaborator used by the demo app."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Sequence

from .constants import SNIPPET_MARKERS, SnippetMarkers
from .managers.attachment import Attachment
from .snippets import Snippet, split_snippets


def describe_message(
    text: str,
    attachments: Sequence[Attachment],
    markers: SnippetMarkers = SNIPPET_MARKERS,
) -> str:
    """Summarize what a submitted message contained."""
    segments = split_snippets(text, markers)
    snippets = sum(1 for segment in segments if isinstance(segment, Snippet))
    prose = len(segments) - snippets
    return (
        f"Received {len(text)} characters: {prose} prose section(s), "
        f"{snippets} snippet(s), {len(attachments)} attachment(s)."
    )


class EchoResponder:
    """Stream a short acknowledgement back one word at a time."""

    def __init__(
        self, *, delay_seconds: float = 0.05, markers: SnippetMarkers = SNIPPET_MARKERS
    ) -> None:
        self.delay_seconds = delay_seconds
        self.markers = markers

    async def stream(
        self, text: str, attachments: Sequence[Attachment]
    ) -> AsyncGenerator[str, None]:
        words = describe_message(text, attachments, self.markers).split(" ")
        for index, word in enumerate(words):
            await asyncio.sleep(self.delay_seconds)
            yield word if index == 0 else f" {word}"
