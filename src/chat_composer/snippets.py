"""Snippet wrapping and segmentation for composer buffers.

The composer wraps oversized pastes and picked text files between a pair of
snippet markers. ``split_snippets`` is the read-side inverse used when a stored
message is rendered: it turns the raw buffer back into alternating prose and
foldable snippet segments.

The wrapping format is ``BEGIN + "\\n" + body + "\\n" + END + "\\n"``. The
newline right after each marker and right before the end marker belong to the
marker framing, so ``split_snippets(wrap_snippet(body))`` is ``[Snippet(body)]``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import SNIPPET_MARKERS, SnippetMarkers


@dataclass(frozen=True)
class Prose:
    """Plain text rendered as markdown."""

    text: str


@dataclass(frozen=True)
class Snippet:
    """Verbatim block rendered as a foldable section."""

    text: str


Segment = Prose | Snippet


def wrap_snippet(body: str, markers: SnippetMarkers = SNIPPET_MARKERS) -> str:
    """Wrap *body* between the snippet markers."""
    return f"{markers.begin}\n{body}\n{markers.end}\n"


def wrap_file(
    filename: str, content: str, markers: SnippetMarkers = SNIPPET_MARKERS
) -> str:
    """Wrap decoded file content with a ``File: <name>:`` caption."""
    return f"File: {filename}:\n{wrap_snippet(content, markers)}"


def has_marker(text: str, markers: SnippetMarkers = SNIPPET_MARKERS) -> bool:
    """Return True when *text* already contains either marker verbatim."""
    return markers.begin in text or markers.end in text


def _strip_one(text: str, *, leading: bool = False, trailing: bool = False) -> str:
    if leading and text.startswith("\n"):
        text = text[1:]
    if trailing and text.endswith("\n"):
        text = text[:-1]
    return text


def split_snippets(
    text: str, markers: SnippetMarkers = SNIPPET_MARKERS
) -> list[Segment]:
    """Split *text* into ordered prose and snippet segments.

    Never raises: an unterminated begin marker degrades the remainder of that
    piece to prose, and text without any marker comes back as one prose
    segment. Empty prose pieces are dropped.
    """
    segments: list[Segment] = []

    def _prose(content: str) -> None:
        if content:
            segments.append(Prose(content))

    for index, piece in enumerate(text.split(markers.begin)):
        if index == 0 and markers.end not in piece:
            _prose(piece)
            continue

        end_index = piece.find(markers.end)
        if end_index == -1:
            _prose(piece)
            continue

        # A first piece carrying a stray end marker had no begin marker before it.
        body = piece[:end_index]
        if index > 0:
            body = _strip_one(body, leading=True, trailing=True)
        segments.append(Snippet(body))

        remaining = piece[end_index + len(markers.end) :]
        _prose(_strip_one(remaining, leading=True))
    return segments
