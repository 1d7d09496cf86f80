"""File sources and the default image/text collaborators."""

from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass
import mimetypes
from pathlib import Path

from .constants import IMAGE_MIME_TYPES, TEXT_MIME_TYPES
from .exceptions import AttachmentDecodeError


@dataclass(frozen=True)
class FileDescriptor:
    """Name and MIME type of a normalized file."""

    name: str
    mime_type: str


@dataclass(frozen=True)
class FileSource:
    """A clipboard item or picked file, backed by bytes or a path."""

    name: str
    mime_type: str
    data: bytes | None = None
    path: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> FileSource:
        resolved = Path(path).expanduser()
        mime_type, _ = mimetypes.guess_type(resolved.name)
        return cls(
            name=resolved.name,
            mime_type=mime_type or "application/octet-stream",
            path=resolved,
        )

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image")

    @property
    def is_text(self) -> bool:
        return self.mime_type.startswith("text/") or self.mime_type in TEXT_MIME_TYPES

    async def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise AttachmentDecodeError(f"No data available for {self.name}")
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as exc:
            raise AttachmentDecodeError(f"Unable to read {self.path}: {exc}") from exc


async def encode_image(source: FileSource) -> tuple[str, FileDescriptor]:
    """Encode an image as a base64 data URL without resampling it."""
    raw = await source.read_bytes()
    mime_type = source.mime_type if source.mime_type in IMAGE_MIME_TYPES else "image/png"
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type};base64,{encoded}", FileDescriptor(source.name, mime_type)


async def read_text_file(source: FileSource) -> str:
    """Decode a text file as UTF-8."""
    raw = await source.read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AttachmentDecodeError(f"{source.name} is not valid UTF-8") from exc
