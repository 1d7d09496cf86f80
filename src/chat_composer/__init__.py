"""Top-level package for chat-composer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import ComposerApp
    from .composer import Composer
    from .config import ComposerSettings, ensure_config_dir, load_config
    from .exceptions import (
        AttachmentDecodeError,
        ComposerError,
        ConfigValidationError,
        InvalidSelectionError,
    )
    from .snippets import Prose, Snippet, split_snippets, wrap_snippet
    from .state import CompositionMode, Selection

__all__ = [
    "AttachmentDecodeError",
    "Composer",
    "ComposerApp",
    "ComposerError",
    "ComposerSettings",
    "CompositionMode",
    "ConfigValidationError",
    "InvalidSelectionError",
    "Prose",
    "Selection",
    "Snippet",
    "ensure_config_dir",
    "load_config",
    "split_snippets",
    "wrap_snippet",
]

_EXCEPTIONS = {
    "AttachmentDecodeError",
    "ComposerError",
    "ConfigValidationError",
    "InvalidSelectionError",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep the Textual UI optional at import time."""
    if name == "Composer":
        from .composer import Composer

        return Composer
    if name in {"ComposerSettings", "ensure_config_dir", "load_config"}:
        from . import config

        return getattr(config, name)
    if name in _EXCEPTIONS:
        from . import exceptions

        return getattr(exceptions, name)
    if name in {"Prose", "Snippet", "split_snippets", "wrap_snippet"}:
        from . import snippets

        return getattr(snippets, name)
    if name in {"CompositionMode", "Selection"}:
        from . import state

        return getattr(state, name)
    if name == "ComposerApp":
        from .app import ComposerApp

        return ComposerApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
