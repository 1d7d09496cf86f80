"""Domain exception hierarchy for the chat composer."""

from __future__ import annotations


class ComposerError(RuntimeError):
    """Base class for all composer-level errors."""


class ConfigValidationError(ComposerError):
    """Raised when configuration cannot be validated safely."""


class AttachmentDecodeError(ComposerError):
    """Raised when a picked or pasted file cannot be decoded."""


class InvalidSelectionError(ComposerError, ValueError):
    """Raised when selection offsets fall outside the buffer."""
