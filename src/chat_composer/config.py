"""Configuration loading and validation for the chat composer."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import tomllib
from typing import Any, Literal

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .constants import (
    MAX_IMAGE_ATTACHMENTS_PER_MESSAGE,
    MAX_ROWS,
    OVERSIZED_CHARS_PER_ROW,
    RESIZE_DEBOUNCE_MS,
    SNIPPET_MARKERS,
    SnippetMarkers,
)
from .exceptions import ConfigValidationError

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "chat-composer"
CONFIG_PATH = CONFIG_DIR / "config.toml"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

ImagePolicy = Literal["yes", "no", "warn"]


class AppConfig(BaseModel):
    """Application metadata."""

    title: str = "Chat Composer"

    @field_validator("title", mode="before")
    @classmethod
    def _validate_non_empty_string(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Expected a string value.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("String value must not be empty.")
        return normalized


class ComposerConfig(BaseModel):
    """Composer limits, paste heuristics, and snippet markers."""

    allow_image_attachment: ImagePolicy = "yes"
    maximum_rows: int = Field(default=MAX_ROWS, ge=1, le=500)
    maximum_image_attachments_per_message: int = Field(
        default=MAX_IMAGE_ATTACHMENTS_PER_MESSAGE, ge=0, le=100
    )
    snippet_begin_marker: str = SNIPPET_MARKERS.begin
    snippet_end_marker: str = SNIPPET_MARKERS.end
    resize_debounce_ms: int = Field(default=RESIZE_DEBOUNCE_MS, ge=0, le=5000)
    oversized_chars_per_row: int = Field(default=OVERSIZED_CHARS_PER_ROW, ge=1, le=1000)

    @field_validator("allow_image_attachment", mode="before")
    @classmethod
    def _normalize_policy(cls, value: Any) -> str:
        if isinstance(value, bool):
            return "yes" if value else "no"
        if not isinstance(value, str):
            raise ValueError("allow_image_attachment must be 'yes', 'no' or 'warn'.")
        return value.strip().lower()

    @field_validator("snippet_begin_marker", "snippet_end_marker", mode="before")
    @classmethod
    def _validate_marker(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Snippet markers must be strings.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("Snippet markers must not be empty.")
        if "\n" in normalized:
            raise ValueError("Snippet markers must fit on a single line.")
        return normalized

    @model_validator(mode="after")
    def _validate_distinct_markers(self) -> ComposerConfig:
        begin = self.snippet_begin_marker
        end = self.snippet_end_marker
        if begin == end or begin in end or end in begin:
            raise ValueError("Snippet begin and end markers must not overlap.")
        return self


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/chat-composer/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    app: AppConfig = AppConfig()
    composer: ComposerConfig = ComposerConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


@dataclass(frozen=True)
class ComposerSettings:
    """Runtime view of the ``[composer]`` section consumed by the managers."""

    allow_image_attachment: ImagePolicy = "yes"
    maximum_rows: int = MAX_ROWS
    maximum_image_attachments_per_message: int = MAX_IMAGE_ATTACHMENTS_PER_MESSAGE
    markers: SnippetMarkers = field(default_factory=SnippetMarkers)
    resize_debounce_seconds: float = RESIZE_DEBOUNCE_MS / 1000
    oversized_chars_per_row: int = OVERSIZED_CHARS_PER_ROW

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ComposerSettings:
        """Build settings from a validated config dict (see ``load_config``)."""
        section = ComposerConfig.model_validate(config.get("composer", {}))
        return cls(
            allow_image_attachment=section.allow_image_attachment,
            maximum_rows=section.maximum_rows,
            maximum_image_attachments_per_message=(
                section.maximum_image_attachments_per_message
            ),
            markers=SnippetMarkers(
                begin=section.snippet_begin_marker, end=section.snippet_end_marker
            ),
            resize_debounce_seconds=section.resize_debounce_ms / 1000,
            oversized_chars_per_row=section.oversized_chars_per_row,
        )

    @property
    def images_allowed(self) -> bool:
        """Image paste/pick ingestion is enabled for ``yes`` and ``warn``."""
        return self.allow_image_attachment != "no"

    @property
    def forward_attachments(self) -> bool:
        """Only ``yes`` forwards attachments to the send callback."""
        return self.allow_image_attachment == "yes"

    @property
    def oversized_length(self) -> int:
        return self.oversized_chars_per_row * self.maximum_rows


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _enforce_private_permissions(path: Path) -> None:
    """Best-effort enforcement of private file permissions on POSIX systems."""
    if os.name != "posix" or not path.exists():
        return
    try:
        path.chmod(0o600)
    except OSError as exc:
        LOGGER.warning("Unable to enforce 0600 permissions for %s: %s", path, exc)


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        config = Config.model_validate(raw)
        return config.model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    The optional ``config_path`` argument is intended for tests and tooling.
    """
    target_path = config_path or CONFIG_PATH
    ensure_config_dir(target_path.parent)

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        _enforce_private_permissions(target_path)
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (
            Exception
        ) as exc:  # noqa: BLE001 - we must not crash on invalid user config.
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    merged = (
        _deep_merge(DEFAULT_CONFIG, raw_data)
        if isinstance(raw_data, dict)
        else _safe_default_config()
    )
    return _validate_config(merged)
