"""Keystroke model and the process-wide shortcut registry."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import sys

LOGGER = logging.getLogger(__name__)

_MODIFIERS = {"ctrl", "shift", "meta", "super", "alt"}


def is_mac_platform(platform: str | None = None) -> bool:
    return (platform or sys.platform) == "darwin"


@dataclass(frozen=True)
class KeyStroke:
    """A key press with its modifier state."""

    key: str
    ctrl: bool = False
    shift: bool = False
    meta: bool = False
    alt: bool = False

    @classmethod
    def parse(cls, name: str) -> KeyStroke:
        """Parse a Textual-style key name such as ``ctrl+shift+e``."""
        parts = [part for part in name.split("+") if part]
        if not parts:
            return cls(key="")
        mods = {part.lower() for part in parts[:-1] if part.lower() in _MODIFIERS}
        key = parts[-1]
        shift = "shift" in mods
        if len(key) == 1 and key.isalpha() and key.isupper():
            shift = True
        return cls(
            key=key.lower(),
            ctrl="ctrl" in mods,
            shift=shift,
            meta="meta" in mods or "super" in mods,
            alt="alt" in mods,
        )


@dataclass(frozen=True)
class ShortcutBinding:
    """Platform modifier (Meta on macOS, Ctrl elsewhere) + optional Shift + key."""

    key: str
    shift: bool = True
    mac: bool = False

    @classmethod
    def for_platform(cls, key: str, *, shift: bool = True) -> ShortcutBinding:
        return cls(key=key.lower(), shift=shift, mac=is_mac_platform())

    @property
    def label(self) -> str:
        if self.mac:
            return f"⌘{'⇧' if self.shift else ''}{self.key.upper()}"
        return f"Ctrl+{'Shift+' if self.shift else ''}{self.key.upper()}"

    def matches(self, stroke: KeyStroke) -> bool:
        modifier = stroke.meta if self.mac else stroke.ctrl
        return modifier and stroke.shift == self.shift and stroke.key == self.key


class Subscription:
    """Handle returned by ``ShortcutRegistry.subscribe``; release exactly once."""

    def __init__(self, registry: ShortcutRegistry, token: int) -> None:
        self._registry = registry
        self._token = token
        self.active = True

    def release(self) -> None:
        if not self.active:
            return
        self.active = False
        self._registry._unsubscribe(self._token)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class ShortcutRegistry:
    """Keyboard shortcuts that fire regardless of which widget has focus.

    Owned by the host application; components subscribe on mount and release
    their subscription on unmount.
    """

    def __init__(self) -> None:
        self._handlers: dict[int, tuple[ShortcutBinding, Callable[[], None]]] = {}
        self._next_token = 0

    def __len__(self) -> int:
        return len(self._handlers)

    def subscribe(
        self, binding: ShortcutBinding, handler: Callable[[], None]
    ) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._handlers[token] = (binding, handler)
        return Subscription(self, token)

    def _unsubscribe(self, token: int) -> None:
        self._handlers.pop(token, None)

    def dispatch(self, stroke: KeyStroke) -> bool:
        """Run every handler bound to *stroke*; return True if any matched."""
        matched = False
        for binding, handler in list(self._handlers.values()):
            if binding.matches(stroke):
                matched = True
                LOGGER.debug(
                    "shortcuts.dispatch",
                    extra={"event": "shortcuts.dispatch", "shortcut": binding.label},
                )
                handler()
        return matched
