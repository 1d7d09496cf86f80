"""Widget exports for the composer UI."""

from .composer_box import ComposerBox, ComposerTextArea
from .message import MessageBlock
from .user_content import UserContentBlock

__all__ = ["ComposerBox", "ComposerTextArea", "MessageBlock", "UserContentBlock"]
