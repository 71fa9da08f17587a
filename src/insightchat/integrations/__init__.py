"""External collaborators of the chat session.

- clipboard.py: scoped clipboard writes (platform command, pyperclip, OSC 52)
- notifier.py: best-effort feedback notification endpoint client
"""

from .clipboard import (
    CallableClipboard,
    Clipboard,
    CommandClipboard,
    FallbackClipboard,
    PyperclipClipboard,
    default_clipboard,
)
from .notifier import FeedbackNotifier

__all__ = [
    "CallableClipboard",
    "Clipboard",
    "CommandClipboard",
    "FallbackClipboard",
    "FeedbackNotifier",
    "PyperclipClipboard",
    "default_clipboard",
]
