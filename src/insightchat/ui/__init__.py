"""Terminal front end for insightchat.

A Textual app acting as the host of one chat widget.

Module structure (each module hides a design decision):
- widgets.py: Widgets rendering a SessionView (markup editor, message cards, log panel)
- styles.py: Layout and styling
- callbacks.py: How package log records reach the log panel
- app.py: Host lifecycle and forwarding of user input to the session
"""

from .app import ChatWidgetApp, run_textual_tui
from .callbacks import PanelLogHandler
from .widgets import (
    Composer,
    EditorSurface,
    LogPanel,
    MarkupEditor,
    MessageCard,
    StatusLine,
    Transcript,
)

__all__ = [
    "ChatWidgetApp",
    "Composer",
    "EditorSurface",
    "LogPanel",
    "MarkupEditor",
    "MessageCard",
    "PanelLogHandler",
    "StatusLine",
    "Transcript",
    "run_textual_tui",
]
