"""Textual widgets that render a SessionView.

Hides widget implementation details:
- The markup editor standing in for a rich-text surface (Enter, Shift+Enter, paste)
- How transcript entries and their copy/like/dislike controls are laid out
- Status line and log panel rendering

Every widget exposes `sync(view)`; none of them reads or changes session state.
"""

import logging

from rich.markup import escape
from textual import events
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Button, Label, RichLog, Static, TextArea

from ..config import LogLevel
from ..session.host import MessageView, SessionView
from ..session.markup import BREAK_MARKER, ClipboardPayload, EditableSurface, extract_text
from ..session.models import Reaction, Speaker

LINE_BREAK_KEYS = ("shift+enter", "ctrl+j")


class MarkupEditor(TextArea):
    """Editor whose text is the draft's markup source.

    Enter asks for a submit instead of inserting a newline. Shift+Enter inserts
    a <br> marker; Ctrl+J does the same for terminals that drop the Shift
    modifier. Pastes are forwarded to the session rather than inserted here.
    """

    class Submit(Message):
        """Enter without Shift."""

    class Pasted(Message):
        """Clipboard content intercepted before the default insert."""

        def __init__(self, payload: ClipboardPayload) -> None:
            super().__init__()
            self.payload = payload

    async def _on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            event.prevent_default()
            event.stop()
            self.post_message(self.Submit())
        elif event.key in LINE_BREAK_KEYS:
            event.prevent_default()
            event.stop()
            if not self.read_only:
                self.insert(BREAK_MARKER + "\n")

    async def _on_paste(self, event: events.Paste) -> None:
        event.prevent_default()
        event.stop()
        if not self.read_only:
            self.post_message(self.Pasted(ClipboardPayload(text=event.text)))


class EditorSurface(EditableSurface):
    """EditableSurface over a MarkupEditor; the caret is the editor's cursor."""

    def __init__(self, editor: TextArea) -> None:
        self._editor = editor

    @property
    def markup(self) -> str:
        return self._editor.text

    def set_markup(self, markup: str) -> None:
        self._editor.text = markup

    def insert_markup(self, markup: str) -> None:
        self._editor.insert(markup)


class Composer(Horizontal):
    """Markup editor plus the Send button."""

    def compose(self):
        editor = MarkupEditor(id="composer-editor", show_line_numbers=False, soft_wrap=True)
        editor.highlight_cursor_line = False
        yield editor
        yield Button("Send", id="send", variant="primary", disabled=True)

    @property
    def editor(self) -> MarkupEditor:
        return self.query_one(MarkupEditor)

    def on_mount(self) -> None:
        self.editor.focus()

    def sync(self, view: SessionView) -> None:
        self.editor.read_only = not view.input_enabled
        send = self.query_one("#send", Button)
        send.label = view.send_label
        send.disabled = not view.send_enabled
        self.set_class(view.sending, "-busy")


class MessageCard(Vertical):
    """A single transcript entry. Bot entries get copy/like/dislike buttons."""

    def __init__(self, view: MessageView) -> None:
        role = "-bot" if view.speaker is Speaker.BOT else "-user"
        super().__init__(classes=f"message {role}", id=f"message-{view.index}")
        self._view = view

    def compose(self):
        view = self._view
        author = "Assistant" if view.speaker is Speaker.BOT else "You"
        yield Label(author, classes="author")
        # Rich-text user messages are shown through their text projection
        body = extract_text(view.html) if view.html else view.text
        yield Static(body, classes="body", markup=False)
        if view.interactive:
            with Horizontal(classes="controls"):
                yield Button("Copy", id=f"copy-{view.index}")
                yield Button("+1", id=f"like-{view.index}")
                yield Button("-1", id=f"dislike-{view.index}")

    def on_mount(self) -> None:
        self.sync(self._view)

    def sync(self, view: MessageView) -> None:
        self._view = view
        if not (view.interactive and self.is_mounted):
            return
        self.query_one(f"#copy-{view.index}", Button).label = "Copied" if view.copied else "Copy"
        self.query_one(f"#like-{view.index}", Button).set_class(view.status is Reaction.UP, "-chosen")
        self.query_one(f"#dislike-{view.index}", Button).set_class(view.status is Reaction.DOWN, "-chosen")


class Transcript(VerticalScroll):
    """Scrolling list of message cards followed by the typing indicator."""

    BORDER_TITLE = "Conversation"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._cards: list[MessageCard] = []

    def compose(self):
        yield Static("Assistant is typing...", id="typing")

    @property
    def card_count(self) -> int:
        return len(self._cards)

    def sync(self, view: SessionView) -> None:
        typing = self.query_one("#typing", Static)
        added = [MessageCard(message) for message in view.messages[len(self._cards):]]
        if added:
            self._cards.extend(added)
            self.mount_all(added, before=typing)

        for card, message in zip(self._cards, view.messages):
            card.sync(message)

        typing.display = view.show_typing
        self.border_subtitle = f"{len(view.messages)} messages"
        if added or view.show_typing:
            self.scroll_end(animate=False)


class StatusLine(Static):
    """Sending/Ready state and the masked credential note."""

    def sync(self, view: SessionView) -> None:
        style = "yellow" if view.sending else "green"
        text = f"[{style}]{view.status_text}[/{style}]"
        if view.key_note:
            text += f"  [dim]{escape(view.key_note)}[/dim]"
        self.update(text)


_LEVEL_STYLES = {
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}

# Colour by package area: the first segment of the source logger name
_AREA_STYLES = {
    "session": "green",
    "resolver": "magenta",
    "integrations": "blue",
    "ui": "bright_cyan",
}


class LogPanel(RichLog):
    """Trace of session activity, filtered by level.

    Hidden unless the app was started with a log level; Ctrl+D toggles it.
    """

    BORDER_TITLE = "Log"

    def __init__(self, *, threshold: int = LogLevel.DEBUG, visible: bool = False, **kwargs) -> None:
        super().__init__(markup=True, highlight=False, wrap=True, max_lines=1000, **kwargs)
        self._threshold = threshold
        self._start_visible = visible

    @property
    def threshold(self) -> int:
        return self._threshold

    @threshold.setter
    def threshold(self, level: int) -> None:
        self._threshold = level
        self._caption()

    def on_mount(self) -> None:
        self.set_visible(self._start_visible)

    def _caption(self) -> None:
        self.border_subtitle = LogLevel.label(self._threshold) if self.display else "off"

    def append(self, source: str, message: str, level: int = logging.DEBUG) -> None:
        """Write one entry unless it is below the threshold.

        Args:
            source: Logger name below the package, e.g. "session.pipeline"
            message: Already formatted message text
            level: Standard logging level of the record
        """
        if level < self._threshold:
            return
        level_style = _LEVEL_STYLES.get(level, "white")
        area_style = _AREA_STYLES.get(source.split(".", 1)[0], "white")
        self.write(
            f"[{level_style}]{LogLevel.label(level):<7}[/{level_style}] "
            f"[{area_style}]{escape(source)}[/{area_style}] {escape(message)}"
        )

    def set_visible(self, visible: bool) -> None:
        self.display = visible
        self._caption()

    def toggle(self) -> bool:
        """Flip visibility and return whether the panel is now shown."""
        self.set_visible(not self.display)
        return self.display
