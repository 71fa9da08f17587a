"""Textual application hosting one chat widget.

The app is a host like any other: it calls init on mount, render when its
configuration changes and dispose on unmount. Widgets are redrawn from the
session view after every change notification; user input is forwarded to
the session and never applied to the widgets directly.
"""

import asyncio
import contextlib

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Button, Footer, Header, TextArea

from ..config import LogLevel, WidgetConfig
from ..integrations.clipboard import Clipboard, default_clipboard
from ..resolver import ReplyCallback
from ..session.host import ChatWidget
from .callbacks import PanelLogHandler, attach_panel_handler, detach_panel_handler
from .styles import APP_CSS
from .widgets import Composer, EditorSurface, LogPanel, MarkupEditor, StatusLine, Transcript

FEEDBACK_ACTIONS = ("copy", "like", "dislike")


class ChatWidgetApp(App):
    """Terminal host for the insights chat widget."""

    CSS = APP_CSS

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+r", "copy_last_reply", "Copy reply"),
        Binding("ctrl+b", "toggle_transcript", "Transcript only"),
        Binding("ctrl+d", "toggle_log", "Log", priority=True),
    ]

    def __init__(
        self,
        config: WidgetConfig | None = None,
        callback: ReplyCallback | None = None,
        clipboard: Clipboard | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._config = config or WidgetConfig()
        self._callback = callback
        self._clipboard = clipboard
        self._log_level = log_level
        self._widget: ChatWidget | None = None
        self._log_handler: PanelLogHandler | None = None
        self.title = self._config.title

    @property
    def widget(self) -> ChatWidget:
        if self._widget is None:
            raise RuntimeError("The chat widget only exists while the app is mounted")
        return self._widget

    def compose(self) -> ComposeResult:
        yield Header()
        yield Transcript()
        yield LogPanel(
            threshold=LogLevel.parse(self._log_level or "debug"),
            visible=self._log_level is not None,
        )
        with Vertical(id="footer-area"):
            yield StatusLine()
            yield Composer()
        yield Footer()

    def on_mount(self) -> None:
        self._log_handler = attach_panel_handler(self.query_one(LogPanel), app=self)

        self._widget = ChatWidget(
            callback=self._callback,
            surface=EditorSurface(self.query_one(Composer).editor),
            clipboard=self._clipboard or default_clipboard(self.copy_to_clipboard),
        )
        session = self._widget.init(self._config)
        session.subscribe(self._redraw)
        self._redraw()
        self._show_strategy()

    async def on_unmount(self) -> None:
        # Detach first so change notifications during teardown find no widget
        widget, self._widget = self._widget, None
        if widget is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await widget.dispose()
        if self._log_handler is not None:
            detach_panel_handler(self._log_handler)
            self._log_handler = None

    def _redraw(self) -> None:
        if self._widget is None or not self._widget.is_initialized:
            return
        view = self._widget.view()
        self.query_one(Transcript).sync(view)
        self.query_one(StatusLine).sync(view)
        self.query_one(Composer).sync(view)

    def _show_strategy(self) -> None:
        self.sub_title = f"{self.widget.session.resolver.select().name} replies"

    async def apply_config(self, config: WidgetConfig) -> None:
        """Push a configuration update through the widget's render call."""
        self._config = config
        await self.widget.render(config)
        self._show_strategy()

    # -- editor events -----------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self._widget is not None and isinstance(event.text_area, MarkupEditor):
            self._widget.session.on_edit()

    def on_markup_editor_pasted(self, event: MarkupEditor.Pasted) -> None:
        if self._widget is not None:
            self._widget.session.on_paste(event.payload)

    def on_markup_editor_submit(self, event: MarkupEditor.Submit) -> None:
        if self._widget is not None:
            self._widget.session.on_key("enter")

    # -- buttons -----------------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if self._widget is None:
            return
        session = self._widget.session
        event.stop()

        if event.button.id == "send":
            session.request_submit()
            return

        action, _, index = (event.button.id or "").partition("-")
        if action not in FEEDBACK_ACTIONS or not index.isdigit():
            return
        if action == "copy":
            self._copy(int(index))
        elif action == "like":
            self.run_worker(session.like(int(index)))
        else:
            self.run_worker(session.dislike(int(index)))

    def _copy(self, index: int) -> None:
        if self.widget.session.copy(index):
            self.notify("Copied to clipboard", timeout=2)
        else:
            self.notify("Could not reach the clipboard", severity="warning", timeout=3)

    # -- key bindings ------------------------------------------------------

    def action_copy_last_reply(self) -> None:
        replies = [m for m in self.widget.session.messages if m.is_bot]
        if replies:
            self._copy(replies[-1].index)

    def action_toggle_log(self) -> None:
        shown = self.query_one(LogPanel).toggle()
        self.notify("Log shown" if shown else "Log hidden", timeout=2)

    def action_toggle_transcript(self) -> None:
        transcript = self.query_one(Transcript)
        footer_area = self.query_one("#footer-area", Vertical)
        maximized = transcript.toggle_class("-maximized").has_class("-maximized")
        footer_area.display = not maximized
        if not maximized:
            self.query_one(Composer).editor.focus()


async def run_textual_tui(
    config: WidgetConfig | None = None,
    callback: ReplyCallback | None = None,
    log_level: str | None = None,
) -> None:
    """Run the chat widget app until the user quits.

    Args:
        config: Widget configuration (credential, endpoints, delays)
        callback: Optional reply function taking precedence over everything
        log_level: Show the log panel from this level (debug/info/warning/error)
    """
    app = ChatWidgetApp(config=config, callback=callback, log_level=log_level)
    with contextlib.suppress(KeyboardInterrupt, asyncio.CancelledError):
        await app.run_async()
