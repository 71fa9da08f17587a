"""Log routing into the TUI.

Hides how package log records reach the log panel while the terminal is owned
by the app. Records emitted from worker threads are marshalled onto the app's
thread before they touch the panel.
"""

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import LogPanel

PACKAGE_LOGGER = "insightchat"


class PanelLogHandler(logging.Handler):
    """Forwards records to a LogPanel; the panel applies its own threshold."""

    def __init__(self, panel: "LogPanel", app: "App | None" = None) -> None:
        super().__init__(level=logging.DEBUG)
        self.panel = panel
        self.app = app
        self._owner = threading.get_ident()

    @staticmethod
    def source(record: logging.LogRecord) -> str:
        """Logger name relative to the package, e.g. "session.pipeline"."""
        prefix = PACKAGE_LOGGER + "."
        return record.name[len(prefix):] if record.name.startswith(prefix) else record.name

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.exc_info and record.exc_info[1] is not None:
                message = f"{message}: {record.exc_info[1]!r}"
            args = (self.source(record), message, record.levelno)
            if self.app is not None and threading.get_ident() != self._owner:
                self.app.call_from_thread(self.panel.append, *args)
            else:
                self.panel.append(*args)
        except Exception:
            self.handleError(record)


def attach_panel_handler(panel: "LogPanel", app: "App | None" = None) -> PanelLogHandler:
    """Route package log records to the panel instead of stderr.

    Must be called on the app's thread.
    """
    handler = PanelLogHandler(panel, app)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.addHandler(handler)
    logger.setLevel(panel.threshold)
    logger.propagate = False
    return handler


def detach_panel_handler(handler: PanelLogHandler) -> None:
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.removeHandler(handler)
    logger.propagate = True
