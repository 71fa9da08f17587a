"""Smoke tests for the Textual front end."""
import logging
import sys

import pytest
from textual.widgets import Button

from insightchat.config import GREETING, GREETING_REPLY
from insightchat.ui import ChatWidgetApp, Composer, LogPanel, MarkupEditor, PanelLogHandler, Transcript


async def wait_for(pilot, condition, attempts: int = 100):
    for _ in range(attempts):
        if condition():
            return True
        await pilot.pause(0.02)
    return condition()


class TestChatWidgetApp:
    """Tests driving the app through Textual's pilot."""

    @pytest.mark.asyncio
    async def test_starts_with_greeting(self, fast_config, clipboard):
        app = ChatWidgetApp(config=fast_config, clipboard=clipboard)
        async with app.run_test() as pilot:
            await pilot.pause()
            transcript = app.query_one(Transcript)

            assert transcript.card_count == 1
            assert [m.text for m in app.widget.session.messages] == [GREETING]
            assert app.query_one("#send", Button).disabled
            assert app.widget.view().status_text == "Ready"

    @pytest.mark.asyncio
    async def test_type_and_submit_with_enter(self, fast_config, clipboard):
        app = ChatWidgetApp(config=fast_config, clipboard=clipboard)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(Composer).editor.focus()
            await pilot.press("h", "i")
            assert await wait_for(pilot, lambda: app.widget.session.draft.text == "hi")
            assert not app.query_one("#send", Button).disabled

            await pilot.press("enter")
            session = app.widget.session
            assert await wait_for(pilot, lambda: len(session.messages) == 3 and not session.sending)

            assert [m.text for m in session.messages] == [GREETING, "hi", GREETING_REPLY]
            assert app.query_one(MarkupEditor).text == ""
            assert await wait_for(
                pilot, lambda: app.query_one(Transcript).card_count == 3
            )

    @pytest.mark.asyncio
    async def test_copy_button_uses_clipboard(self, fast_config, clipboard):
        app = ChatWidgetApp(config=fast_config, clipboard=clipboard)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one("#copy-0", Button).press()

            assert await wait_for(pilot, lambda: clipboard.writes == [GREETING])
            assert await wait_for(pilot, lambda: str(app.query_one("#copy-0", Button).label) == "Copied")

    @pytest.mark.asyncio
    async def test_like_button_sets_status(self, fast_config, clipboard):
        app = ChatWidgetApp(config=fast_config, clipboard=clipboard)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one("#like-0", Button).press()

            assert await wait_for(pilot, lambda: app.widget.session.feedback_for(0).status.value == "up")
            assert await wait_for(pilot, lambda: app.query_one("#like-0", Button).has_class("-chosen"))

    @pytest.mark.asyncio
    async def test_log_panel_starts_visible_and_toggles(self, fast_config, clipboard):
        app = ChatWidgetApp(config=fast_config, clipboard=clipboard, log_level="debug")
        async with app.run_test() as pilot:
            await pilot.pause()
            panel = app.query_one(LogPanel)
            assert panel.display

            await pilot.press("ctrl+d")
            assert not panel.display

            await pilot.press("ctrl+d")
            assert panel.display

        assert logging.getLogger("insightchat").propagate


class RecordingPanel:
    """Stands in for LogPanel outside an app."""

    def __init__(self):
        self.entries = []

    def append(self, source, message, level):
        self.entries.append((source, message, level))


class TestPanelLogHandler:
    """Tests for routing log records into the panel."""

    def test_forwards_source_and_level(self):
        panel = RecordingPanel()
        logger = logging.getLogger("insightchat.session.pipeline")
        logger.setLevel(logging.DEBUG)
        handler = PanelLogHandler(panel)
        logger.addHandler(handler)
        try:
            logger.warning("Submit %s", "rejected")
        finally:
            logger.removeHandler(handler)

        assert panel.entries == [("session.pipeline", "Submit rejected", logging.WARNING)]

    def test_exception_is_appended(self):
        panel = RecordingPanel()
        handler = PanelLogHandler(panel)
        try:
            raise KeyError("boom")
        except KeyError:
            record = logging.getLogger("insightchat.resolver.chain").makeRecord(
                "insightchat.resolver.chain", logging.ERROR, __file__, 1, "Strategy failed", (), sys.exc_info()
            )
        handler.emit(record)

        source, message, level = panel.entries[0]
        assert source == "resolver.chain"
        assert message.startswith("Strategy failed: KeyError")
        assert level == logging.ERROR
