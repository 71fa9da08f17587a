"""Tests for the session controller, host lifecycle and configuration."""
import asyncio

import httpx
import pytest
from pydantic import SecretStr, ValidationError

from insightchat.config import (
    ENV_API_KEY,
    ENV_ENDPOINT,
    ENV_LIKE_ENDPOINT,
    GENERIC_FAILURE_REPLY,
    GREETING,
    GREETING_REPLY,
    HELP_REPLY,
    LogLevel,
    WidgetConfig,
)
from insightchat.session import (
    ChatSession,
    ChatWidget,
    ClipboardPayload,
    MemorySurface,
    Reaction,
    Speaker,
)

ENDPOINT = "https://chat.test/api"


class TestWidgetConfig:
    """Tests for configuration loading and credential masking."""

    def test_defaults(self):
        config = WidgetConfig()
        assert config.credential is None
        assert config.masked_key is None
        assert config.heuristic_delay == 0.5
        assert config.copy_reset_delay == 2.0
        assert config.remote_timeout is None
        assert config.greeting == GREETING

    def test_masked_key_shows_last_four(self):
        config = WidgetConfig(api_key="sk-abcdef1234")
        assert config.masked_key == "****1234"
        assert "sk-abcdef1234" not in repr(config)

    def test_blank_key_is_no_credential(self):
        assert WidgetConfig(api_key="").credential is None

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            WidgetConfig(heuristic_delay=-1)

    def test_frozen(self):
        config = WidgetConfig()
        with pytest.raises(ValidationError):
            config.endpoint = "x"

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv(ENV_API_KEY, "env-key-9876")
        monkeypatch.setenv(ENV_ENDPOINT, ENDPOINT)
        monkeypatch.setenv(ENV_LIKE_ENDPOINT, "https://feedback.test/like")

        config = WidgetConfig.from_env(heuristic_delay=0.0, api_key=None)

        assert config.credential == "env-key-9876"
        assert config.endpoint == ENDPOINT
        assert config.like_endpoint == "https://feedback.test/like"
        assert config.heuristic_delay == 0.0

    def test_from_env_override_wins(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv(ENV_API_KEY, "env-key")
        assert WidgetConfig.from_env(api_key="cli-key").credential == "cli-key"

    @pytest.mark.parametrize("text, level", [
        ("debug", LogLevel.DEBUG),
        ("INFO", LogLevel.INFO),
        ("Warning", LogLevel.WARNING),
        ("error", LogLevel.ERROR),
        (" bogus ", LogLevel.DEBUG),
    ])
    def test_log_level_parse(self, text, level):
        assert LogLevel.parse(text) == level

    def test_log_level_label(self):
        assert LogLevel.label(LogLevel.WARNING) == "WARNING"
        assert LogLevel.label(5) == "LEVEL 5"


class TestChatSession:
    """End-to-end tests of the wired session."""

    def test_seeded_with_greeting(self, session):
        assert len(session.messages) == 1
        assert session.messages[0].speaker is Speaker.BOT
        assert session.messages[0].text == GREETING
        assert not session.sending

    @pytest.mark.asyncio
    async def test_typed_message_round_trip(self, session, surface):
        surface.type_text("hello")
        session.on_edit()
        assert session.draft.text == "hello"

        assert await session.submit()

        assert [m.text for m in session.messages] == [GREETING, "hello", GREETING_REPLY]
        assert surface.markup == ""
        assert session.draft.text == ""
        assert not session.sending

    @pytest.mark.asyncio
    async def test_rich_message_keeps_markup(self, session, surface):
        surface.type_text("<b>I need</b> help")
        session.on_edit()
        await session.submit()

        user = session.messages[1]
        assert user.text == "I need help"
        assert user.html == "<b>I need</b> help"
        assert session.messages[2].text == HELP_REPLY

    @pytest.mark.asyncio
    async def test_paste_then_enter(self, session, surface):
        session.on_paste(ClipboardPayload(text="line one\nline two"))
        await asyncio.sleep(0)
        assert session.draft.text == "line one\nline two"

        task = session.on_key("enter")
        await task

        assert session.messages[1].text == "line one\nline two"
        assert session.messages[1].html == "line one<br>line two"

    @pytest.mark.asyncio
    async def test_listeners_notified(self, session, surface):
        calls = []
        unsubscribe = session.subscribe(lambda: calls.append(session.sending))

        surface.type_text("hi")
        session.on_edit()
        await session.submit()
        unsubscribe()
        session.on_edit()

        assert calls == [False, True, False]

    @pytest.mark.asyncio
    async def test_callback_session(self, fast_config, clipboard):
        session = ChatSession(fast_config, callback=lambda q: f"cb:{q}", clipboard=clipboard)
        session.surface.set_markup("ping")
        session.on_edit()
        await session.submit()

        assert session.messages[-1].text == "cb:ping"
        await session.close()

    @pytest.mark.asyncio
    async def test_failing_remote_call_appends_one_reply(
        self, fast_config, clipboard, make_client, recording_transport
    ):
        transport = recording_transport(error=httpx.ConnectError("connection refused"))
        config = fast_config.model_copy(update={"api_key": SecretStr("k"), "endpoint": ENDPOINT})
        async with make_client(transport) as client:
            session = ChatSession(config, clipboard=clipboard, http_client=client)
            session.surface.set_markup("question")
            session.on_edit()
            assert await session.submit()
            await session.close()

        assert [m.text for m in session.messages] == [GREETING, "question", GENERIC_FAILURE_REPLY]
        assert not session.sending
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_copy_and_like_by_index(self, session, clipboard):
        assert session.copy(0)
        assert clipboard.writes == [GREETING]
        assert session.feedback_for(0).copied

        assert await session.like(0)
        assert session.feedback_for(0).status is Reaction.UP
        await session.close()

    @pytest.mark.asyncio
    async def test_credential_swap_rebuilds_resolver(self, session, fast_config):
        assert session.resolver.select().name == "heuristic"

        updated = fast_config.model_copy(update={"api_key": SecretStr("new-key"), "endpoint": ENDPOINT})
        await session.apply_config(updated)

        assert session.resolver.select().name == "remote"
        await session.close()

    @pytest.mark.asyncio
    async def test_unrelated_config_keeps_resolver(self, session, fast_config):
        resolver = session.resolver
        await session.apply_config(fast_config.model_copy(update={"title": "Other"}))
        assert session.resolver is resolver

    @pytest.mark.asyncio
    async def test_feedback_endpoint_enables_notifier(self, session, fast_config):
        assert session.feedback.notifier is None
        await session.apply_config(fast_config.model_copy(update={"like_endpoint": "https://feedback.test/like"}))
        assert session.feedback.notifier is not None
        await session.close()


class TestChatWidget:
    """Tests for the init/render/dispose lifecycle and view projection."""

    def test_session_requires_init(self):
        widget = ChatWidget()
        assert not widget.is_initialized
        with pytest.raises(RuntimeError):
            widget.session

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, fast_config, clipboard):
        widget = ChatWidget(clipboard=clipboard)
        first = widget.init(fast_config)
        assert widget.init(fast_config) is first
        await widget.dispose()
        assert not widget.is_initialized

    @pytest.mark.asyncio
    async def test_initial_view(self, fast_config, clipboard):
        widget = ChatWidget(clipboard=clipboard)
        widget.init(fast_config)
        view = await widget.render()

        assert view.title == "Insights Assistant"
        assert [m.text for m in view.messages] == [GREETING]
        assert view.messages[0].interactive
        assert view.status_text == "Ready"
        assert view.send_label == "Send"
        assert not view.send_enabled
        assert view.input_enabled
        assert not view.show_typing
        assert view.key_note is None
        await widget.dispose()

    @pytest.mark.asyncio
    async def test_view_while_sending(self, fast_config, clipboard):
        release = asyncio.Event()

        async def slow(query: str) -> str:
            await release.wait()
            return "late"

        surface = MemorySurface()
        widget = ChatWidget(callback=slow, surface=surface, clipboard=clipboard)
        session = widget.init(fast_config)
        surface.type_text("question")
        session.on_edit()
        assert widget.view().send_enabled

        task = session.request_submit()
        await asyncio.sleep(0)
        view = widget.view()

        assert view.sending
        assert view.status_text == "Sending"
        assert view.send_label == "Sending..."
        assert not view.send_enabled
        assert not view.input_enabled
        assert view.show_typing
        assert not view.messages[1].interactive

        release.set()
        await task
        assert widget.view().messages[-1].text == "late"
        await widget.dispose()

    @pytest.mark.asyncio
    async def test_render_applies_masked_key(self, fast_config, clipboard):
        widget = ChatWidget(clipboard=clipboard)
        widget.init(fast_config)

        view = await widget.render(fast_config.model_copy(update={"api_key": SecretStr("abcd5678")}))

        assert view.key_note == "API Key set: ****5678"
        assert widget.session.resolver.select().name == "remote"
        await widget.dispose()

    @pytest.mark.asyncio
    async def test_view_reflects_feedback(self, fast_config, clipboard):
        widget = ChatWidget(clipboard=clipboard)
        session = widget.init(fast_config)
        await session.dislike(0)

        assert widget.view().messages[0].status is Reaction.DOWN
        await widget.dispose()

    @pytest.mark.asyncio
    async def test_render_does_not_mutate(self, fast_config, clipboard):
        widget = ChatWidget(clipboard=clipboard)
        session = widget.init(fast_config)
        before = session.state
        await widget.render()
        await widget.render(fast_config)
        assert session.state is before
        await widget.dispose()
