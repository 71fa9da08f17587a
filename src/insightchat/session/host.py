"""Host-facing widget lifecycle and the read-only render projection.

A hosting runtime drives the widget through three explicit calls:
init(config) once, render(config) on every update, dispose() on teardown.
Configuration always arrives as an argument; nothing here knows about a
particular host's object model.
"""

import logging
from collections.abc import Mapping

import httpx
from pydantic import BaseModel, ConfigDict

from ..config import (
    INPUT_PLACEHOLDER,
    SEND_LABEL,
    SEND_LABEL_BUSY,
    STATUS_READY,
    STATUS_SENDING,
    WidgetConfig,
)
from ..integrations.clipboard import Clipboard
from ..resolver import ReplyCallback
from .controller import ChatSession
from .markup import EditableSurface
from .models import FeedbackEntry, Reaction, Speaker
from .pipeline import SessionState

logger = logging.getLogger(__name__)


class MessageView(BaseModel):
    """How one message is displayed."""

    model_config = ConfigDict(frozen=True)

    index: int
    speaker: Speaker
    text: str
    html: str | None = None
    status: Reaction = Reaction.NONE
    copied: bool = False
    interactive: bool = False


class SessionView(BaseModel):
    """Everything a renderer needs, derived from the session state."""

    model_config = ConfigDict(frozen=True)

    title: str
    messages: tuple[MessageView, ...]
    draft_html: str
    draft_text: str
    sending: bool
    status_text: str
    send_label: str
    send_enabled: bool
    input_enabled: bool
    show_typing: bool
    placeholder: str = INPUT_PLACEHOLDER
    key_note: str | None = None


def project(
    state: SessionState,
    feedback: Mapping[int, FeedbackEntry],
    config: WidgetConfig,
) -> SessionView:
    """Pure projection of a session snapshot onto its view."""
    messages = []
    for message in state.timeline:
        entry = feedback.get(message.index, FeedbackEntry())
        messages.append(MessageView(
            index=message.index,
            speaker=message.speaker,
            text=message.text,
            html=message.html,
            status=entry.status,
            copied=entry.copied,
            interactive=message.is_bot,
        ))

    masked = config.masked_key
    return SessionView(
        title=config.title,
        messages=tuple(messages),
        draft_html=state.draft.html,
        draft_text=state.draft.text,
        sending=state.sending,
        status_text=STATUS_SENDING if state.sending else STATUS_READY,
        send_label=SEND_LABEL_BUSY if state.sending else SEND_LABEL,
        send_enabled=not state.sending and not state.draft.is_blank,
        input_enabled=not state.sending,
        show_typing=state.sending,
        key_note=f"API Key set: {masked}" if masked else None,
    )


class ChatWidget:
    """Lifecycle wrapper around a ChatSession.

    Example:
        widget = ChatWidget(callback=my_backend)
        widget.init(WidgetConfig())
        view = await widget.render(WidgetConfig(api_key="..."))
        await widget.dispose()
    """

    def __init__(
        self,
        callback: ReplyCallback | None = None,
        surface: EditableSurface | None = None,
        clipboard: Clipboard | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._callback = callback
        self._surface = surface
        self._clipboard = clipboard
        self._http_client = http_client
        self._session: ChatSession | None = None

    @property
    def session(self) -> ChatSession:
        if self._session is None:
            raise RuntimeError("Widget is not initialized; call init() first")
        return self._session

    @property
    def is_initialized(self) -> bool:
        return self._session is not None

    def init(self, config: WidgetConfig | None = None) -> ChatSession:
        """Create the session (mount). Calling init twice keeps the first session."""
        if self._session is None:
            self._session = ChatSession(
                config or WidgetConfig(),
                callback=self._callback,
                surface=self._surface,
                clipboard=self._clipboard,
                http_client=self._http_client,
            )
            logger.debug("Widget initialized")
        return self._session

    def view(self) -> SessionView:
        session = self.session
        return project(session.state, session.feedback.entries, session.config)

    async def render(self, config: WidgetConfig | None = None) -> SessionView:
        """Host update: apply new configuration if given and return the view."""
        session = self.session
        if config is not None and config != session.config:
            await session.apply_config(config)
        return self.view()

    async def dispose(self) -> None:
        """Tear down (unmount). The session and its transcript are discarded."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("Widget disposed")
