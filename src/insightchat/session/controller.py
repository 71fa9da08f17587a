"""Session controller.

Wires the input synchronizer, send pipeline and feedback tracker together and
tells listeners when anything visible changed. Listeners only read.
"""

import logging
from collections.abc import Callable

import httpx

from ..config import WidgetConfig
from ..integrations.clipboard import Clipboard, default_clipboard
from ..integrations.notifier import FeedbackNotifier
from ..resolver import ReplyCallback, ResponseResolver, resolver_from_config
from .feedback import FeedbackTracker
from .markup import ClipboardPayload, EditableSurface, MemorySurface, RichInputSynchronizer
from .models import Draft, FeedbackEntry, Message, Reaction
from .pipeline import SendPipeline, SessionState, initial_state

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _resolver_settings(config: WidgetConfig) -> tuple:
    return (config.credential, config.endpoint, config.heuristic_delay, config.remote_timeout)


class ChatSession:
    """One conversation: transcript, draft and feedback for a single widget instance."""

    def __init__(
        self,
        config: WidgetConfig | None = None,
        callback: ReplyCallback | None = None,
        surface: EditableSurface | None = None,
        clipboard: Clipboard | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or WidgetConfig()
        self._callback = callback
        self._http_client = http_client
        self._listeners: list[Listener] = []
        self._retired: list[ResponseResolver] = []

        self._input = RichInputSynchronizer(surface or MemorySurface(), on_change=self._on_draft)
        self._pipeline = SendPipeline(
            self._build_resolver(self._config),
            initial_state(self._config.greeting),
            on_state=self._on_state,
            clear_surface=self._input.reset,
        )
        self._feedback = FeedbackTracker(
            clipboard or default_clipboard(),
            notifier=self._build_notifier(self._config),
            copy_reset_delay=self._config.copy_reset_delay,
            on_change=self._on_feedback,
        )

    def _build_resolver(self, config: WidgetConfig) -> ResponseResolver:
        return resolver_from_config(config, callback=self._callback, client=self._http_client)

    def _build_notifier(self, config: WidgetConfig) -> FeedbackNotifier | None:
        if not (config.like_endpoint or config.dislike_endpoint):
            return None
        return FeedbackNotifier(
            config.like_endpoint,
            config.dislike_endpoint,
            client=self._http_client,
            timeout=config.remote_timeout,
        )

    # -- read access -------------------------------------------------------

    @property
    def config(self) -> WidgetConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._pipeline.state

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._pipeline.state.timeline.messages

    @property
    def draft(self) -> Draft:
        return self._pipeline.state.draft

    @property
    def sending(self) -> bool:
        return self._pipeline.state.sending

    @property
    def surface(self) -> EditableSurface:
        return self._input.surface

    @property
    def resolver(self) -> ResponseResolver:
        return self._pipeline.resolver

    @property
    def pipeline(self) -> SendPipeline:
        return self._pipeline

    @property
    def feedback(self) -> FeedbackTracker:
        return self._feedback

    def feedback_for(self, index: int) -> FeedbackEntry:
        return self._feedback.entry(index)

    # -- change notification ----------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _on_draft(self, draft: Draft) -> None:
        self._pipeline.set_draft(draft)

    def _on_state(self, state: SessionState) -> None:
        self._notify()

    def _on_feedback(self, index: int, entry: FeedbackEntry) -> None:
        self._notify()

    # -- input surface events ----------------------------------------------

    def on_edit(self) -> Draft:
        """The surface content changed."""
        return self._input.capture()

    def on_paste(self, payload: ClipboardPayload):
        """Paste into the surface; the draft updates on the next loop tick."""
        return self._input.handle_paste(payload)

    def on_key(self, key: str, shift: bool = False):
        """Key press on the surface. Returns the submit task if Enter submitted."""
        return self._pipeline.handle_key(key, shift)

    async def submit(self) -> bool:
        """Explicit submit, awaited until the reply is appended."""
        return await self._pipeline.submit()

    def request_submit(self):
        """Send button: start a submit in the background and return its task."""
        return self._pipeline.trigger()

    # -- feedback ----------------------------------------------------------

    def _message(self, index: int) -> Message:
        return self._pipeline.state.timeline[index]

    def copy(self, index: int) -> bool:
        return self._feedback.copy(self._message(index))

    async def like(self, index: int) -> bool:
        return await self._feedback.react(self._message(index), Reaction.UP)

    async def dislike(self, index: int) -> bool:
        return await self._feedback.react(self._message(index), Reaction.DOWN)

    # -- configuration and teardown ----------------------------------------

    async def apply_config(self, config: WidgetConfig) -> None:
        """Apply a host update. A changed credential or endpoint rebuilds the resolver."""
        previous = self._config
        self._config = config

        if _resolver_settings(config) != _resolver_settings(previous):
            old = self._pipeline.resolver
            self._pipeline.resolver = self._build_resolver(config)
            logger.info("Resolver rebuilt (%s strategy)", self._pipeline.resolver.select().name)
            if self._pipeline.state.sending:
                self._retired.append(old)
            else:
                await old.close()

        if (config.like_endpoint, config.dislike_endpoint) != (
            previous.like_endpoint,
            previous.dislike_endpoint,
        ):
            old_notifier = self._feedback.notifier
            self._feedback.notifier = self._build_notifier(config)
            if old_notifier is not None:
                await old_notifier.close()

        self._notify()

    async def close(self) -> None:
        """Tear down: stop timers and background submits, close HTTP clients."""
        self._feedback.dispose()
        await self._pipeline.shutdown()
        await self._pipeline.resolver.close()
        for resolver in self._retired:
            await resolver.close()
        self._retired.clear()
        if self._feedback.notifier is not None:
            await self._feedback.notifier.close()
        self._listeners.clear()
