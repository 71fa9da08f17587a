"""Single-flight send pipeline.

The session snapshot and its transitions are pure functions of
`(state, event) -> state`; `SendPipeline` drives them around the one
suspension point, the resolver call.

States: Idle <-> Sending. A submit while Sending is rejected, not queued.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..config import GENERIC_FAILURE_REPLY, GREETING
from ..resolver import ResponseResolver
from .models import EMPTY_DRAFT, Draft, Speaker
from .timeline import MessageTimeline

logger = logging.getLogger(__name__)

SUBMIT_KEY = "enter"


class SendPhase(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


class SessionState(BaseModel):
    """Snapshot of one widget session.

    `sending` is the single-flight gate: while it is set no submit is accepted
    and the editing surface is disabled.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    timeline: MessageTimeline = Field(default_factory=MessageTimeline)
    draft: Draft = Field(default=EMPTY_DRAFT)
    sending: bool = False

    @property
    def phase(self) -> SendPhase:
        return SendPhase.SENDING if self.sending else SendPhase.IDLE


def initial_state(greeting: str = GREETING) -> SessionState:
    """New session seeded with the bot greeting."""
    return SessionState(timeline=MessageTimeline().append(Speaker.BOT, greeting))


def with_draft(state: SessionState, draft: Draft) -> SessionState:
    return state.model_copy(update={"draft": draft})


def can_submit(state: SessionState) -> bool:
    return not state.sending and not state.draft.is_blank


def begin_send(state: SessionState) -> tuple[SessionState, str | None]:
    """Idle -> Sending.

    Returns:
        The new state and the trimmed query, or the unchanged state and None
        when the guard rejects the submit
    """
    if not can_submit(state):
        return state, None

    query = state.draft.text.strip()
    timeline = state.timeline.append(Speaker.USER, query, state.draft.html or None)
    return SessionState(timeline=timeline, draft=EMPTY_DRAFT, sending=True), query


def complete_send(state: SessionState, reply: str) -> SessionState:
    """Sending -> Idle with the bot reply appended."""
    if not state.sending:
        raise RuntimeError("complete_send called while idle")
    return state.model_copy(update={
        "timeline": state.timeline.append(Speaker.BOT, reply),
        "sending": False,
    })


class SendPipeline:
    """Owns the SessionState and runs the validate -> lock -> resolve -> unlock cycle.

    Example:
        pipeline = SendPipeline(resolver, initial_state())
        pipeline.set_draft(Draft(html="hi", text="hi"))
        await pipeline.submit()
    """

    def __init__(
        self,
        resolver: ResponseResolver,
        state: SessionState | None = None,
        on_state: Callable[[SessionState], None] | None = None,
        clear_surface: Callable[[], None] | None = None,
    ) -> None:
        self._resolver = resolver
        self._state = state if state is not None else initial_state()
        self._on_state = on_state
        self._clear_surface = clear_surface
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def resolver(self) -> ResponseResolver:
        return self._resolver

    @resolver.setter
    def resolver(self, resolver: ResponseResolver) -> None:
        """Swap the resolver; an in-flight call finishes on the old one."""
        self._resolver = resolver

    def _set(self, state: SessionState) -> None:
        self._state = state
        if self._on_state is not None:
            self._on_state(state)

    def set_draft(self, draft: Draft) -> None:
        if draft != self._state.draft:
            self._set(with_draft(self._state, draft))

    async def submit(self) -> bool:
        """Submit the current draft.

        Returns:
            False if the submit was rejected (blank draft or already sending)
        """
        state, query = begin_send(self._state)
        if query is None:
            logger.debug("Submit rejected (sending=%s)", self._state.sending)
            return False

        self._set(state)
        if self._clear_surface is not None:
            self._clear_surface()

        reply = GENERIC_FAILURE_REPLY
        try:
            reply = await self._resolver.resolve(query)
        finally:
            self._set(complete_send(self._state, reply))
        return True

    def trigger(self) -> asyncio.Task:
        """Start a submit as a background task on the running loop."""
        task = asyncio.get_running_loop().create_task(self.submit())
        self._tasks.add(task)
        task.add_done_callback(self._forget)
        return task

    def _forget(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background submit failed", exc_info=task.exception())

    def handle_key(self, key: str, shift: bool = False) -> asyncio.Task | None:
        """Enter without Shift submits; ignored while sending.

        Returns:
            The submit task when the key was consumed, else None
        """
        if key != SUBMIT_KEY or shift or self._state.sending:
            return None
        return self.trigger()

    async def drain(self) -> None:
        """Wait for background submits to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel background submits (widget teardown)."""
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
