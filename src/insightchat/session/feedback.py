"""Per-message interaction state: copy indicator and like/dislike.

Hides the design decisions about:
- How long the "copied" indicator lives and how its timers are kept
- Reaction stickiness (a reaction can be switched, never unset)
- Mirroring reactions to a notification endpoint without ever rolling back
  the local status
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..config import COPY_RESET_DELAY
from ..errors import NotificationFailure
from .markup import preferred_text
from .models import FeedbackEntry, Message, Reaction

if TYPE_CHECKING:
    from ..integrations.clipboard import Clipboard
    from ..integrations.notifier import FeedbackNotifier

logger = logging.getLogger(__name__)


class FeedbackTracker:
    """Tracks copy/like/dislike state per bot message index.

    Entries are only created for bot messages the user interacted with.
    Timers for different indices are independent.
    """

    def __init__(
        self,
        clipboard: "Clipboard",
        notifier: "FeedbackNotifier | None" = None,
        copy_reset_delay: float = COPY_RESET_DELAY,
        on_change: Callable[[int, FeedbackEntry], None] | None = None,
    ) -> None:
        self._clipboard = clipboard
        self._notifier = notifier
        self._copy_reset_delay = copy_reset_delay
        self._on_change = on_change
        self._entries: dict[int, FeedbackEntry] = {}
        self._copy_timers: dict[int, asyncio.TimerHandle] = {}
        self.failures: list[NotificationFailure] = []

    @property
    def notifier(self) -> "FeedbackNotifier | None":
        return self._notifier

    @notifier.setter
    def notifier(self, notifier: "FeedbackNotifier | None") -> None:
        self._notifier = notifier

    @property
    def entries(self) -> Mapping[int, FeedbackEntry]:
        """Read-only view of all entries."""
        return MappingProxyType(self._entries)

    def entry(self, index: int) -> FeedbackEntry:
        return self._entries.get(index, FeedbackEntry())

    def _set(self, index: int, entry: FeedbackEntry) -> None:
        self._entries[index] = entry
        if self._on_change is not None:
            self._on_change(index, entry)

    def copy(self, message: Message) -> bool:
        """Copy a bot message and raise its transient indicator.

        Must be called from the running event loop. Copying the same index
        again restarts its timer.

        Returns:
            True if the clipboard accepted the text
        """
        if not message.is_bot:
            logger.debug("Ignoring copy of non-bot message %d", message.index)
            return False

        if not self._clipboard.write(preferred_text(message)):
            logger.warning("Copy of message %d failed", message.index)
            return False

        index = message.index
        previous = self._copy_timers.pop(index, None)
        if previous is not None:
            previous.cancel()

        self._set(index, self.entry(index).model_copy(update={"copied": True}))
        loop = asyncio.get_running_loop()
        self._copy_timers[index] = loop.call_later(self._copy_reset_delay, self._clear_copied, index)
        return True

    def _clear_copied(self, index: int) -> None:
        self._copy_timers.pop(index, None)
        entry = self._entries.get(index)
        if entry is not None and entry.copied:
            self._set(index, entry.model_copy(update={"copied": False}))

    async def react(self, message: Message, reaction: Reaction) -> bool:
        """Set a like/dislike and mirror it to the notification endpoint.

        The local status changes before any network call and stays even if
        the notification fails. Re-selecting the current reaction is a no-op.

        Returns:
            True if the local status changed
        """
        if not message.is_bot:
            logger.debug("Ignoring reaction on non-bot message %d", message.index)
            return False
        if reaction is Reaction.NONE:
            raise ValueError("Reactions cannot be unset")

        current = self.entry(message.index)
        if current.status is reaction:
            return False

        self._set(message.index, current.model_copy(update={"status": reaction}))

        if self._notifier is not None:
            try:
                await self._notifier.notify(reaction, message.text, message.index)
            except NotificationFailure as e:
                self.failures.append(e)
                logger.warning("%s", e)
        return True

    async def like(self, message: Message) -> bool:
        return await self.react(message, Reaction.UP)

    async def dislike(self, message: Message) -> bool:
        return await self.react(message, Reaction.DOWN)

    def dispose(self) -> None:
        """Cancel pending indicator timers."""
        for handle in self._copy_timers.values():
            handle.cancel()
        self._copy_timers.clear()
