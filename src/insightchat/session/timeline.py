"""Append-only message timeline.

Hides how the transcript is stored. Appending returns a new timeline, so a
timeline held by an older SessionState never changes underneath its reader.
"""

from collections.abc import Iterator

from .models import Message, Speaker


class MessageTimeline:
    """Ordered, append-only sequence of messages with stable positional indices.

    No validation happens here; the send pipeline decides what gets appended.
    """

    __slots__ = ("_messages",)

    def __init__(self, messages: tuple[Message, ...] = ()) -> None:
        self._messages = tuple(messages)

    def append(self, speaker: Speaker, text: str, html: str | None = None) -> "MessageTimeline":
        """Return a new timeline with one more message at the next index."""
        message = Message(speaker=speaker, text=text, html=html, index=len(self._messages))
        return MessageTimeline(self._messages + (message,))

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    @property
    def count(self) -> int:
        return len(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageTimeline):
            return NotImplemented
        return self._messages == other._messages

    def __hash__(self) -> int:
        return hash(self._messages)

    def __repr__(self) -> str:
        return f"MessageTimeline(count={len(self._messages)})"
