"""Value types for the chat session.

Hides the internal representation of messages, the input draft and the
per-message feedback entry. Every type is frozen: a change produces a new value.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Speaker(str, Enum):
    """Author of a message."""

    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    """A single transcript entry. Created by MessageTimeline, never edited."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker = Field(description="Who wrote the message")
    text: str = Field(description="Plain-text content")
    html: str | None = Field(default=None, description="Raw markup when the message was typed as rich text")
    index: int = Field(ge=0, description="Position in the timeline")

    @property
    def is_bot(self) -> bool:
        return self.speaker is Speaker.BOT


class Draft(BaseModel):
    """The uncommitted input value: raw markup plus its plain-text projection."""

    model_config = ConfigDict(frozen=True)

    html: str = ""
    text: str = ""

    @property
    def is_blank(self) -> bool:
        """True when there is nothing worth submitting."""
        return not self.text.strip()


EMPTY_DRAFT = Draft()


class Reaction(str, Enum):
    """Like/dislike status of a bot message."""

    NONE = "none"
    UP = "up"
    DOWN = "down"


class FeedbackEntry(BaseModel):
    """Interaction state of one bot message."""

    model_config = ConfigDict(frozen=True)

    status: Reaction = Reaction.NONE
    copied: bool = False
