"""Chat session core.

Module structure (each module hides a design decision):
- models.py: Value types (message, draft, feedback entry)
- timeline.py: Append-only transcript
- markup.py: Draft synchronization with the rich-text surface
- pipeline.py: Session snapshot and the single-flight send cycle
- feedback.py: Copy indicator and like/dislike state
- controller.py: Wiring and change notification
- host.py: init/render/dispose lifecycle and the render projection
"""

from .controller import ChatSession
from .feedback import FeedbackTracker
from .host import ChatWidget, MessageView, SessionView, project
from .markup import (
    ClipboardPayload,
    EditableSurface,
    MemorySurface,
    RichInputSynchronizer,
    extract_text,
    is_visually_empty,
    plain_text_to_markup,
)
from .models import Draft, FeedbackEntry, Message, Reaction, Speaker
from .pipeline import SendPhase, SendPipeline, SessionState, initial_state
from .timeline import MessageTimeline

__all__ = [
    "ChatSession",
    "ChatWidget",
    "ClipboardPayload",
    "Draft",
    "EditableSurface",
    "FeedbackEntry",
    "FeedbackTracker",
    "MemorySurface",
    "Message",
    "MessageTimeline",
    "MessageView",
    "Reaction",
    "RichInputSynchronizer",
    "SendPhase",
    "SendPipeline",
    "SessionState",
    "SessionView",
    "Speaker",
    "extract_text",
    "initial_state",
    "is_visually_empty",
    "plain_text_to_markup",
    "project",
]
