"""
insightchat: an embeddable conversational widget core.

A linear chat transcript, a rich-text input synchronized with its plain-text
value, a single-flight send pipeline and an ordered reply strategy chain.
Each subpackage hides one design decision (session, resolver, integrations, ui).
"""

__version__ = "0.1.0"

from .config import WidgetConfig
from .errors import InsightChatError, NotificationFailure, ResolverFailure
from .resolver import ResponseResolver, create_response_resolver
from .session import ChatSession, ChatWidget, ClipboardPayload, Draft, Message, SessionView

__all__ = [
    "ChatSession",
    "ChatWidget",
    "ClipboardPayload",
    "Draft",
    "InsightChatError",
    "Message",
    "NotificationFailure",
    "ResolverFailure",
    "ResponseResolver",
    "SessionView",
    "WidgetConfig",
    "create_response_resolver",
]
