import asyncio
import re

from ...config import (
    ECHO_TEMPLATE,
    GREETING_REPLY,
    HELP_REPLY,
    HEURISTIC_DELAY,
    THANKS_REPLY,
)
from ..base import ReplyStrategy

_TOKEN = re.compile(r"[a-z0-9']+")

GREETING_TOKENS = frozenset({"hi", "hello", "hey"})
HELP_TOKENS = frozenset({"help"})
THANKS_PREFIX = "thank"


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens of a query."""
    return _TOKEN.findall(text.strip().lower())


def canned_reply(query: str) -> str:
    """Pick the canned reply for a query without any delay.

    Token families are tested in order: greeting, help, thanks, then echo.
    """
    tokens = tokenize(query)
    if any(token in GREETING_TOKENS for token in tokens):
        return GREETING_REPLY
    if any(token in HELP_TOKENS for token in tokens):
        return HELP_REPLY
    if any(token.startswith(THANKS_PREFIX) for token in tokens):
        return THANKS_REPLY
    return ECHO_TEMPLATE.format(query=query.strip())


class HeuristicStrategy(ReplyStrategy):
    """Local fallback used when neither a callback nor a credential is configured.

    Sleeps for a fixed delay before answering to emulate network latency.
    """

    name = "heuristic"

    def __init__(self, delay: float = HEURISTIC_DELAY):
        self._delay = delay

    @property
    def delay(self) -> float:
        return self._delay

    async def reply(self, query: str) -> str:
        response = canned_reply(query)
        await asyncio.sleep(self._delay)
        return response
