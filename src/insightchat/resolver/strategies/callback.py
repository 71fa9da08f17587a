import inspect
from collections.abc import Awaitable, Callable

from ...config import NO_ANSWER_REPLY
from ..base import ReplyStrategy

ReplyCallback = Callable[[str], Awaitable[object] | object]


class CallbackStrategy(ReplyStrategy):
    """Reply through a function injected by the embedding application.

    The callback may be sync or async. Its result is used verbatim; an empty
    or missing result becomes the fixed placeholder reply.
    """

    name = "callback"

    def __init__(self, callback: ReplyCallback | None):
        self._callback = callback

    @property
    def is_available(self) -> bool:
        return self._callback is not None

    async def reply(self, query: str) -> str:
        if self._callback is None:
            raise RuntimeError("No reply callback configured")

        result = self._callback(query)
        if inspect.isawaitable(result):
            result = await result

        if result is None:
            return NO_ANSWER_REPLY
        return str(result) or NO_ANSWER_REPLY
