from abc import ABC, abstractmethod
from typing import Any


class ReplyStrategy(ABC):
    """Abstract base class for reply-producing strategies.

    This module hides the design decision of where a bot reply comes from.
    Implementations handle their own details:
    - Invoking an injected callback
    - Request/response format of a remote chat endpoint
    - Local canned replies

    A strategy may raise; the resolver chain maps exceptions to fixed replies.

    Usable as an async context manager that closes the strategy on exit:
        async with strategy:
            reply = await strategy.reply("hello")
    """

    name: str = "strategy"

    @property
    def is_available(self) -> bool:
        """Whether this strategy is configured to answer."""
        return True

    @abstractmethod
    async def reply(self, query: str) -> str:
        """Produce a reply for a trimmed, non-empty query.

        Args:
            query: The user's submitted text, already trimmed

        Returns:
            Reply text to append as a bot message
        """
        pass

    async def close(self) -> None:
        """Release HTTP clients or other resources held by the strategy."""

    async def __aenter__(self) -> "ReplyStrategy":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx can report a closed loop when the strategy outlives its event loop
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
