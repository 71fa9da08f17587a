"""Ordered, short-circuiting reply strategy chain."""

import logging
from collections.abc import Sequence

from ..config import GENERIC_FAILURE_REPLY, SERVICE_FAILURE_REPLY
from ..errors import ResolverFailure
from .base import ReplyStrategy

logger = logging.getLogger(__name__)


class ResponseResolver:
    """Turns a trimmed query into a reply string.

    The first available strategy in priority order answers; the others are
    never consulted. Every exception is absorbed here and mapped to a fixed
    reply, so callers can rely on `resolve` returning normally.
    """

    def __init__(self, strategies: Sequence[ReplyStrategy]):
        if not strategies:
            raise ValueError("ResponseResolver needs at least one strategy")
        self._strategies = tuple(strategies)
        self.last_strategy: str | None = None
        self.last_error: Exception | None = None

    @property
    def strategies(self) -> tuple[ReplyStrategy, ...]:
        return self._strategies

    def select(self) -> ReplyStrategy | None:
        """Return the highest-priority strategy that is configured."""
        for strategy in self._strategies:
            if strategy.is_available:
                return strategy
        return None

    async def resolve(self, query: str) -> str:
        """Resolve a query to a reply. Never raises `Exception` subclasses."""
        self.last_error = None
        try:
            strategy = self.select()
            if strategy is None:
                raise RuntimeError("No reply strategy available")
            self.last_strategy = strategy.name
            logger.debug("Resolving %d-char query with %s strategy", len(query), strategy.name)
            return await strategy.reply(query)
        except ResolverFailure as e:
            self.last_error = e
            logger.warning("%s", e)
            return SERVICE_FAILURE_REPLY
        except Exception as e:
            self.last_error = e
            logger.exception("Reply strategy %s failed", self.last_strategy)
            return GENERIC_FAILURE_REPLY

    async def close(self) -> None:
        """Close all strategies."""
        for strategy in self._strategies:
            await strategy.close()
