import logging
from typing import Any

import httpx

from ...config import DEFAULT_CHAT_ENDPOINT, NO_ANSWER_REPLY, REPLY_FIELDS
from ...errors import ResolverFailure
from ..base import ReplyStrategy

logger = logging.getLogger(__name__)


class RemoteApiStrategy(ReplyStrategy):
    """Reply from a remote chat endpoint.

    Hidden design decisions:
    - HTTP client setup (httpx.AsyncClient, created lazily unless injected)
    - Request format: POST {"query": ...} with a bearer credential
    - Response format: first populated field among answer/text/message
    - Failure policy: one request, never retried
    """

    name = "remote"

    def __init__(
        self,
        credential: str | None,
        endpoint: str = DEFAULT_CHAT_ENDPOINT,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        """Initialize the remote strategy.

        Args:
            credential: Opaque value sent as the bearer token
            endpoint: Chat endpoint URL
            client: Shared httpx client (not closed by this strategy)
            timeout: Request timeout in seconds, None to wait indefinitely
        """
        self._credential = credential
        self._endpoint = endpoint
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    @property
    def is_available(self) -> bool:
        return bool(self._credential)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def reply(self, query: str) -> str:
        """POST the query and extract the reply text.

        Raises:
            ResolverFailure: Non-success status or a body that is not JSON
            httpx.HTTPError: Transport-level failure
        """
        headers = {"Content-Type": "application/json"}
        if self._credential:
            headers["Authorization"] = f"Bearer {self._credential}"

        response = await self._get_client().post(
            self._endpoint,
            json={"query": query},
            headers=headers,
        )

        if not response.is_success:
            raise ResolverFailure(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ResolverFailure(f"unparseable response body: {e}", status_code=response.status_code) from e

        answer = extract_reply(payload)
        if answer is None:
            logger.warning("Chat endpoint response has none of the fields %s", ", ".join(REPLY_FIELDS))
            return NO_ANSWER_REPLY
        return answer

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def extract_reply(payload: Any) -> str | None:
    """Return the first populated reply field of a response payload."""
    if not isinstance(payload, dict):
        return None
    for field in REPLY_FIELDS:
        value = payload.get(field)
        if value is not None and value != "":
            return str(value)
    return None
