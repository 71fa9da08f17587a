"""Feedback notification endpoint client.

Mirrors like/dislike reactions to an external collaborator. The response body
is ignored; any failure surfaces as NotificationFailure for the caller to log.
"""

from typing import TYPE_CHECKING

import httpx

from ..errors import NotificationFailure

if TYPE_CHECKING:
    from ..session.models import Reaction


class FeedbackNotifier:
    """POSTs `{text, index}` to the endpoint configured for a reaction."""

    def __init__(
        self,
        like_endpoint: str | None = None,
        dislike_endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._endpoints = {
            "up": like_endpoint,
            "down": dislike_endpoint,
        }
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def endpoint_for(self, reaction: "Reaction") -> str | None:
        return self._endpoints.get(getattr(reaction, "value", reaction))

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def notify(self, reaction: "Reaction", text: str, index: int) -> bool:
        """Send one notification.

        Returns:
            False when no endpoint is configured for the reaction, True when sent

        Raises:
            NotificationFailure: Malformed endpoint, transport error or non-success status
        """
        endpoint = self.endpoint_for(reaction)
        if not endpoint:
            return False

        try:
            response = await self._get_client().post(endpoint, json={"text": text, "index": index})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotificationFailure(str(e) or type(e).__name__, index=index) from e

        if not response.is_success:
            raise NotificationFailure(f"HTTP {response.status_code}", index=index)
        return True

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
