"""Exception taxonomy for the chat session core.

None of these escape the session: resolver failures become bot replies,
notification and clipboard failures are logged and recorded.
"""


class InsightChatError(Exception):
    """Base class for chat session errors."""


class ResolverFailure(InsightChatError):
    """Remote chat endpoint answered with a non-success status or a malformed body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(f"Resolver failure: {message}")
        self.status_code = status_code


class NotificationFailure(InsightChatError):
    """Feedback notification could not be delivered."""

    def __init__(self, message: str, index: int | None = None):
        msg = f"Notification failure: {message}"
        if index is not None:
            msg += f" (message {index})"
        super().__init__(msg)
        self.index = index
