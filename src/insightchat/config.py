"""Widget configuration and constants.

Centralizes the fixed replies, delays and endpoint defaults, and the
configuration model passed into the widget by its host.
"""

import logging
import os
from enum import IntEnum

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr


class LogLevel(IntEnum):
    """Log panel thresholds. Values are the standard library levels, so records
    compare directly against them.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def parse(cls, text: str) -> "LogLevel":
        """Level for a command-line value such as "info". Unknown names mean DEBUG."""
        return cls.__members__.get(text.strip().upper(), cls.DEBUG)

    @classmethod
    def label(cls, level: int) -> str:
        try:
            return cls(level).name
        except ValueError:
            return f"LEVEL {level}"


# Seeded greeting and widget title
GREETING = "Hello! I'm your insights assistant. How can I help you today?"
WIDGET_TITLE = "Insights Assistant"

# Fixed replies
NO_ANSWER_REPLY = "No answer returned"
SERVICE_FAILURE_REPLY = "Error: the assistant service could not answer"
GENERIC_FAILURE_REPLY = "Error: unable to get response"

# Local heuristic replies
GREETING_REPLY = "Hello! How can I assist you today?"
HELP_REPLY = "I'm here to help! You can ask me questions, and I'll do my best to assist you."
THANKS_REPLY = "You're welcome! Feel free to ask if you need anything else."
ECHO_TEMPLATE = (
    'I received your message: "{query}". This is a demo response. '
    "Configure an API to get real answers."
)

# Timing (seconds)
HEURISTIC_DELAY = 0.5  # Emulated latency of the local fallback
COPY_RESET_DELAY = 2.0  # Lifetime of the "copied" indicator

# Remote chat endpoint
DEFAULT_CHAT_ENDPOINT = "https://yourbackend.example.com/chat"
REPLY_FIELDS = ("answer", "text", "message")

# Status line
STATUS_SENDING = "Sending"
STATUS_READY = "Ready"
SEND_LABEL = "Send"
SEND_LABEL_BUSY = "Sending..."
INPUT_PLACEHOLDER = "Ask a question or type a message"

# Environment variables read by WidgetConfig.from_env
ENV_API_KEY = "INSIGHTCHAT_API_KEY"
ENV_ENDPOINT = "INSIGHTCHAT_ENDPOINT"
ENV_LIKE_ENDPOINT = "INSIGHTCHAT_LIKE_ENDPOINT"
ENV_DISLIKE_ENDPOINT = "INSIGHTCHAT_DISLIKE_ENDPOINT"


class WidgetConfig(BaseModel):
    """Configuration handed to the widget by its host on init and on every update.

    The credential is opaque: it is only forwarded as an authorization header.
    """

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr | None = Field(default=None, description="Credential for the remote chat endpoint")
    endpoint: str = Field(default=DEFAULT_CHAT_ENDPOINT, description="Remote chat endpoint URL")
    like_endpoint: str | None = Field(default=None, description="Notification endpoint for likes")
    dislike_endpoint: str | None = Field(default=None, description="Notification endpoint for dislikes")
    heuristic_delay: float = Field(default=HEURISTIC_DELAY, ge=0.0)
    copy_reset_delay: float = Field(default=COPY_RESET_DELAY, ge=0.0)
    remote_timeout: float | None = Field(
        default=None,
        description="Timeout for the remote call in seconds (None waits indefinitely)"
    )
    greeting: str = Field(default=GREETING)
    title: str = Field(default=WIDGET_TITLE)

    @property
    def credential(self) -> str | None:
        """Plain credential value, or None when unset or blank."""
        if self.api_key is None:
            return None
        value = self.api_key.get_secret_value()
        return value or None

    @property
    def masked_key(self) -> str | None:
        """Credential rendered for display: only the last four characters are shown."""
        value = self.credential
        if value is None:
            return None
        return f"****{value[-4:]}"

    @classmethod
    def from_env(cls, **overrides) -> "WidgetConfig":
        """Build a config from environment variables (and a .env file if present).

        Explicit keyword overrides win over the environment; None overrides are ignored.

        Environment variables:
            INSIGHTCHAT_API_KEY: Credential for the remote chat endpoint
            INSIGHTCHAT_ENDPOINT: Remote chat endpoint URL
            INSIGHTCHAT_LIKE_ENDPOINT: Like notification endpoint
            INSIGHTCHAT_DISLIKE_ENDPOINT: Dislike notification endpoint
        """
        load_dotenv()
        values = {
            "api_key": os.getenv(ENV_API_KEY) or None,
            "endpoint": os.getenv(ENV_ENDPOINT) or DEFAULT_CHAT_ENDPOINT,
            "like_endpoint": os.getenv(ENV_LIKE_ENDPOINT) or None,
            "dislike_endpoint": os.getenv(ENV_DISLIKE_ENDPOINT) or None,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def configure_logging(level: str | int = "warning") -> None:
    """Configure the package logger for command-line use."""
    if isinstance(level, str):
        level = LogLevel.parse(level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("insightchat").setLevel(level)
