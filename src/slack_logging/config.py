"""
Slack webhook configuration
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .exceptions import ConfigurationError

ENV_WEBHOOK_URL = "SLACK_WEBHOOK_URL"
ENV_CHANNEL_NAME = "SLACK_CHANNEL_NAME"
ENV_USERNAME = "SLACK_USERNAME"
ENV_ICON_EMOJI = "SLACK_EMOJI"
ENV_REQUEST_TIMEOUT = "SLACK_REQUEST_TIMEOUT"


@dataclass(frozen=True)
class SlackConfig:
    """Destination of forwarded messages"""

    webhook_url: str
    channel_name: str
    username: str
    icon_emoji: Optional[str] = None

    # Upper bound on a single webhook call (seconds); None waits forever
    request_timeout: Optional[float] = 10.0

    def __post_init__(self):
        """Validate configuration values"""
        parsed = urlparse(self.webhook_url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"webhook_url must be an absolute http(s) URL, got {self.webhook_url!r}"
            )
        if not self.channel_name:
            raise ConfigurationError("channel_name must not be empty")
        if not self.username:
            raise ConfigurationError("username must not be empty")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

    @staticmethod
    def _require_env(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"environment variable {key} is not set")
        return value

    @classmethod
    def from_env(cls) -> "SlackConfig":
        """Create configuration from environment variables"""
        timeout = os.getenv(ENV_REQUEST_TIMEOUT)
        try:
            request_timeout = float(timeout) if timeout else 10.0
        except ValueError:
            raise ConfigurationError(
                f"{ENV_REQUEST_TIMEOUT} must be a number, got {timeout!r}"
            ) from None

        return cls(
            webhook_url=cls._require_env(ENV_WEBHOOK_URL),
            channel_name=cls._require_env(ENV_CHANNEL_NAME),
            username=cls._require_env(ENV_USERNAME),
            icon_emoji=os.getenv(ENV_ICON_EMOJI) or None,
            request_timeout=request_timeout,
        )
