"""
Exception hierarchy for Slack log forwarding
"""

from typing import Optional


class SlackLoggingError(Exception):
    """Base class for all slack_logging errors"""


class FilterRejected(SlackLoggingError):
    """Raised by a filter chain to stop processing of an event.

    Carries no information; callers catch it and drop the event.
    """


class SerializationError(SlackLoggingError):
    """Event fields could not be encoded for the Slack message"""


class WorkerStoppedError(SlackLoggingError):
    """A message was sent to a background worker that has already exited"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "slack background worker is not running")


class DeliveryError(SlackLoggingError):
    """The webhook call for a single payload failed"""

    def __init__(
        self, message: str, status: Optional[int] = None, body: Optional[str] = None
    ):
        super().__init__(message)
        self.status = status
        self.body = body


class ConfigurationError(SlackLoggingError, ValueError):
    """Invalid or missing Slack configuration"""
