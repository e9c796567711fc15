"""
Slack Logging

Forward filtered Python log records to a Slack channel through an incoming
webhook, without blocking the threads that log.
"""

__version__ = "0.1.0"

from .config import SlackConfig
from .context import current_span, record_span_fields, span
from .events import SlackEvent, SpanContext
from .exceptions import (
    ConfigurationError,
    DeliveryError,
    FilterRejected,
    SerializationError,
    SlackLoggingError,
    WorkerStoppedError,
)
from .filtering import EventFilters, FieldSelector, Filter, FilterType
from .formatter import SlackMessageFormatter
from .handler import SlackHandler, SlackHandlerBuilder
from .logger import add_slack_handler, log_with_fields
from .message import MessageKind, SlackPayload, WorkerMessage
from .network import SlackWebhookClient, WebhookTransport
from .serializers import SerializationConfig
from .worker import SlackBackgroundWorker, UnboundedChannel, WorkerState

__all__ = [
    # Configuration
    "SlackConfig",
    "SerializationConfig",
    # Filtering
    "FilterType",
    "Filter",
    "EventFilters",
    "FieldSelector",
    # Events and spans
    "SlackEvent",
    "SpanContext",
    "span",
    "current_span",
    "record_span_fields",
    # Handler
    "SlackHandler",
    "SlackHandlerBuilder",
    "SlackMessageFormatter",
    "add_slack_handler",
    "log_with_fields",
    # Delivery
    "SlackPayload",
    "WorkerMessage",
    "MessageKind",
    "SlackBackgroundWorker",
    "UnboundedChannel",
    "WorkerState",
    "SlackWebhookClient",
    "WebhookTransport",
    # Errors
    "SlackLoggingError",
    "FilterRejected",
    "SerializationError",
    "WorkerStoppedError",
    "DeliveryError",
    "ConfigurationError",
]
