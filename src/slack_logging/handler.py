"""
Logging handler that forwards filtered records to Slack
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .config import SlackConfig
from .context import SpanProvider, current_span
from .events import DEFAULT_FIELD_PREFIX, SlackEvent, SpanContext
from .exceptions import FilterRejected, SerializationError, WorkerStoppedError
from .filtering import EventFilters, FieldSelector
from .filtering.base import PatternLike
from .formatter import SlackMessageFormatter
from .message import SlackPayload, WorkerMessage
from .network import SlackWebhookClient, WebhookTransport
from .serializers import SerializationConfig
from .worker import SlackBackgroundWorker, UnboundedChannel

logger = logging.getLogger(__name__)

# Records from this package are never forwarded, to avoid feedback loops
_INTERNAL_LOGGER = __name__.split(".")[0]


class SlackHandler(logging.Handler):
    """
    Logging handler forwarding interesting records to a Slack webhook

    Each record is classified synchronously on the emitting thread:

    - the target (logger name) must pass ``target_filters``
    - the message must pass ``message_filters``
    - fields matching ``field_exclusion_filters`` are dropped, and every
      remaining field key must pass ``event_by_field_filters``

    Accepted records are rendered and queued for the background worker; the
    emitting thread never waits on the network. Nothing raised while
    classifying or queueing reaches the application.

    Use ``SlackHandler.builder`` to create a handler together with its worker.
    """

    def __init__(
        self,
        formatter: SlackMessageFormatter,
        config: SlackConfig,
        sender: UnboundedChannel,
        span_provider: Optional[SpanProvider] = current_span,
        field_prefix: Optional[str] = DEFAULT_FIELD_PREFIX,
        level: Union[int, str] = logging.NOTSET,
    ):
        super().__init__(level)
        self.message_formatter = formatter
        self.config = config
        self.sender = sender
        self.span_provider = span_provider
        self.field_prefix = field_prefix
        self._stats = {
            "enqueued": 0,
            "filtered": 0,
            "serialization_errors": 0,
            "enqueue_errors": 0,
        }

        if not len(formatter.target_filters):
            logger.warning(
                "Slack handler created without target filters; every record "
                "will be forwarded"
            )

    @staticmethod
    def builder(target_filters: EventFilters) -> "SlackHandlerBuilder":
        """Create a builder; target filters are mandatory"""
        return SlackHandlerBuilder(target_filters)

    def on_event(self, event: SlackEvent, span: Optional[SpanContext] = None) -> bool:
        """
        Classify one event and queue it for delivery

        Args:
            event: The event to classify
            span: The span active when the event occurred

        Returns:
            True if a payload was queued
        """
        try:
            text = self.message_formatter.format_event(event, span)
        except FilterRejected:
            self._count("filtered")
            return False
        except SerializationError as e:
            self._count("serialization_errors")
            logger.warning(
                "Dropping Slack event from %s, fields could not be serialized: %s",
                event.target,
                e,
            )
            return False

        payload = SlackPayload.from_config(self.config, text)
        try:
            self.sender.send(WorkerMessage.data(payload))
        except WorkerStoppedError as e:
            self._count("enqueue_errors")
            logger.error("Failed to send Slack payload to %s: %s", payload.channel, e)
            return False

        self._count("enqueued")
        return True

    def _count(self, key: str) -> None:
        # on_event may be called directly, outside the lock held by handle()
        with self.lock:
            self._stats[key] += 1

    def _lookup_span(self) -> Optional[SpanContext]:
        if self.span_provider is None:
            return None
        return self.span_provider()

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a log record if it passes every filter"""
        if record.name == _INTERNAL_LOGGER or record.name.startswith(
            _INTERNAL_LOGGER + "."
        ):
            return

        try:
            try:
                event = SlackEvent.from_record(record, self.field_prefix)
            except SerializationError as e:
                self._count("serialization_errors")
                logger.warning("Dropping Slack event from %s: %s", record.name, e)
                return
            self.on_event(event, self._lookup_span())
        except Exception:
            self.handleError(record)

    def get_stats(self) -> Dict[str, int]:
        """Get handler statistics"""
        with self.lock:
            return dict(self._stats)


class SlackHandlerBuilder:
    """
    Builder for a SlackHandler and its background worker

    A target filter chain is required. An empty chain (or one that matches
    everything) forwards every record and will flood the channel.

    Without an explicit ``slack_config`` the configuration is read from the
    environment, see ``SlackConfig.from_env``.
    """

    def __init__(self, target_filters: EventFilters):
        self._target_filters = target_filters
        self._message_filters: Optional[EventFilters] = None
        self._event_by_field_filters: Optional[EventFilters] = None
        self._field_exclusion_filters: Optional[List[PatternLike]] = None
        self._config: Optional[SlackConfig] = None
        self._span_provider: Optional[SpanProvider] = current_span
        self._field_prefix: Optional[str] = DEFAULT_FIELD_PREFIX
        self._serialization_config: Optional[SerializationConfig] = None
        self._transport: Optional[WebhookTransport] = None
        self._level: Union[int, str] = logging.NOTSET

    def message_filters(self, filters: EventFilters) -> "SlackHandlerBuilder":
        """Filter records by their message.

        Additive filters drop a record whose message matches; subtractive
        filters drop a record whose message does not match.
        """
        self._message_filters = filters
        return self

    def event_by_field_filters(self, filters: EventFilters) -> "SlackHandlerBuilder":
        """Filter records by their field keys.

        Additive filters drop a record having a matching field key;
        subtractive filters drop a record having a non-matching field key.
        """
        self._event_by_field_filters = filters
        return self

    def field_exclusion_filters(
        self, patterns: Iterable[PatternLike]
    ) -> "SlackHandlerBuilder":
        """Leave fields whose key matches any pattern out of the message"""
        self._field_exclusion_filters = list(patterns)
        return self

    def slack_config(self, config: SlackConfig) -> "SlackHandlerBuilder":
        self._config = config
        return self

    def span_provider(
        self, provider: Optional[SpanProvider]
    ) -> "SlackHandlerBuilder":
        """Where to look up the active span; None disables span lookup"""
        self._span_provider = provider
        return self

    def field_prefix(self, prefix: Optional[str]) -> "SlackHandlerBuilder":
        """Record attribute prefix marking fields; None takes every extra"""
        self._field_prefix = prefix
        return self

    def serialization_config(
        self, config: SerializationConfig
    ) -> "SlackHandlerBuilder":
        self._serialization_config = config
        return self

    def transport(self, transport: WebhookTransport) -> "SlackHandlerBuilder":
        """Replace the default aiohttp webhook client"""
        self._transport = transport
        return self

    def level(self, level: Union[int, str]) -> "SlackHandlerBuilder":
        self._level = level
        return self

    def build(self) -> Tuple[SlackHandler, SlackBackgroundWorker]:
        """Create the handler and its (not yet started) background worker"""
        config = self._config or SlackConfig.from_env()
        field_selector = (
            FieldSelector(self._field_exclusion_filters)
            if self._field_exclusion_filters
            else None
        )
        formatter = SlackMessageFormatter(
            target_filters=self._target_filters,
            message_filters=self._message_filters,
            event_by_field_filters=self._event_by_field_filters,
            field_selector=field_selector,
            serialization_config=self._serialization_config,
        )
        transport = self._transport or SlackWebhookClient(
            timeout=config.request_timeout
        )

        worker = SlackBackgroundWorker(transport)
        handler = SlackHandler(
            formatter,
            config,
            worker.sender,
            span_provider=self._span_provider,
            field_prefix=self._field_prefix,
            level=self._level,
        )
        return handler, worker
