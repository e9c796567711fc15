"""
Rendering of accepted events into Slack mrkdwn messages
"""

from typing import Any, List, Mapping, Optional, Tuple

from .events import SlackEvent, SpanContext
from .filtering import EventFilters, FieldSelector, process_optional
from .serializers import SerializationConfig, render_mapping

# Fields consumed by the message line rather than the metadata block
KEYWORDS = ("message", "error")

NO_MESSAGE = "No message"
NO_SPAN = "None"
UNKNOWN_FILE = "Unknown"
UNKNOWN_LINE = 0

MESSAGE_TEMPLATE = (
    '*Event [{level}]*: "{message}"\n'
    "*Span*: _{span}_\n"
    "*Target*: _{target}_\n"
    "*Source*: _{file}#L{line}_\n"
    "*Metadata*:\n"
    "```{metadata}```"
)


def resolve_message(fields: Mapping[str, Any]) -> str:
    """Pick the message text: ``message``, then ``error``, then a placeholder"""
    for key in KEYWORDS:
        value = fields.get(key)
        if isinstance(value, str):
            return value
    return NO_MESSAGE


class SlackMessageFormatter:
    """Runs the filter pipeline for an event and renders it.

    Filtering happens in a fixed order: target, message, then field keys.
    Every filter decision is made before any field value is serialized, so a
    rejected event costs no serialization work.
    """

    def __init__(
        self,
        target_filters: EventFilters,
        message_filters: Optional[EventFilters] = None,
        event_by_field_filters: Optional[EventFilters] = None,
        field_selector: Optional[FieldSelector] = None,
        serialization_config: Optional[SerializationConfig] = None,
    ):
        self.target_filters = target_filters
        self.message_filters = message_filters
        self.event_by_field_filters = event_by_field_filters
        self.field_selector = field_selector
        self.serialization_config = serialization_config or SerializationConfig()

    def select_fields(self, fields: Mapping[str, Any]) -> List[Tuple[str, Any]]:
        """Return the event fields that go into the metadata block.

        Raises:
            FilterRejected: If the field key chain rejects any surviving key
        """
        selected = []
        for key, value in fields.items():
            if key in KEYWORDS:
                continue
            if self.field_selector is not None and self.field_selector.is_excluded(
                key
            ):
                continue
            process_optional(self.event_by_field_filters, key)
            selected.append((key, value))
        return selected

    def format_event(
        self, event: SlackEvent, span: Optional[SpanContext] = None
    ) -> str:
        """
        Filter and render a single event

        Args:
            event: The event to render
            span: The span active when the event occurred

        Returns:
            The Slack message text

        Raises:
            FilterRejected: If any filter excludes the event
            SerializationError: If the metadata cannot be encoded
        """
        self.target_filters.process(event.target)

        message = resolve_message(event.fields)
        process_optional(self.message_filters, message)

        metadata_items = self.select_fields(event.fields)
        # Span fields were vetted when recorded and bypass field filtering
        if span is not None:
            metadata_items.extend(span.fields.items())

        metadata = render_mapping(metadata_items, self.serialization_config)

        return MESSAGE_TEMPLATE.format(
            level=event.level,
            message=message,
            span=span.name if span is not None else NO_SPAN,
            target=event.target,
            file=event.file or UNKNOWN_FILE,
            line=event.line if event.line is not None else UNKNOWN_LINE,
            metadata=metadata,
        )
