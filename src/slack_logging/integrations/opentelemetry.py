"""
OpenTelemetry span provider

Lets the Slack handler use the current OpenTelemetry span as the enclosing
span of forwarded records:

    handler, worker = (
        SlackHandler.builder(filters).span_provider(opentelemetry_span).build()
    )
"""

from typing import Optional

# OpenTelemetry imports with availability checking
try:
    from opentelemetry import trace

    HAS_OPENTELEMETRY = True
except ImportError:
    trace = None
    HAS_OPENTELEMETRY = False

from ..events import SpanContext


def opentelemetry_span() -> Optional[SpanContext]:
    """Map the current recording OpenTelemetry span to a SpanContext"""
    if not HAS_OPENTELEMETRY:
        raise ImportError(
            "opentelemetry is required for the OpenTelemetry span provider. "
            "Install with: pip install slack-logging[otel]"
        )

    current = trace.get_current_span()
    if current is None or not current.is_recording():
        return None
    if not current.get_span_context().is_valid:
        return None

    # Only SDK spans expose name and attributes
    name = getattr(current, "name", None)
    if not name:
        return None
    attributes = getattr(current, "attributes", None) or {}
    return SpanContext(name=name, fields=dict(attributes))
