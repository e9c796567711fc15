"""
Tests for the OpenTelemetry span provider
"""

import logging
from unittest.mock import Mock, patch

import pytest

from slack_logging import EventFilters, Filter, SlackHandler
from slack_logging.integrations import HAS_OPENTELEMETRY, opentelemetry_span

pytestmark = pytest.mark.skipif(
    not HAS_OPENTELEMETRY, reason="opentelemetry not installed"
)


@pytest.fixture
def tracer():
    from opentelemetry.sdk.trace import TracerProvider

    return TracerProvider().get_tracer("slack-logging-tests")


def test_no_active_span():
    assert opentelemetry_span() is None


def test_recording_span_is_mapped(tracer):
    with tracer.start_as_current_span("checkout", attributes={"order_id": 42}):
        ctx = opentelemetry_span()

    assert ctx is not None
    assert ctx.name == "checkout"
    assert ctx.fields == {"order_id": 42}


def test_handler_uses_opentelemetry_span(tracer, slack_config):
    sender = Mock()
    handler, _ = (
        SlackHandler.builder(EventFilters([Filter.subtractive("^app::")]))
        .slack_config(slack_config)
        .span_provider(opentelemetry_span)
        .build()
    )
    handler.sender = sender

    with tracer.start_as_current_span("checkout", attributes={"order_id": 42}):
        handler.emit(
            logging.LogRecord(
                "app::orders", logging.ERROR, __file__, 1, "payment declined", (), None
            )
        )

    text = sender.send.call_args[0][0].payload.text
    assert "*Span*: _checkout_" in text
    assert '"order_id": 42' in text


def test_missing_opentelemetry():
    with patch("slack_logging.integrations.opentelemetry.HAS_OPENTELEMETRY", False):
        with pytest.raises(ImportError, match="slack-logging\\[otel\\]"):
            opentelemetry_span()
