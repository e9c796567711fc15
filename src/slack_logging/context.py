"""
Context-local span tracking

Spans give events an enclosing name and a set of already-vetted fields that
are appended to every message forwarded while the span is active.
"""

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Optional

from .events import SpanContext

SpanProvider = Callable[[], Optional[SpanContext]]

_current_span: ContextVar[Optional[SpanContext]] = ContextVar(
    "slack_logging_span", default=None
)


def current_span() -> Optional[SpanContext]:
    """Get the innermost active span"""
    return _current_span.get()


def record_span_fields(**fields: Any) -> None:
    """Add fields to the active span, if there is one"""
    active = _current_span.get()
    if active is not None:
        active.fields.update(fields)


@contextmanager
def span(name: str, **fields: Any) -> Generator[SpanContext, None, None]:
    """Context manager activating a named span for the current context"""
    ctx = SpanContext(name=name, fields=dict(fields))
    token = _current_span.set(ctx)
    try:
        yield ctx
    finally:
        _current_span.reset(token)
