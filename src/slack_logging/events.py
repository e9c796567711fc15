"""
Framework neutral event and span types

A ``SlackEvent`` is what the handler classifies: a level, a target (the
logger name), free-form fields and an optional source location. Events are
usually built from ``logging.LogRecord`` instances; tests and other
integrations can construct them directly.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import SerializationError

# Attributes every LogRecord carries; anything else came from ``extra=``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

DEFAULT_FIELD_PREFIX = "ctx_"


@dataclass
class SpanContext:
    """Name and accumulated fields of the span active when an event occurs"""

    name: str
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SlackEvent:
    """One structured log event"""

    level: str
    target: str
    fields: Dict[str, Any] = field(default_factory=dict)
    file: Optional[str] = None
    line: Optional[int] = None

    @classmethod
    def from_record(
        cls,
        record: logging.LogRecord,
        field_prefix: Optional[str] = DEFAULT_FIELD_PREFIX,
    ) -> "SlackEvent":
        """Build an event from a log record.

        Args:
            record: The record being emitted
            field_prefix: Only record attributes starting with this prefix
                become fields (prefix stripped). ``None`` takes every
                attribute passed through ``extra=``.

        Raises:
            SerializationError: If the record's message cannot be rendered
        """
        fields = _extract_fields(record, field_prefix)

        try:
            message = record.getMessage()
        except (TypeError, ValueError) as e:
            raise SerializationError(f"cannot render log message: {e}") from e
        if message:
            fields["message"] = message

        if record.exc_info and "error" not in fields:
            exc_type, exc_value = record.exc_info[0], record.exc_info[1]
            if exc_value is not None:
                fields["error"] = str(exc_value) or exc_type.__name__

        return cls(
            level=record.levelname,
            target=record.name,
            fields=fields,
            file=record.pathname or None,
            line=record.lineno or None,
        )


def _extract_fields(
    record: logging.LogRecord, field_prefix: Optional[str]
) -> Dict[str, Any]:
    """Collect structured fields attached to a record"""
    if field_prefix is None:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }

    offset = len(field_prefix)
    return {
        key[offset:]: value
        for key, value in record.__dict__.items()
        if key.startswith(field_prefix) and len(key) > offset
    }
