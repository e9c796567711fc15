"""
Helpers for logging structured fields and attaching the Slack handler
"""

import logging
from typing import Any, Union

from .events import DEFAULT_FIELD_PREFIX


def log_with_fields(
    logger: logging.Logger, level: Union[str, int], message: str, **fields: Any
) -> None:
    """Log ``message`` with keyword fields the Slack handler picks up"""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    extra = {f"{DEFAULT_FIELD_PREFIX}{key}": value for key, value in fields.items()}
    logger.log(level, message, extra=extra, stacklevel=2)


def add_slack_handler(
    logger: Union[str, logging.Logger], handler: logging.Handler
) -> logging.Logger:
    """Attach ``handler`` to a logger given by instance or name"""
    if isinstance(logger, str):
        logger = logging.getLogger(logger)
    logger.addHandler(handler)
    return logger
