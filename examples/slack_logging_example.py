#!/usr/bin/env python3
"""
Example forwarding application errors to a Slack channel

Set SLACK_WEBHOOK_URL, SLACK_CHANNEL_NAME and SLACK_USERNAME before running.
"""

import asyncio
import logging

from slack_logging import (
    EventFilters,
    Filter,
    SlackHandler,
    add_slack_handler,
    log_with_fields,
    record_span_fields,
    span,
)


def build_filters():
    """Only loggers under "app::" and nothing mentioning a health check"""
    targets = EventFilters([Filter.subtractive(r"^app::")])
    messages = EventFilters([Filter.additive(r"health ?check")])
    # Never forward records that carry credentials
    fields = EventFilters([Filter.additive(r"^(password|token)$")])
    return targets, messages, fields


def sync_demo():
    """Worker on its own thread, the usual setup for synchronous applications"""
    targets, messages, fields = build_filters()
    handler, worker = (
        SlackHandler.builder(targets)
        .message_filters(messages)
        .event_by_field_filters(fields)
        .field_exclusion_filters([r"^internal_"])
        .level(logging.WARNING)
        .build()
    )
    logger = add_slack_handler("app::db", handler)

    with worker:
        logger.info("Not forwarded, below the handler level")
        logger.error("health check failed")  # dropped by the message filter

        with span("migrate", schema_version=42):
            record_span_fields(batch=3)
            log_with_fields(
                logger,
                "error",
                "connection lost",
                retries=3,
                host="db-1",
                internal_trace="dropped from the message",
            )

        try:
            1 / 0
        except ZeroDivisionError:
            logger.exception("Report generation crashed")

    print("Sync demo stats:", handler.get_stats(), worker.get_stats())


async def async_demo():
    """Worker spawned on the application's event loop"""
    targets, _, _ = build_filters()
    handler, worker = SlackHandler.builder(targets).build()
    logger = add_slack_handler("app::api", handler)

    async with worker:
        for attempt in range(3):
            log_with_fields(
                logger, "warning", "Upstream timed out", attempt=attempt
            )
            await asyncio.sleep(0.1)

    print("Async demo stats:", handler.get_stats(), worker.get_stats())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sync_demo()
    asyncio.run(async_demo())
