"""
Shared fixtures for slack_logging tests
"""

import asyncio
import time
from typing import Callable, Iterable, List, Optional

import pytest

from slack_logging import DeliveryError, SlackConfig, SlackPayload


class RecordingTransport:
    """Webhook transport double that records delivered payloads"""

    def __init__(self, fail_on: Iterable[str] = (), delay: float = 0.0):
        self.sent: List[SlackPayload] = []
        self.attempted: List[SlackPayload] = []
        self.fail_on = set(fail_on)
        self.delay = delay
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> "RecordingTransport":
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.exited = True

    async def send(self, payload: SlackPayload) -> None:
        self.attempted.append(payload)
        if self.delay:
            await asyncio.sleep(self.delay)
        if payload.text in self.fail_on:
            raise DeliveryError("simulated failure", status=500, body="oops")
        self.sent.append(payload)


class BlockingTransport(RecordingTransport):
    """Transport whose sends hang until ``release`` is called"""

    def __init__(self):
        super().__init__()
        self.gate: Optional[asyncio.Event] = None

    async def __aenter__(self) -> "BlockingTransport":
        self.gate = asyncio.Event()
        return await super().__aenter__()

    async def send(self, payload: SlackPayload) -> None:
        self.attempted.append(payload)
        await self.gate.wait()
        self.sent.append(payload)

    def release(self) -> None:
        self.gate.set()


def make_payload(text: str = "hello") -> SlackPayload:
    return SlackPayload(
        channel="#alerts",
        username="log-bot",
        text=text,
        webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
    )


def wait_until(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


async def async_wait_until(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        await asyncio.sleep(0.01)
    return condition()


@pytest.fixture
def slack_config() -> SlackConfig:
    return SlackConfig(
        webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
        channel_name="#alerts",
        username="log-bot",
        icon_emoji=":rotating_light:",
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
