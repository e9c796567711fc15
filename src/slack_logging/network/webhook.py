"""
aiohttp client for Slack incoming webhooks
"""

import asyncio
from typing import Any, Dict, Optional, Protocol

import aiohttp

from .. import __version__
from ..exceptions import DeliveryError
from ..message import SlackPayload

USER_AGENT = f"slack-logging/{__version__}"


class WebhookTransport(Protocol):
    """What the background worker needs from an HTTP client"""

    async def __aenter__(self) -> "WebhookTransport": ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...

    async def send(self, payload: SlackPayload) -> None: ...


class SlackWebhookClient:
    """POSTs payloads to their webhook URL.

    A session is opened on ``__aenter__`` unless one is passed in; only a
    session opened here is closed on ``__aexit__``. Failures are raised as
    ``DeliveryError`` and never retried.
    """

    def __init__(
        self,
        timeout: Optional[float] = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {"User-Agent": USER_AGENT}
        self.headers.update(headers or {})
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> "SlackWebhookClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout, headers=self.headers
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client opened it"""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def send(self, payload: SlackPayload) -> None:
        """Deliver one payload.

        Raises:
            DeliveryError: On transport errors, timeouts and HTTP status >= 400
        """
        if self._session is None:
            raise DeliveryError("webhook client is not open")

        try:
            async with self._session.post(
                payload.webhook_url,
                json=payload.to_dict(),
                headers=self.headers,
                timeout=self.timeout,
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise DeliveryError(
                        f"Slack webhook returned HTTP {response.status}",
                        status=response.status,
                        body=body,
                    )
        except asyncio.TimeoutError as e:
            raise DeliveryError("Slack webhook request timed out") from e
        except aiohttp.ClientError as e:
            raise DeliveryError(f"Slack webhook request failed: {e}") from e
