"""
Background delivery of Slack payloads

Log records are handled synchronously on whatever thread emitted them. The
handler only renders the message and puts it on an ``UnboundedChannel``; a
single ``SlackBackgroundWorker`` drains the channel on an asyncio event loop
and performs the webhook calls, so no network I/O ever happens on a
producer thread.

Shutdown policy: a ``SHUTDOWN`` message takes priority. Once it has been
sent the worker finishes the delivery in flight (if any), stops, and discards
every payload still queued.
"""

import asyncio
import logging
import threading
from collections import deque
from enum import Enum
from typing import Any, Deque, Dict, Optional

from .exceptions import DeliveryError, WorkerStoppedError
from .message import SlackPayload, WorkerMessage
from .network import WebhookTransport

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Lifecycle of a background worker"""

    PENDING = "pending"  # created, not started
    RUNNING = "running"
    DRAINING = "draining"  # shutdown requested, finishing the delivery in flight
    STOPPED = "stopped"


class UnboundedChannel:
    """Unbounded multi-producer, single-consumer message queue.

    ``send`` may be called from any thread and never blocks. The consumer
    is a coroutine that binds the channel to its event loop before it starts
    receiving; messages sent before that are buffered and handed over in
    order when the channel is bound.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Deque[WorkerMessage] = deque()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._closed = False
        self._shutdown_requested = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    def send(self, message: WorkerMessage) -> None:
        """Enqueue a message without blocking.

        Raises:
            WorkerStoppedError: If the consumer has exited
        """
        with self._lock:
            if self._closed:
                raise WorkerStoppedError()
            if message.is_shutdown:
                self._shutdown_requested = True
            if self._loop is None:
                self._pending.append(message)
                return
            try:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, message)
            except RuntimeError:
                # The consumer's event loop was closed underneath it
                self._closed = True
                raise WorkerStoppedError("slack worker event loop is closed") from None

    def bind(self) -> None:
        """Attach the channel to the running event loop of the consumer"""
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._loop is not None:
                raise RuntimeError("channel is already bound to an event loop")
            self._queue = asyncio.Queue()
            while self._pending:
                self._queue.put_nowait(self._pending.popleft())
            self._loop = loop

    async def recv(self) -> WorkerMessage:
        """Wait for the next message (consumer side only)"""
        return await self._queue.get()

    def close(self) -> int:
        """Refuse further messages and drop queued ones.

        Returns:
            The number of payloads that were discarded
        """
        with self._lock:
            self._closed = True
            dropped = list(self._pending)
            self._pending.clear()
            if self._queue is not None:
                while not self._queue.empty():
                    dropped.append(self._queue.get_nowait())
        return sum(1 for message in dropped if not message.is_shutdown)

    def qsize(self) -> int:
        queued = self._queue.qsize() if self._queue is not None else 0
        return queued + len(self._pending)


class SlackBackgroundWorker:
    """Handle to the single task that delivers payloads.

    Run it on a dedicated thread with ``start()`` (the usual choice for
    synchronous applications) or as a task on an existing event loop with
    ``spawn()``. Whoever owns the handle is responsible for calling
    ``shutdown()``; a worker that is never shut down idles until the
    process exits.
    """

    def __init__(
        self,
        transport: WebhookTransport,
        channel: Optional[UnboundedChannel] = None,
        shutdown_timeout: float = 5.0,
    ):
        self.transport = transport
        self.channel = channel or UnboundedChannel()
        self.shutdown_timeout = shutdown_timeout
        self._state = WorkerState.PENDING
        self._state_lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._task: Optional[asyncio.Task] = None
        self._stats = {"delivered": 0, "failed": 0, "discarded": 0}

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def sender(self) -> UnboundedChannel:
        """The producer side of the worker's queue"""
        return self.channel

    def _ensure_not_started(self) -> None:
        if self._thread is not None or self._task is not None:
            raise RuntimeError("worker has already been started")

    def start(self) -> "SlackBackgroundWorker":
        """Run the worker on its own event loop in a daemon thread"""
        self._ensure_not_started()
        self._thread = threading.Thread(
            target=self._run_in_thread, name="slack-logging-worker", daemon=True
        )
        self._thread.start()
        return self

    def spawn(self) -> "asyncio.Task[None]":
        """Run the worker as a task on the running event loop"""
        self._ensure_not_started()
        self._task = asyncio.get_running_loop().create_task(
            self.run(), name="slack-logging-worker"
        )
        return self._task

    def _run_in_thread(self) -> None:
        try:
            asyncio.run(self.run())
        except Exception:
            logger.exception("Slack background worker terminated unexpectedly")

    async def run(self) -> None:
        """Receive-and-deliver loop; returns once the worker has stopped"""
        try:
            self.channel.bind()
            with self._state_lock:
                if self._state is WorkerState.PENDING:
                    self._state = WorkerState.RUNNING
            logger.debug("Slack background worker started")

            async with self.transport:
                while not self.channel.shutdown_requested:
                    message = await self.channel.recv()
                    # Checked per message so queued payloads never delay a stop
                    if message.is_shutdown or self.channel.shutdown_requested:
                        if not message.is_shutdown:
                            self._stats["discarded"] += 1
                        break
                    await self._deliver(message.payload)
        finally:
            discarded = self.channel.close()
            self._stats["discarded"] += discarded
            with self._state_lock:
                self._state = WorkerState.STOPPED
            self._stopped.set()
            if discarded:
                logger.debug(
                    "Discarded %d queued Slack payloads on shutdown", discarded
                )
            logger.debug("Slack background worker stopped")

    async def _deliver(self, payload: SlackPayload) -> None:
        """Send one payload; failures are logged and the payload dropped"""
        try:
            await self.transport.send(payload)
        except DeliveryError as e:
            self._stats["failed"] += 1
            logger.error(
                "Failed to deliver Slack payload to channel %s: %s", payload.channel, e
            )
        except Exception:
            self._stats["failed"] += 1
            logger.exception(
                "Unexpected error delivering Slack payload to channel %s",
                payload.channel,
            )
        else:
            self._stats["delivered"] += 1

    def shutdown(self) -> None:
        """Ask the worker to stop.

        Raises:
            WorkerStoppedError: If the worker has already exited
        """
        self.channel.send(WorkerMessage.SHUTDOWN)
        with self._state_lock:
            if self._state is WorkerState.RUNNING:
                self._state = WorkerState.DRAINING

    def join(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker has stopped.

        Must not be called from the event loop running a spawned worker.

        Returns:
            True if the worker stopped within ``timeout``
        """
        if self._thread is None and self._task is None:
            raise RuntimeError("worker has not been started")
        stopped = self._stopped.wait(timeout)
        if stopped and self._thread is not None:
            self._thread.join(timeout)
        return stopped

    async def wait(self) -> None:
        """Wait for the worker to stop without blocking the event loop"""
        if self._task is not None:
            await self._task
        elif self._thread is not None:
            await asyncio.to_thread(self.join)
        else:
            raise RuntimeError("worker has not been started")

    def _request_stop(self) -> None:
        try:
            self.shutdown()
        except WorkerStoppedError:
            pass  # already stopped

    def get_stats(self) -> Dict[str, Any]:
        """Get worker statistics"""
        return {
            **self._stats,
            "queue_size": self.channel.qsize(),
            "state": self._state.value,
        }

    def __enter__(self) -> "SlackBackgroundWorker":
        return self.start()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._request_stop()
        self.join(self.shutdown_timeout)

    async def __aenter__(self) -> "SlackBackgroundWorker":
        self.spawn()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._request_stop()
        await asyncio.wait_for(self.wait(), timeout=self.shutdown_timeout)
