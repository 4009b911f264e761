"""Non-blocking notification dispatcher.

Callers enqueue ``Notification`` values; a single background worker drains
the queue in FIFO order and hands each one to a ``DeliveryEndpoint``,
strictly one at a time.  ``close()`` stops intake, lets the worker flush
what is already buffered, and returns once every queued notification has
had exactly one delivery attempt.

Delivery is fire-and-forget: failures are logged by the endpoint and
passed to the optional ``on_error`` callback, never raised to the caller.

Lifecycle
---------
RUNNING  : accepting notifications
DRAINING : closed, worker flushing the remaining buffer
DONE     : worker exited; reached exactly once
"""
from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable

from slacksender.core.settings import (
    DEFAULT_QUEUE_SIZE,
    DEFAULT_TIMEOUT_S,
    Settings,
    get_settings,
)
from slacksender.notification.endpoint import (
    DeliveryEndpoint,
    DeliveryReceipt,
    WebhookEndpoint,
)
from slacksender.notification.errors import DispatcherClosedError, QueueClosedError
from slacksender.notification.message import Notification
from slacksender.notification.queue import MessageQueue

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Notification, DeliveryReceipt], None]


class DispatcherState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


class Dispatcher:
    """Queue notifications for background delivery to a webhook.

    Parameters
    ----------
    endpoint_url:
        Incoming-webhook URL.  Ignored when *endpoint* is given.
    queue_size:
        Buffer capacity; ``queue()`` blocks while this many are pending.
    timeout_s:
        Per-request timeout for the default ``WebhookEndpoint``.
    endpoint:
        Optional delivery endpoint.  The caller keeps ownership of it.
    on_error:
        Optional ``(notification, receipt)`` callback invoked from the worker
        thread for every failed delivery attempt.
    """

    def __init__(
        self,
        endpoint_url: str = "",
        *,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        endpoint: DeliveryEndpoint | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._queue: MessageQueue[Notification] = MessageQueue(queue_size)
        if endpoint is None:
            if not endpoint_url:
                raise ValueError("endpoint_url is required when no endpoint is given")
            endpoint = WebhookEndpoint(endpoint_url, timeout_s=timeout_s)
            self._owns_endpoint = True
        else:
            self._owns_endpoint = False

        self._endpoint = endpoint
        self._on_error = on_error
        self._state = DispatcherState.RUNNING
        self._state_lock = threading.Lock()
        self._done = threading.Event()
        self.delivered = 0
        self.failed = 0

        self._worker = threading.Thread(
            target=self._run, name="slacksender-worker", daemon=True
        )
        self._worker.start()

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> Dispatcher:
        """Build a dispatcher from ``SLACK_WEBHOOK_URL`` and friends."""
        settings = settings or get_settings()
        kwargs.setdefault("queue_size", settings.queue_size)
        kwargs.setdefault("timeout_s", settings.timeout_s)
        return cls(settings.webhook_url, **kwargs)

    # -- producer API -------------------------------------------------------

    def queue(
        self,
        notification: Notification,
        block: bool = True,
        timeout: float | None = None,
    ) -> None:
        """Enqueue *notification*; blocks only while the buffer is full."""
        if not isinstance(notification, Notification):
            raise TypeError(
                f"expected Notification, got {type(notification).__name__}"
            )
        try:
            self._queue.put(notification, block=block, timeout=timeout)
        except QueueClosedError as exc:
            raise DispatcherClosedError("dispatcher is closed") from exc

    def text(self, text: str) -> None:
        """Enqueue a plain text notification with default overrides."""
        self.queue(Notification(text=text))

    # -- shutdown -----------------------------------------------------------

    def close(self) -> None:
        """Stop intake and wait until every queued notification was attempted."""
        if threading.current_thread() is self._worker:
            raise RuntimeError("close() cannot be called from the delivery worker")

        with self._state_lock:
            if self._state is DispatcherState.RUNNING:
                self._state = DispatcherState.DRAINING
                logger.debug("Dispatcher closing with %d pending", len(self._queue))
        self._queue.close()
        self._done.wait()

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- introspection ------------------------------------------------------

    @property
    def state(self) -> DispatcherState:
        with self._state_lock:
            return self._state

    @property
    def pending(self) -> int:
        return len(self._queue)

    # -- worker -------------------------------------------------------------

    def _run(self) -> None:
        try:
            while True:
                notification = self._queue.get()
                if notification is None:
                    break
                self._deliver(notification)
        finally:
            try:
                if self._owns_endpoint:
                    self._endpoint.close()
            finally:
                with self._state_lock:
                    self._state = DispatcherState.DONE
                self._done.set()
                logger.info(
                    "Dispatcher worker exited (delivered=%d failed=%d)",
                    self.delivered,
                    self.failed,
                )

    def _deliver(self, notification: Notification) -> None:
        try:
            receipt = self._endpoint.deliver(notification)
        except Exception as exc:
            logger.exception("Delivery endpoint raised; dropping notification")
            receipt = DeliveryReceipt(
                status="FAILED", error="exception", detail=exc.__class__.__name__
            )

        if receipt.ok:
            self.delivered += 1
            return

        self.failed += 1
        logger.warning(
            "Delivery failed (error=%s status=%s); notification dropped",
            receipt.error,
            receipt.status_code,
        )
        if self._on_error is not None:
            try:
                self._on_error(notification, receipt)
            except Exception:
                logger.exception("on_error callback raised")
