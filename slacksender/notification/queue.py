"""Bounded, closable FIFO shared by caller threads and the delivery worker.

Producers block only while the buffer is at capacity. Once closed the queue
rejects new items but keeps handing out the ones already buffered; ``get()``
returns ``None`` when it is closed and empty.
"""
from __future__ import annotations

import threading
import time
from collections import deque
from typing import Generic, TypeVar

from slacksender.core.settings import DEFAULT_QUEUE_SIZE
from slacksender.notification.errors import QueueClosedError, QueueFullError

T = TypeVar("T")


class MessageQueue(Generic[T]):
    """Many-producer, single-consumer FIFO with backpressure and close."""

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be >= 1, got {maxsize}")
        self.maxsize = maxsize
        self._items: deque[T] = deque()
        self._closed = False
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    # -- producer side -------------------------------------------------------

    def put(self, item: T, block: bool = True, timeout: float | None = None) -> None:
        """Append *item* at the tail.

        Blocks while the buffer is full unless *block* is ``False``.
        Raises ``QueueClosedError`` if the queue is (or becomes) closed and
        ``QueueFullError`` if no slot frees up in time.
        """
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be a non-negative number")
        with self._not_full:
            if self._closed:
                raise QueueClosedError("queue is closed")
            if len(self._items) >= self.maxsize:
                if not block:
                    raise QueueFullError(f"queue is full ({self.maxsize} items)")
                deadline = None if timeout is None else time.monotonic() + timeout
                while len(self._items) >= self.maxsize and not self._closed:
                    if deadline is None:
                        self._not_full.wait()
                    else:
                        remaining = deadline - time.monotonic()
                        if remaining <= 0:
                            raise QueueFullError(f"queue is full ({self.maxsize} items)")
                        self._not_full.wait(remaining)
                if self._closed:
                    raise QueueClosedError("queue was closed while waiting for a free slot")
            self._items.append(item)
            self._not_empty.notify()

    def close(self) -> None:
        """Stop accepting items. Buffered items remain retrievable."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    # -- consumer side -------------------------------------------------------

    def get(self) -> T | None:
        """Return the next item, or ``None`` once closed and drained."""
        with self._not_empty:
            while not self._items:
                if self._closed:
                    return None
                self._not_empty.wait()
            item = self._items.popleft()
            self._not_full.notify()
            return item

    # -- introspection -------------------------------------------------------

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
