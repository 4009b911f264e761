"""Errors raised to callers of the dispatcher.

Only enqueue and construction raise. Delivery failures are reported through
logging and the ``on_error`` callback, never as exceptions.
"""
from __future__ import annotations


class SlackSenderError(RuntimeError):
    """Base class for errors raised by this package."""


class QueueClosedError(SlackSenderError):
    """Raised when putting into a ``MessageQueue`` that has been closed."""


class DispatcherClosedError(QueueClosedError):
    """Raised when queueing on a ``Dispatcher`` after ``close()``."""


class QueueFullError(SlackSenderError):
    """Raised by a non-blocking or timed-out put on a full queue."""
