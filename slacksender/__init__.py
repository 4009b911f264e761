"""Queue short notifications and post them to an incoming webhook in the background."""
from slacksender.core.logging import setup_logging
from slacksender.core.settings import Settings, get_settings
from slacksender.notification.dispatcher import Dispatcher, DispatcherState
from slacksender.notification.endpoint import (
    DeliveryEndpoint,
    DeliveryReceipt,
    WebhookEndpoint,
)
from slacksender.notification.errors import (
    DispatcherClosedError,
    QueueClosedError,
    QueueFullError,
    SlackSenderError,
)
from slacksender.notification.message import Notification
from slacksender.notification.queue import MessageQueue

__all__ = [
    "DeliveryEndpoint",
    "DeliveryReceipt",
    "Dispatcher",
    "DispatcherClosedError",
    "DispatcherState",
    "MessageQueue",
    "Notification",
    "QueueClosedError",
    "QueueFullError",
    "Settings",
    "SlackSenderError",
    "WebhookEndpoint",
    "get_settings",
    "setup_logging",
]
