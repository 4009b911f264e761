from __future__ import annotations

import threading
import time

import pytest

from slacksender.notification.endpoint import DeliveryReceipt
from slacksender.notification.message import Notification


class RecordingEndpoint:
    """In-memory delivery endpoint that records every attempt."""

    def __init__(self, delay_s: float = 0.0, fail: bool = False) -> None:
        self.delay_s = delay_s
        self.fail = fail
        self.received: list[Notification] = []
        self.threads: set[str] = set()
        self.closed = False
        self._lock = threading.Lock()

    def deliver(self, notification: Notification) -> DeliveryReceipt:
        if self.delay_s:
            time.sleep(self.delay_s)
        with self._lock:
            self.received.append(notification)
            self.threads.add(threading.current_thread().name)
        if self.fail:
            return DeliveryReceipt(status="FAILED", status_code=500, error="status")
        return DeliveryReceipt(status="SENT", status_code=200)

    def close(self) -> None:
        self.closed = True


class GatedEndpoint(RecordingEndpoint):
    """Blocks inside ``deliver`` until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def deliver(self, notification: Notification) -> DeliveryReceipt:
        self.started.set()
        self.release.wait(timeout=5)
        return super().deliver(notification)


@pytest.fixture
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture
def make_endpoint():
    return RecordingEndpoint


@pytest.fixture
def gated_endpoint():
    ep = GatedEndpoint()
    yield ep
    ep.release.set()


@pytest.fixture
def clear_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in (
        "SLACK_WEBHOOK_URL",
        "SLACKSENDER_QUEUE_SIZE",
        "SLACKSENDER_TIMEOUT_S",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the test run
    monkeypatch.chdir(tmp_path)
    from slacksender.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
