"""Delivery endpoint — posts a notification to an incoming webhook.

``WebhookEndpoint`` wraps a synchronous ``httpx.Client`` and turns every
outcome into a ``DeliveryReceipt``.  It never raises for delivery failures:

- serialization failure   -> ERROR log, nothing sent
- transport failure       -> WARNING log, message dropped
- non-200 response status -> WARNING log with status code, message dropped

There is no retry and no backoff.  Safety: the webhook URL carries the
credential, so it is never logged.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Protocol

import httpx

from slacksender.core.logging import install_secret_filter, register_secret
from slacksender.core.settings import DEFAULT_TIMEOUT_S
from slacksender.notification.message import Notification

logger = logging.getLogger(__name__)

ERROR_SERIALIZATION = "serialization"
ERROR_TRANSPORT = "transport"
ERROR_STATUS = "status"


# ---------------------------------------------------------------------------
# DeliveryReceipt
# ---------------------------------------------------------------------------

@dataclass
class DeliveryReceipt:
    """Record of a single delivery attempt."""

    status: Literal["SENT", "FAILED"]
    status_code: int | None = None
    error: str | None = None
    detail: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.status == "SENT"


class DeliveryEndpoint(Protocol):
    """Anything the delivery worker can hand a notification to."""

    def deliver(self, notification: Notification) -> DeliveryReceipt:
        ...

    def close(self) -> None:
        ...


# ---------------------------------------------------------------------------
# WebhookEndpoint
# ---------------------------------------------------------------------------

class WebhookEndpoint:
    """POST notifications as ``application/json`` to a webhook URL.

    Parameters
    ----------
    url:
        Incoming-webhook URL.  Opaque; treated as a secret.
    timeout_s:
        Per-request timeout in seconds.
    client:
        Optional ``httpx.Client``.  When given, the caller owns it and
        ``close()`` leaves it open.
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.Client | None = None,
    ) -> None:
        if not url:
            raise ValueError("webhook url must be non-empty")
        self.url = url
        self.timeout_s = timeout_s
        # httpx logs every request URL at INFO on its own logger
        register_secret(url)
        install_secret_filter("httpx")
        install_secret_filter(__name__)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout_s)

    def deliver(self, notification: Notification) -> DeliveryReceipt:
        """Send *notification* once and return the outcome."""
        try:
            body = json.dumps(notification.to_payload())
        except (TypeError, ValueError) as exc:
            logger.error("Failed to encode notification payload: %s", exc)
            return DeliveryReceipt(status="FAILED", error=ERROR_SERIALIZATION, detail=str(exc))

        try:
            response = self._client.post(
                self.url,
                content=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_s,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Failed to post notification to webhook: %s", exc.__class__.__name__
            )
            return DeliveryReceipt(
                status="FAILED", error=ERROR_TRANSPORT, detail=exc.__class__.__name__
            )

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "Webhook rejected notification: %d %s",
                response.status_code,
                response.reason_phrase,
            )
            return DeliveryReceipt(
                status="FAILED",
                status_code=response.status_code,
                error=ERROR_STATUS,
                detail=response.reason_phrase,
            )

        logger.debug("Delivered notification")
        return DeliveryReceipt(status="SENT", status_code=response.status_code)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
