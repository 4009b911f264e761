from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Notification attribute -> webhook JSON key for the optional overrides
_OPTIONAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("sender_name", "username"),
    ("icon_url", "icon_url"),
    ("icon_emoji", "icon_emoji"),
    ("target_channel", "channel"),
)


@dataclass(frozen=True, slots=True)
class Notification:
    """A single outbound text message with optional display overrides."""

    text: str
    sender_name: str | None = None
    icon_url: str | None = None
    icon_emoji: str | None = None
    target_channel: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the webhook JSON body; empty overrides are omitted."""
        payload: dict[str, Any] = {"text": self.text}
        for attr, key in _OPTIONAL_FIELDS:
            value = getattr(self, attr)
            if value:
                payload[key] = value
        return payload
