"""
Channel-agnostic notification core.

A sync run builds one NotificationMessage and hands it to a Notifier, which
fans it out to every configured channel. Delivery is best effort: a channel
that raises is logged and skipped so the next one still gets the message.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass
class NotificationMessage:
    """
    One message to deliver.

    `subject` is a short title line; `text` is the plain-text body every
    channel can render. `metadata` holds machine-readable context such as the
    sync counters.
    """

    subject: str
    text: str
    metadata: Mapping[str, Any] | None = None


class NotificationChannel(Protocol):
    """A delivery target (Discord webhook, chat bot, ...)."""

    def send(self, message: NotificationMessage) -> None:
        """Deliver the message, raising on failure."""


class Notifier:
    """Fans a message out to a list of channels."""

    def __init__(self, channels: Sequence[NotificationChannel]):
        self._channels = list(channels)

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    def notify(self, message: NotificationMessage) -> int:
        """
        Deliver `message` through every channel.

        Returns:
            How many channels accepted the message. Channel errors are logged
            with their traceback and never raised.
        """
        if not self._channels:
            logger.debug("No notification channels configured, skipping")
            return 0

        delivered = 0
        for channel in self._channels:
            name = type(channel).__name__
            try:
                channel.send(message)
            except Exception as e:
                logger.error(
                    f"Channel {name} failed to send notification: {e}",
                    exc_info=True,
                    extra={"channel": name, "error_type": type(e).__name__},
                )
                continue
            delivered += 1

        logger.info(
            "Notification delivered to %d of %d channels",
            delivered,
            len(self._channels),
            extra={"delivered": delivered, "channels": len(self._channels)},
        )
        return delivered
