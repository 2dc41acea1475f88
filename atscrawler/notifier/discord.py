from __future__ import annotations

import logging
import os

import requests

from .base import NotificationChannel, NotificationMessage

logger = logging.getLogger(__name__)

# Discord rejects message content longer than this
DISCORD_MAX_CONTENT_LENGTH = 2000


class DiscordChannel(NotificationChannel):
    """
    Discord webhook channel.

    Configuration via environment variables:
      - DISCORD_WEBHOOK_URL (required)
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.webhook_url = webhook_url or os.getenv("DISCORD_WEBHOOK_URL")
        self.timeout = timeout
        self._session = session or requests.Session()

        if not self.webhook_url or not self.webhook_url.strip():
            raise ValueError("DISCORD_WEBHOOK_URL must be configured")
        self.webhook_url = self.webhook_url.strip()

    @classmethod
    def from_env(cls) -> DiscordChannel | None:
        """Build a channel if DISCORD_WEBHOOK_URL is set, otherwise None."""
        if not (os.getenv("DISCORD_WEBHOOK_URL") or "").strip():
            return None
        return cls()

    @staticmethod
    def render(message: NotificationMessage) -> str:
        """Render a message as Discord content, truncated to the API limit."""
        content = message.text
        if message.subject and not content.startswith(message.subject):
            content = f"**{message.subject}**\n{content}"
        if len(content) > DISCORD_MAX_CONTENT_LENGTH:
            content = content[: DISCORD_MAX_CONTENT_LENGTH - 3] + "..."
        return content

    def send(self, message: NotificationMessage) -> None:
        """
        Post the message to the webhook.

        Raises:
            requests.RequestException: On network failure or non-2xx response
        """
        response = self._session.post(
            self.webhook_url,
            json={"content": self.render(message)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        logger.info("Discord notification sent", extra={"status_code": response.status_code})
