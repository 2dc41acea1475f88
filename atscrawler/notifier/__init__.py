"""
Notifier package.

Delivers the sync summary through notification channels.

Main components:
- NotificationMessage / NotificationChannel / Notifier: channel-agnostic core
- DiscordChannel: Discord webhook delivery
- build_summary_message: renders SyncStats into a message
"""

from .base import NotificationChannel, NotificationMessage, Notifier
from .discord import DiscordChannel
from .summary import build_summary_message

__all__ = [
    "DiscordChannel",
    "NotificationChannel",
    "NotificationMessage",
    "Notifier",
    "build_summary_message",
]
