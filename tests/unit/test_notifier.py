from datetime import date
from unittest import mock

import pytest
import requests

from atscrawler.notifier import DiscordChannel, NotificationMessage, Notifier, build_summary_message
from atscrawler.notifier.discord import DISCORD_MAX_CONTENT_LENGTH
from atscrawler.reconciler.models import Record, SyncStats

WEBHOOK = "https://discord.com/api/webhooks/123/abc"


def make_record(n, first_seen, active=True):
    return Record(
        source="Greenhouse",
        company=f"company-{n}",
        title=f"Java Developer {n}",
        url=f"https://boards.greenhouse.io/c/jobs/{n}",
        first_seen=first_seen,
        last_seen=first_seen,
        active=active,
    )


def test_discord_channel_posts_content(monkeypatch):
    """Test Discord channel posts the message as webhook content."""
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", WEBHOOK)
    session = mock.Mock(spec=requests.Session)
    session.post.return_value.status_code = 204

    channel = DiscordChannel(session=session, timeout=5.0)
    channel.send(NotificationMessage(subject="Daily", text="📊 **Sync Summary**\n• New: 1"))

    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args == (WEBHOOK,)
    assert kwargs["timeout"] == 5.0
    assert kwargs["json"]["content"].startswith("**Daily**\n📊 **Sync Summary**")
    session.post.return_value.raise_for_status.assert_called_once()


def test_discord_channel_requires_webhook(monkeypatch):
    """Test Discord channel raises when the webhook is missing."""
    monkeypatch.delenv("DISCORD_WEBHOOK_URL", raising=False)

    with pytest.raises(ValueError, match="DISCORD_WEBHOOK_URL"):
        DiscordChannel()


def test_discord_channel_from_env_returns_none_when_unset(monkeypatch):
    """Test an unconfigured webhook means no channel rather than an error."""
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", "  ")
    assert DiscordChannel.from_env() is None

    monkeypatch.setenv("DISCORD_WEBHOOK_URL", WEBHOOK)
    assert DiscordChannel.from_env().webhook_url == WEBHOOK


def test_discord_render_truncates_to_api_limit():
    """Test content longer than the Discord limit is truncated."""
    message = NotificationMessage(subject="", text="x" * 5000)
    content = DiscordChannel.render(message)

    assert len(content) == DISCORD_MAX_CONTENT_LENGTH
    assert content.endswith("...")


def test_discord_http_error_propagates_to_caller():
    """Test webhook HTTP errors surface from send() so Notifier can log them."""
    session = mock.Mock(spec=requests.Session)
    session.post.return_value.raise_for_status.side_effect = requests.HTTPError("401")

    channel = DiscordChannel(webhook_url=WEBHOOK, session=session)
    with pytest.raises(requests.HTTPError):
        channel.send(NotificationMessage(subject="s", text="t"))


def test_notifier_continues_on_channel_failure():
    """Test notifier continues to next channel if one fails."""
    failing = mock.Mock()
    failing.send.side_effect = RuntimeError("webhook down")
    working = mock.Mock()

    notifier = Notifier([failing, working])
    delivered = notifier.notify(NotificationMessage(subject="s", text="t"))

    assert delivered == 1
    working.send.assert_called_once()


def test_notifier_without_channels_is_noop():
    """Test notifier with no channels sends nothing and does not fail."""
    notifier = Notifier([])
    assert notifier.channel_count == 0
    assert notifier.notify(NotificationMessage(subject="s", text="t")) == 0


def test_build_summary_message_lists_newest_active_records():
    """Test summary includes counters and the most recently discovered openings."""
    stats = SyncStats(new=2, updated=1, total_active=3)
    records = [
        make_record(1, date(2025, 1, 1)),
        make_record(2, date(2025, 1, 31)),
        make_record(3, date(2025, 1, 15)),
        make_record(4, date(2025, 2, 1), active=False),
    ]

    message = build_summary_message(stats, records, max_listed=2)

    assert message.subject
    assert message.text.startswith("📊 **Sync Summary**")
    assert "• New: 2" in message.text
    listed = [line for line in message.text.splitlines() if "Java Developer" in line]
    assert listed == [
        "• company-2 - Java Developer 2: https://boards.greenhouse.io/c/jobs/2",
        "• company-3 - Java Developer 3: https://boards.greenhouse.io/c/jobs/3",
    ]
    assert message.metadata["total_active"] == 3


def test_build_summary_message_without_records():
    """Test summary without records carries only the counters."""
    message = build_summary_message(SyncStats(), [])

    assert "Latest openings" not in message.text


pytestmark = pytest.mark.unit
