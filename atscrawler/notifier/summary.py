"""
Sync summary rendering.

Turns the counters of one sync cycle into a NotificationMessage. The most
recently discovered active records are appended so the message is useful on
its own, without opening the database.
"""

from collections.abc import Iterable

from atscrawler.reconciler.models import Record, SyncStats

from .base import NotificationMessage

DEFAULT_SUBJECT = "ATS Crawler - Daily Summary"
MAX_LISTED_RECORDS = 10


def build_summary_message(
    stats: SyncStats,
    active_records: Iterable[Record] = (),
    max_listed: int = MAX_LISTED_RECORDS,
) -> NotificationMessage:
    """
    Build the summary notification for one sync cycle.

    Args:
        stats: Counters of the finished cycle
        active_records: Active records after the cycle; the newest ones
            (by first_seen, then last_seen) are listed under the counters
        max_listed: Maximum number of records to list

    Returns:
        NotificationMessage with the stats dict as metadata
    """
    lines = [stats.format_summary()]

    newest = sorted(
        (r for r in active_records if r.active),
        key=lambda r: (r.first_seen, r.last_seen),
        reverse=True,
    )[:max_listed]
    if newest:
        lines.append("")
        lines.append("🆕 **Latest openings**")
        for record in newest:
            lines.append(f"• {record.company} - {record.title}: {record.url}")

    return NotificationMessage(
        subject=DEFAULT_SUBJECT,
        text="\n".join(lines),
        metadata=stats.to_dict(),
    )
