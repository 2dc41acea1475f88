"""
Reconciliation engine.

Merges admitted postings into the persistent record set and expires records
that have not been observed within the retention window.

Key Features:
- URL is the identity: known URLs are updated, unknown ones inserted
- Reactivation: an inactive record that reappears becomes active again
- User-owned fields: non-blank status/notes are never blanked by a re-fetch
- Idempotent: replaying the same input changes counters, not end state
- Atomic: each operation runs inside one store transaction
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from atscrawler.source_extractor.base import Posting

from .models import (
    InvalidPostingError,
    ReconcileStats,
    Record,
    SyncStats,
    clean_notes,
    clean_status,
    validate_url,
)
from .store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


class ReconciliationEngine:
    """
    Applies fetch cycles to a RecordStore.

    Example:
        >>> engine = ReconciliationEngine(InMemoryRecordStore())
        >>> engine.reconcile(admitted_postings, today=date(2025, 1, 10))
        ReconcileStats(new=12, updated=0, reactivated=0, errors=0)
        >>> engine.expire(today=date(2025, 1, 10), retention_days=30)
        0
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def reconcile(
        self, postings: Iterable[Posting], today: Optional[date] = None
    ) -> ReconcileStats:
        """
        Insert, update or reactivate one record per admitted posting.

        Invalid postings are skipped and counted in `errors`. Store failures
        propagate (RecordStoreError) and roll the whole pass back.

        Args:
            postings: Admitted postings, in any order
            today: Observation date (defaults to date.today())

        Returns:
            ReconcileStats with new/updated/reactivated/errors counters
        """
        today = today or date.today()
        stats = ReconcileStats()
        seen_urls: set[str] = set()

        with self.store.transaction():
            for posting in postings:
                try:
                    url = validate_url(posting.url)
                except InvalidPostingError as e:
                    stats.errors += 1
                    logger.warning(
                        "Skipping invalid posting",
                        extra={
                            "source": posting.source,
                            "title": posting.title,
                            "error": str(e),
                        },
                    )
                    continue

                if url in seen_urls:
                    logger.debug("Duplicate URL in batch, skipping", extra={"url": url})
                    continue

                try:
                    outcome = self._apply(posting, url, today)
                except InvalidPostingError as e:
                    stats.errors += 1
                    logger.warning(
                        "Skipping invalid posting",
                        extra={"url": url, "source": posting.source, "error": str(e)},
                    )
                    continue

                seen_urls.add(url)
                if outcome == "new":
                    stats.new += 1
                elif outcome == "reactivated":
                    stats.reactivated += 1
                else:
                    stats.updated += 1

        logger.info(
            "Reconcile completed",
            extra={
                "new": stats.new,
                "updated": stats.updated,
                "reactivated": stats.reactivated,
                "errors": stats.errors,
            },
        )
        return stats

    def _apply(self, posting: Posting, url: str, today: date) -> str:
        """Merge one posting into the store; return 'new', 'updated' or 'reactivated'."""
        existing = self.store.find_by_url(url)

        if existing is None:
            record = Record.from_posting(posting, today)
            self.store.save(record)
            return "new"

        # Validate overrides before touching the record
        status = clean_status(posting.status)
        notes = clean_notes(posting.notes)

        existing.last_seen = max(existing.last_seen, today)
        outcome = "updated"
        if not existing.active:
            existing.active = True
            outcome = "reactivated"

        if status:
            existing.status = status
        if notes:
            existing.notes = notes

        self.store.save(existing)
        return outcome

    def expire(self, today: Optional[date] = None, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
        """
        Deactivate active records last seen before `today - retention_days`.

        Records are never deleted. Running this twice for the same day
        expires nothing the second time.

        Returns:
            Number of records deactivated
        """
        if retention_days < 0:
            raise ValueError("retention_days must be >= 0")

        today = today or date.today()
        cutoff = today - timedelta(days=retention_days)

        with self.store.transaction():
            stale = self.store.find_active_last_seen_before(cutoff)
            for record in stale:
                record.active = False
            self.store.save_all(stale)

        if stale:
            logger.info(
                "Expired %d old records",
                len(stale),
                extra={"expired": len(stale), "cutoff": cutoff.isoformat()},
            )
        else:
            logger.info("No records to expire", extra={"cutoff": cutoff.isoformat()})
        return len(stale)

    def run_cycle(
        self,
        postings: Iterable[Posting],
        today: Optional[date] = None,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ) -> SyncStats:
        """
        Reconcile, expire and count active records in a single transaction.

        Either the whole cycle is committed or none of it is.
        """
        today = today or date.today()
        with self.store.transaction():
            merged = self.reconcile(postings, today=today)
            expired = self.expire(today=today, retention_days=retention_days)
            total_active = self.store.count_active()

        return SyncStats(
            new=merged.new,
            updated=merged.updated,
            reactivated=merged.reactivated,
            expired=expired,
            total_active=total_active,
            errors=merged.errors,
        )
