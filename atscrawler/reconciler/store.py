"""
Persistent store interface and the in-memory implementation.

The reconciliation engine only talks to the `RecordStore` protocol. Every
store must provide `transaction()`: a context manager that serializes whole
reconciliation cycles and makes a cycle's changes visible all at once or not
at all.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import ContextManager, Iterable, Optional, Protocol

from .models import Record

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """Raised when a persistent store operation fails."""

    pass


class RecordStore(Protocol):
    """Boundary contract for record persistence."""

    def find_by_url(self, url: str) -> Optional[Record]:
        """Return the record with this URL, or None."""

    def find_active(self) -> list[Record]:
        """Return all active records."""

    def find_active_last_seen_before(self, cutoff: date) -> list[Record]:
        """Return active records whose last_seen is strictly before cutoff."""

    def save(self, record: Record) -> None:
        """Insert or update one record keyed by URL."""

    def save_all(self, records: Iterable[Record]) -> None:
        """Insert or update several records."""

    def count_active(self) -> int:
        """Return the number of active records."""

    def transaction(self) -> ContextManager["RecordStore"]:
        """Run a block atomically and exclusively."""


class InMemoryRecordStore:
    """
    Dictionary-backed store used by tests and dry runs.

    A re-entrant lock is held for the whole transaction and by every read, so
    a concurrent reader never observes a half-applied cycle. Records are
    copied on the way in and out; callers mutate their own copies until they
    call save().
    """

    def __init__(self, records: Iterable[Record] = ()):
        self._lock = threading.RLock()
        self._records: dict[str, Record] = {r.url: replace(r) for r in records}

    @contextmanager
    def transaction(self):
        with self._lock:
            snapshot = {url: replace(r) for url, r in self._records.items()}
            try:
                yield self
            except BaseException:
                self._records = snapshot
                logger.warning("In-memory transaction rolled back")
                raise

    def find_by_url(self, url: str) -> Optional[Record]:
        with self._lock:
            record = self._records.get(url)
            return replace(record) if record else None

    def find_active(self) -> list[Record]:
        with self._lock:
            return [replace(r) for r in self._records.values() if r.active]

    def find_active_last_seen_before(self, cutoff: date) -> list[Record]:
        with self._lock:
            return [
                replace(r)
                for r in self._records.values()
                if r.active and r.last_seen < cutoff
            ]

    def save(self, record: Record) -> None:
        with self._lock:
            self._records[record.url] = replace(record)

    def save_all(self, records: Iterable[Record]) -> None:
        with self._lock:
            for record in records:
                self._records[record.url] = replace(record)

    def count_active(self) -> int:
        with self._lock:
            return sum(1 for r in self._records.values() if r.active)

    def all_records(self) -> list[Record]:
        with self._lock:
            return [replace(r) for r in self._records.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
