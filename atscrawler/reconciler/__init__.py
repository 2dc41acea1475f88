"""
Reconciler package.

Merges admitted postings into persistent records and expires stale ones.

Main components:
- Record: Persistent, URL-keyed job record
- RecordStore: Storage protocol (InMemoryRecordStore, PostgresRecordStore)
- ReconciliationEngine: reconcile / expire / run_cycle
"""

from .engine import DEFAULT_RETENTION_DAYS, ReconciliationEngine
from .models import DEFAULT_STATUS, InvalidPostingError, ReconcileStats, Record, SyncStats
from .store import InMemoryRecordStore, RecordStore, RecordStoreError

__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "DEFAULT_STATUS",
    "InMemoryRecordStore",
    "InvalidPostingError",
    "ReconcileStats",
    "ReconciliationEngine",
    "Record",
    "RecordStore",
    "RecordStoreError",
    "SyncStats",
]
