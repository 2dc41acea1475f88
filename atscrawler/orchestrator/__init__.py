"""
Fetch orchestration package.

Runs all source adapters concurrently with per-adapter timeouts and retries.
"""

from .fetch import FetchOrchestrator, FetchOutcome, FetchReport
from .retry import RetryCancelled, compute_delay, retry_with_backoff

__all__ = [
    "FetchOrchestrator",
    "FetchOutcome",
    "FetchReport",
    "RetryCancelled",
    "compute_delay",
    "retry_with_backoff",
]
