"""
Fetch orchestrator.

Runs every configured source adapter in parallel and gathers their postings.

Key Features:
- One thread per adapter (or a bounded pool via max_workers)
- Independent timeout per adapter, measured from when its task starts
- Local retries with backoff; a failing adapter never aborts the others
- Fan-in: tasks only return a FetchOutcome, the calling thread collects them
"""

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Optional, Sequence

from atscrawler.source_extractor.base import FetchCancelled, Posting, SourceAdapter

from .retry import LINEAR, RetryCancelled, retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 600.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY_SECONDS = 1.0

# Upper bound on how long the collector blocks while no task has started yet
_POLL_INTERVAL_SECONDS = 0.5


@dataclass(frozen=True)
class FetchOutcome:
    """Result of running one adapter."""

    source_name: str
    success: bool
    postings: tuple[Posting, ...] = ()
    error: Optional[str] = None
    attempts: int = 0
    duration_seconds: float = 0.0

    @property
    def posting_count(self) -> int:
        return len(self.postings)


@dataclass
class FetchReport:
    """Aggregate of one orchestrator run. Posting order is not meaningful."""

    postings: list[Posting] = field(default_factory=list)
    outcomes: list[FetchOutcome] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)

    @property
    def succeeded_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed_sources(self) -> list[str]:
        return [o.source_name for o in self.outcomes if not o.success]


class _Task:
    """Control block the collector keeps for one submitted adapter."""

    def __init__(self, adapter: SourceAdapter):
        self.adapter = adapter
        self.cancel_event = threading.Event()
        self.started_at: Optional[float] = None
        self.future: Optional[Future] = None


class FetchOrchestrator:
    """
    Runs source adapters concurrently.

    Example:
        >>> orchestrator = FetchOrchestrator(timeout_seconds=120, max_retries=2)
        >>> report = orchestrator.run_all(adapters)
        >>> len(report.postings), report.failed_sources
        (412, ['BreezyHR'])
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
        backoff_strategy: str = LINEAR,
    ):
        """
        Initialize the orchestrator.

        Args:
            max_workers: Thread pool size. None runs every adapter in its own thread.
            timeout_seconds: Wall-time budget per adapter, retries included
            max_retries: Extra attempts after the first failure
            retry_delay_seconds: Base backoff delay, multiplied by the attempt number
            backoff_strategy: "linear" (default) or "exponential"
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        self.max_workers = max_workers
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self.backoff_strategy = backoff_strategy

    def run_all(self, adapters: Sequence[SourceAdapter]) -> FetchReport:
        """
        Run all adapters and collect their postings.

        Returns:
            FetchReport with the aggregate posting list and one outcome per adapter.
            Never raises because of an adapter failure.
        """
        report = FetchReport()
        if not adapters:
            logger.info("No adapters configured, nothing to fetch")
            return report

        start_time = time.monotonic()
        workers = self.max_workers or len(adapters)
        workers = min(workers, len(adapters))

        logger.info(
            "Starting parallel fetch from %d sources",
            len(adapters),
            extra={
                "sources_count": len(adapters),
                "max_workers": workers,
                "timeout_seconds": self.timeout_seconds,
                "max_retries": self.max_retries,
            },
        )

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch")
        tasks: dict[Future, _Task] = {}
        try:
            for adapter in adapters:
                task = _Task(adapter)
                task.future = executor.submit(self._run_task, task)
                tasks[task.future] = task

            pending = set(tasks)
            while pending:
                wait(pending, timeout=self._next_wait(tasks, pending), return_when=FIRST_COMPLETED)
                now = time.monotonic()

                for future in list(pending):
                    task = tasks[future]
                    if future.done():
                        pending.discard(future)
                        self._collect(report, future.result())
                    elif (
                        task.started_at is not None
                        and now - task.started_at >= self.timeout_seconds
                    ):
                        pending.discard(future)
                        task.cancel_event.set()
                        future.cancel()
                        logger.error(
                            "Adapter %s timed out after %g seconds",
                            task.adapter.label,
                            self.timeout_seconds,
                            extra={"source": task.adapter.label},
                        )
                        self._collect(
                            report,
                            FetchOutcome(
                                source_name=task.adapter.label,
                                success=False,
                                error=f"timed out after {self.timeout_seconds:g}s",
                                duration_seconds=now - task.started_at,
                            ),
                        )
        finally:
            # Abandoned tasks stop before their next employer request
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            "Fetch completed: %d successful, %d failed, %d total postings",
            report.succeeded_count,
            report.failed_count,
            len(report.postings),
            extra={
                "succeeded": report.succeeded_count,
                "failed": report.failed_count,
                "failed_sources": report.failed_sources,
                "total_postings": len(report.postings),
                "duration_seconds": time.monotonic() - start_time,
            },
        )
        return report

    def _next_wait(self, tasks: dict[Future, _Task], pending: set) -> float:
        """Seconds until the earliest running task hits its deadline."""
        now = time.monotonic()
        remaining = [
            tasks[f].started_at + self.timeout_seconds - now
            for f in pending
            if tasks[f].started_at is not None
        ]
        if not remaining:
            return _POLL_INTERVAL_SECONDS
        if len(remaining) < len(pending):
            # Queued tasks may start at any moment and need their own deadline
            return max(0.0, min(min(remaining), _POLL_INTERVAL_SECONDS))
        return max(0.0, min(remaining))

    @staticmethod
    def _collect(report: FetchReport, outcome: FetchOutcome) -> None:
        report.outcomes.append(outcome)
        if outcome.success:
            report.postings.extend(outcome.postings)
            logger.info(
                "%s returned %d postings",
                outcome.source_name,
                outcome.posting_count,
                extra={"source": outcome.source_name, "postings": outcome.posting_count},
            )
        else:
            logger.warning(
                "%s failed: %s",
                outcome.source_name,
                outcome.error,
                extra={"source": outcome.source_name, "error": outcome.error},
            )

    def _run_task(self, task: _Task) -> FetchOutcome:
        """Run one adapter with retries. Always returns an outcome."""
        task.started_at = time.monotonic()
        adapter = task.adapter
        attempts = {"count": 0}

        def attempt() -> list[Posting]:
            attempts["count"] += 1
            return adapter.fetch(cancel_event=task.cancel_event)

        fetch_with_retry = retry_with_backoff(
            max_retries=self.max_retries,
            initial_delay=self.retry_delay_seconds,
            exceptions=(Exception,),
            strategy=self.backoff_strategy,
            cancel_event=task.cancel_event,
        )(attempt)

        try:
            logger.debug("Starting fetch from %s", adapter.label)
            postings = fetch_with_retry()
            return FetchOutcome(
                source_name=adapter.label,
                success=True,
                postings=tuple(postings),
                attempts=attempts["count"],
                duration_seconds=time.monotonic() - task.started_at,
            )
        except (RetryCancelled, FetchCancelled) as e:
            return FetchOutcome(
                source_name=adapter.label,
                success=False,
                error=str(e),
                attempts=attempts["count"],
                duration_seconds=time.monotonic() - task.started_at,
            )
        except Exception as e:
            logger.error(
                "Adapter %s failed after %d attempts",
                adapter.label,
                attempts["count"],
                extra={
                    "source": adapter.label,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return FetchOutcome(
                source_name=adapter.label,
                success=False,
                error=f"{type(e).__name__}: {e}",
                attempts=attempts["count"],
                duration_seconds=time.monotonic() - task.started_at,
            )
