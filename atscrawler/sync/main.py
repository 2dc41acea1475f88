"""
Sync Job - Main Entry Point

Runs one full crawl cycle: fetch every enabled ATS source in parallel,
admit postings through the keyword filter, reconcile them into the record
store, expire stale records and send the summary notification.

Usage:
    python -m atscrawler.sync.main [OPTIONS]

Options:
    --config PATH        Path to crawler.yml (default: $CRAWLER_CONFIG or config/crawler.yml)
    --store NAME         Record store: 'postgres' (default) or 'memory'
    --dry-run            Fetch and filter, reconcile in memory, send no notification
    --verbose            Enable debug logging
    --help               Show this message and exit

Examples:
    # Daily run against PostgreSQL:
    python -m atscrawler.sync.main

    # Try a new keyword configuration without touching the database:
    python -m atscrawler.sync.main --config config/crawler.yml --dry-run --verbose

Exit Codes:
    0: Success
    1: Partial failure (some sources failed or some postings were skipped)
    2: Fatal error (bad configuration, database failure, etc.)
    130: Interrupted by user
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from dotenv import load_dotenv

from atscrawler.admission import AdmissionFilter
from atscrawler.notifier import DiscordChannel, Notifier, build_summary_message
from atscrawler.orchestrator import FetchOrchestrator
from atscrawler.reconciler import (
    InMemoryRecordStore,
    ReconciliationEngine,
    RecordStore,
    RecordStoreError,
    SyncStats,
)
from atscrawler.source_extractor import HttpClient, SourceAdapter, build_adapters

from .config_loader import CrawlerConfig, load_crawler_config

logger = logging.getLogger(__name__)

STORE_POSTGRES = "postgres"
STORE_MEMORY = "memory"


@dataclass
class SyncResult:
    """Outcome of one sync cycle. `stats` is always populated."""

    success: bool
    stats: SyncStats = field(default_factory=SyncStats)
    duration_seconds: float = 0.0
    error: Optional[str] = None

    @property
    def partial(self) -> bool:
        return self.success and bool(self.stats.failed_sources or self.stats.errors)

    @property
    def exit_code(self) -> int:
        if not self.success:
            return 2
        return 1 if self.partial else 0


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Crawl ATS job boards and reconcile postings into the record store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to crawler.yml",
        default=None,
    )

    parser.add_argument(
        "--store",
        choices=[STORE_POSTGRES, STORE_MEMORY],
        help="Record store backend",
        default=STORE_POSTGRES,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Reconcile into a throwaway in-memory store and skip notifications",
        dest="dry_run",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def build_notifier() -> Notifier:
    """Build a Notifier with every channel configured in the environment."""
    channels = []
    discord = DiscordChannel.from_env()
    if discord is not None:
        channels.append(discord)
    else:
        logger.info("DISCORD_WEBHOOK_URL not set, notifications disabled")
    return Notifier(channels)


def run_sync(
    config: CrawlerConfig,
    store: RecordStore,
    adapters: Optional[Sequence[SourceAdapter]] = None,
    orchestrator: Optional[FetchOrchestrator] = None,
    notifier: Optional[Notifier] = None,
    today: Optional[date] = None,
) -> SyncResult:
    """
    Run one sync cycle.

    Args:
        config: Crawler configuration snapshot
        store: Record store to reconcile into
        adapters: Adapters to run (built from config.sources if None)
        orchestrator: Fetch orchestrator (built from config.settings if None)
        notifier: Notifier for the summary (None sends nothing)
        today: Observation date (defaults to date.today())

    Returns:
        SyncResult. Adapter failures never make the sync fail; a store
        failure does, and leaves the previously committed state untouched.
    """
    start_time = time.monotonic()
    settings = config.settings
    today = today or date.today()

    logger.info(
        "Starting sync",
        extra={
            "sources": len(config.enabled_sources),
            "retention_days": settings.retention_days,
            "today": today.isoformat(),
        },
    )

    if adapters is None:
        http = HttpClient(
            connect_timeout=settings.http_connect_timeout,
            read_timeout=settings.http_read_timeout,
        )
        adapters = build_adapters(config.sources, http=http)

    if orchestrator is None:
        orchestrator = FetchOrchestrator(
            max_workers=settings.max_workers,
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
            retry_delay_seconds=settings.retry_delay_seconds,
        )

    report = orchestrator.run_all(adapters)
    admitted = AdmissionFilter(config.policy).filter(report.postings)

    engine = ReconciliationEngine(store)
    try:
        stats = engine.run_cycle(admitted, today=today, retention_days=settings.retention_days)
    except RecordStoreError as e:
        logger.error(
            "Sync aborted, reconciliation rolled back",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        stats = SyncStats()
        stats.fetched = len(report.postings)
        stats.admitted = len(admitted)
        stats.failed_sources = report.failed_sources
        return SyncResult(
            success=False,
            stats=stats,
            duration_seconds=time.monotonic() - start_time,
            error=str(e),
        )

    stats.fetched = len(report.postings)
    stats.admitted = len(admitted)
    stats.failed_sources = report.failed_sources

    if notifier is not None:
        try:
            active_records = store.find_active()
        except RecordStoreError as e:
            logger.warning("Could not load active records for summary", extra={"error": str(e)})
            active_records = []
        notifier.notify(build_summary_message(stats, active_records))

    duration = time.monotonic() - start_time
    logger.info(
        "Sync completed",
        extra={"duration_seconds": duration, **stats.to_dict()},
    )
    return SyncResult(success=True, stats=stats, duration_seconds=duration)


def build_store(kind: str) -> RecordStore:
    """Create the record store selected on the command line."""
    if kind == STORE_MEMORY:
        return InMemoryRecordStore()

    from atscrawler.reconciler.db_operations import PostgresRecordStore

    store = PostgresRecordStore()
    store.ensure_schema()
    return store


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the sync job.

    Returns:
        Exit code (0 = success, 1 = partial failure, 2 = fatal error, 130 = interrupted)
    """
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        config = load_crawler_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        if args.dry_run:
            logger.info("DRY RUN: reconciling into an in-memory store, no notifications")
            store = InMemoryRecordStore()
            notifier = None
        else:
            store = build_store(args.store)
            notifier = build_notifier()

        result = run_sync(config, store, notifier=notifier)

        if not result.success:
            logger.error(f"Sync failed: {result.error}")
            return 2

        logger.info("\n" + result.stats.format_summary())

        if result.partial:
            logger.warning(
                f"Completed with errors: {len(result.stats.failed_sources)} sources failed, "
                f"{result.stats.errors} postings skipped"
            )
        else:
            logger.info("Sync completed successfully")
        return result.exit_code

    except (RecordStoreError, ValueError) as e:
        logger.error(f"Fatal error: {e}")
        return 2

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    except Exception as e:
        logger.error(
            "Unexpected fatal error",
            extra={
                "error": str(e),
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        return 2


if __name__ == "__main__":
    sys.exit(main())
