"""
Sync job package.

Wires the fetch, admission, reconciliation and notification stages into one
cycle run from the command line (`python -m atscrawler.sync.main`).
"""

from .config_loader import CrawlerConfig, CrawlerSettings, load_crawler_config

__all__ = ["CrawlerConfig", "CrawlerSettings", "load_crawler_config"]
