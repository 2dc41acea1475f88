"""
Configuration Loader for the Sync Job

This module loads and validates the crawler configuration from crawler.yml.
The file is read once per run into an immutable CrawlerConfig snapshot.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from atscrawler.admission import FilterPolicy
from atscrawler.source_extractor import SourceConfig, parse_sources_section

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CRAWLER_CONFIG"


def _number(section: dict[str, Any], key: str, default, cast=float, minimum=0):
    """Read a numeric setting, rejecting values below `minimum`."""
    value = section.get(key)
    if value is None:
        return default
    try:
        value = cast(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"crawler.{key} must be numeric, got: {value!r}") from e
    if value < minimum:
        raise ValueError(f"crawler.{key} must be >= {minimum}, got: {value}")
    return value


@dataclass(frozen=True)
class CrawlerSettings:
    """Runtime knobs for fetching and reconciliation."""

    max_workers: Optional[int] = None
    timeout_seconds: float = 600.0
    max_retries: int = 2
    retry_delay_seconds: float = 1.0
    retention_days: int = 30
    http_connect_timeout: float = 10.0
    http_read_timeout: float = 15.0

    @classmethod
    def from_dict(cls, section: Optional[dict[str, Any]]) -> "CrawlerSettings":
        section = section or {}
        if not isinstance(section, dict):
            raise ValueError("`crawler` section must be a mapping")
        return cls(
            max_workers=_number(section, "max_workers", None, cast=int, minimum=1),
            timeout_seconds=_number(section, "timeout_seconds", 600.0, minimum=0.001),
            max_retries=_number(section, "max_retries", 2, cast=int),
            retry_delay_seconds=_number(section, "retry_delay_seconds", 1.0),
            retention_days=_number(section, "retention_days", 30, cast=int),
            http_connect_timeout=_number(section, "http_connect_timeout", 10.0, minimum=0.001),
            http_read_timeout=_number(section, "http_read_timeout", 15.0, minimum=0.001),
        )


@dataclass(frozen=True)
class CrawlerConfig:
    """Complete crawler configuration."""

    sources: tuple[SourceConfig, ...] = ()
    policy: FilterPolicy = field(default_factory=FilterPolicy)
    settings: CrawlerSettings = field(default_factory=CrawlerSettings)

    @property
    def enabled_sources(self) -> tuple[SourceConfig, ...]:
        return tuple(s for s in self.sources if s.enabled)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "CrawlerConfig":
        """Create CrawlerConfig from dictionary."""
        if not isinstance(config_dict, dict):
            raise ValueError("Configuration root must be a mapping")

        filter_dict = config_dict.get("filter") or {}
        if not isinstance(filter_dict, dict):
            raise ValueError("`filter` section must be a mapping")
        for key in ("role_keywords", "include_keywords", "exclude_keywords"):
            value = filter_dict.get(key)
            if value is not None and not isinstance(value, list):
                raise ValueError(f"filter.{key} must be a list")

        policy = FilterPolicy(
            role_keywords=tuple(filter_dict.get("role_keywords") or ()),
            include_keywords=tuple(filter_dict.get("include_keywords") or ()),
            exclude_keywords=tuple(filter_dict.get("exclude_keywords") or ()),
            combination=filter_dict.get("combination") or "all",
        )

        return cls(
            sources=parse_sources_section(config_dict.get("sources")),
            policy=policy,
            settings=CrawlerSettings.from_dict(config_dict.get("crawler")),
        )


def default_config_path() -> str:
    """Return CRAWLER_CONFIG if set, else config/crawler.yml under the project root."""
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    project_root = Path(__file__).parent.parent.parent
    return str(project_root / "config" / "crawler.yml")


def load_crawler_config(config_path: Optional[str] = None) -> CrawlerConfig:
    """
    Load crawler configuration from YAML file.

    Args:
        config_path: Path to crawler.yml. If None, uses CRAWLER_CONFIG or the
            default location.

    Returns:
        CrawlerConfig with sources, filter policy and runtime settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid

    Example:
        >>> config = load_crawler_config('config/crawler.yml')
        >>> config.settings.retention_days
        30
    """
    if config_path is None:
        config_path = default_config_path()

    logger.info("Loading crawler configuration", extra={"config_path": config_path})

    try:
        with open(config_path, encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)

        if not config_dict:
            logger.warning("Empty configuration file, using defaults")
            config_dict = {}

        config = CrawlerConfig.from_dict(config_dict)

        logger.info(
            "Crawler configuration loaded successfully",
            extra={
                "sources": len(config.sources),
                "enabled_sources": len(config.enabled_sources),
                "role_keywords": len(config.policy.role_keywords),
                "retention_days": config.settings.retention_days,
            },
        )
        return config

    except FileNotFoundError:
        logger.error(f"Configuration file not found: {config_path}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        raise
