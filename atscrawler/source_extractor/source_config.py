"""
Source configuration for the source-extractor.

Parses the `sources` section of the crawler YAML file into immutable
`SourceConfig` values and turns the enabled ones into adapter instances
through the adapter registry.

YAML example:

    sources:
      greenhouse:
        adapter: greenhouse
        employers: [stripe, airbnb]
      breezy:
        adapter: breezy
        enabled: false
        employers: [acme]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .adapters import ADAPTER_REGISTRY
from .base import SourceAdapter
from .http import HttpClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceConfig:
    """Configuration for a single source."""

    name: str
    adapter: str
    enabled: bool = True
    employers: tuple[str, ...] = ()


def parse_sources_section(section: Mapping[str, Any] | None) -> tuple[SourceConfig, ...]:
    """
    Validate the `sources` mapping and return one SourceConfig per entry.

    Args:
        section: Mapping of source name to `{adapter, enabled, employers}`.
            None or an empty mapping means no sources.

    Returns:
        Tuple of SourceConfig in file order.

    Raises:
        ValueError: If an entry is malformed or names an unknown adapter.
    """
    if not section:
        return ()
    if not isinstance(section, Mapping):
        raise ValueError("`sources` section must be a mapping")

    sources = []
    for name, data in section.items():
        if not isinstance(data, Mapping):
            raise ValueError(f"Invalid source configuration for '{name}'")

        adapter = data.get("adapter", name)
        if not isinstance(adapter, str) or not adapter.strip():
            raise ValueError(f"Source '{name}' must define a non-empty `adapter` string")
        adapter = adapter.strip().lower()
        if adapter not in ADAPTER_REGISTRY:
            raise ValueError(
                f"Source '{name}' uses unknown adapter '{adapter}'. "
                f"Known adapters: {sorted(ADAPTER_REGISTRY)}"
            )

        employers = data.get("employers") or []
        if isinstance(employers, str) or not isinstance(employers, (list, tuple)):
            raise ValueError(f"`employers` for source '{name}' must be a list")

        sources.append(
            SourceConfig(
                name=str(name),
                adapter=adapter,
                enabled=bool(data.get("enabled", True)),
                employers=tuple(str(e).strip() for e in employers if str(e).strip()),
            )
        )

    return tuple(sources)


def build_adapters(
    sources: tuple[SourceConfig, ...], http: HttpClient | None = None
) -> list[SourceAdapter]:
    """
    Instantiate an adapter for every enabled source.

    All adapters share the given HttpClient (one is created if omitted).
    """
    http = http or HttpClient()
    adapters = []
    for source in sources:
        if not source.enabled:
            logger.info("Source disabled, skipping", extra={"source": source.name})
            continue
        adapter_cls = ADAPTER_REGISTRY[source.adapter]
        adapters.append(adapter_cls(employers=source.employers, http=http, label=source.name))

    logger.info(
        "Built source adapters",
        extra={
            "adapters_count": len(adapters),
            "adapters": [repr(a) for a in adapters],
        },
    )
    return adapters


__all__ = ["SourceConfig", "parse_sources_section", "build_adapters"]
