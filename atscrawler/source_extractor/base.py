"""Source Adapter Base Class.

This module defines the interface that all ATS adapters implement, plus the
shared fetch loop that walks every configured employer, downloads the board
and hands the body to the right parser.

Adapters differ only in how they build URLs and how they read a response:
- STRUCTURED adapters read a JSON document by fixed paths
- UNSTRUCTURED adapters scrape an HTML page with fallback CSS selectors
- HYBRID adapters look at the body and pick one of the two
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from bs4 import BeautifulSoup

from .http import HttpClient

logger = logging.getLogger(__name__)


class FetchCancelled(Exception):
    """Raised when a fetch is abandoned between employer requests."""

    pass


@dataclass(frozen=True)
class Posting:
    """A single job listing returned by an adapter for one fetch cycle.

    `note` carries a location or description fragment used by the admission
    filter. `status` and `notes` are overrides that only postings coming from
    an external edit path carry; adapters leave them empty.
    """

    source: str  # ATS name (e.g., "Greenhouse")
    company: str  # Employer identifier or display name
    title: str
    url: str  # Identity key for reconciliation
    note: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    def search_text(self) -> str:
        """Lower-cased text the admission filter matches keywords against."""
        return f"{self.title} {self.url} {self.note or ''}".lower()


class ResponseShape(Enum):
    """How an adapter interprets the body served for an employer."""

    STRUCTURED = "structured"
    UNSTRUCTURED = "unstructured"
    HYBRID = "hybrid"


class SourceAdapter(ABC):
    """Abstract base class for ATS source adapters.

    Subclasses set `response_shape`, implement `build_url()` and override
    `parse_json()` and/or `parse_html()`. The base `fetch()` takes care of:
    - Iterating the configured employers in order
    - Skipping empty responses (unknown employer, 404)
    - Treating malformed responses as zero postings instead of an error
    - Letting transient network errors propagate so the orchestrator retries

    Usage:
        class MyAtsAdapter(SourceAdapter):
            response_shape = ResponseShape.STRUCTURED

            def build_url(self, employer):
                return f"https://api.my-ats.com/{employer}/jobs"

            def parse_json(self, employer, data):
                return [self.make_posting(employer, j["title"], j["url"]) for j in data]
    """

    response_shape: ResponseShape = ResponseShape.STRUCTURED

    def __init__(
        self,
        source_name: str,
        employers: Sequence[str] = (),
        http: Optional[HttpClient] = None,
        label: Optional[str] = None,
    ):
        """Initialize the adapter.

        Args:
            source_name: Human-readable source name stored on every posting
                        (e.g., "Greenhouse", "Lever")
            employers: Ordered employer identifiers (board slugs) to fetch
            http: HTTP helper used for requests (a default one is created if omitted)
            label: Name of the configured source this adapter runs for, used in
                   fetch reports (defaults to source_name)
        """
        self.source_name = source_name
        self.label = label or source_name
        self.employers = tuple(e.strip() for e in employers if e and e.strip())
        self.http = http or HttpClient()

    @abstractmethod
    def build_url(self, employer: str) -> str:
        """Build the board URL for one employer identifier."""

    def parse_json(self, employer: str, data: Any) -> list[Posting]:
        """Extract postings from a parsed JSON document."""
        return []

    def parse_html(
        self, employer: str, soup: BeautifulSoup, base_url: str
    ) -> list[Posting]:
        """Extract postings from a parsed HTML page."""
        return []

    def fetch(self, cancel_event: Optional[threading.Event] = None) -> list[Posting]:
        """Fetch postings for every configured employer.

        Args:
            cancel_event: When set, no further employer is requested

        Returns:
            List of postings across all employers (possibly empty)

        Raises:
            TransientFetchError: If a request failed in a way worth retrying
            FetchCancelled: If cancel_event was set before an employer request
        """
        if not self.employers:
            logger.warning(
                "No employers configured for source",
                extra={"source": self.source_name},
            )
            return []

        results: list[Posting] = []
        for employer in self.employers:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(
                    "Fetch from %s cancelled before %s",
                    self.label,
                    employer,
                    extra={"source": self.label, "employer": employer},
                )
                raise FetchCancelled(f"{self.label} cancelled before {employer}")

            url = self.build_url(employer)
            body = self.http.get_text(url)

            if not body or not body.strip():
                logger.warning(
                    "Empty response from %s",
                    url,
                    extra={"source": self.source_name, "employer": employer},
                )
                continue

            postings = self._parse_body(employer, body, url)
            results.extend(postings)

            logger.info(
                "%s (%s) returned %d postings",
                self.source_name,
                employer,
                len(postings),
                extra={
                    "source": self.source_name,
                    "employer": employer,
                    "postings": len(postings),
                },
            )

        return results

    def _parse_body(self, employer: str, body: str, url: str) -> list[Posting]:
        """Dispatch a response body to the JSON or HTML parser."""
        shape = self.response_shape
        if shape is ResponseShape.HYBRID:
            stripped = body.lstrip()
            looks_like_json = stripped.startswith("{") or stripped.startswith("[")
            shape = ResponseShape.STRUCTURED if looks_like_json else ResponseShape.UNSTRUCTURED

        try:
            if shape is ResponseShape.STRUCTURED:
                try:
                    data = json.loads(body)
                except ValueError:
                    # Invalid slugs often get an HTML error page instead of JSON
                    logger.debug(
                        "%s (%s) returned non-JSON content, skipping",
                        self.source_name,
                        employer,
                    )
                    return []
                return self.parse_json(employer, data)

            soup = BeautifulSoup(body, "html.parser")
            postings = self.parse_html(employer, soup, url)
            if not postings:
                logger.warning(
                    "%s (%s) parsed zero postings from HTML, selectors may be outdated",
                    self.source_name,
                    employer,
                    extra={"source": self.source_name, "employer": employer},
                )
            return postings

        except (KeyError, TypeError, AttributeError, ValueError) as e:
            logger.error(
                "Malformed response from %s for %s",
                self.source_name,
                employer,
                extra={
                    "source": self.source_name,
                    "employer": employer,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return []

    @staticmethod
    def select_first(soup: BeautifulSoup, selectors: Sequence[str]) -> list:
        """Return the elements of the first selector that matches anything.

        Upstream markup changes without notice, so HTML adapters list several
        redundant selectors from most to least specific.
        """
        for selector in selectors:
            elements = soup.select(selector)
            if elements:
                return elements
        return []

    def make_posting(
        self,
        employer: str,
        title: Optional[str],
        url: Optional[str],
        note: Optional[str] = None,
    ) -> Optional[Posting]:
        """Build a posting, or return None when title or url is blank."""
        title = (title or "").strip()
        url = (url or "").strip()
        if not title or not url:
            return None
        note = (note or "").strip() or None
        return Posting(
            source=self.source_name,
            company=employer,
            title=title,
            url=url,
            note=note,
        )

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return (
            f"{self.__class__.__name__}(source='{self.label}', "
            f"employers={len(self.employers)})"
        )
