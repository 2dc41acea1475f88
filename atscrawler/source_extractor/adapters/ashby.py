"""
Ashby adapter.

Ashby serves a JSON job board from its posting API, but some boards answer
with the rendered HTML job list instead (hosted or disabled API boards).
The adapter is hybrid: JSON bodies are read by field path, anything else is
scraped.

    https://api.ashbyhq.com/posting-api/job-board/{board}
"""

from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..base import Posting, ResponseShape, SourceAdapter

API_URL = "https://api.ashbyhq.com/posting-api/job-board"
BOARD_URL = "https://jobs.ashbyhq.com"

LINK_SELECTORS = (
    "a[href*='/applications/']",
    "div[class*='JobsList'] a",
    "div[class*='ashby-job'] a",
    "a[href*='/jobs/']",
    "a[data-job-id], .job-link",
)
TITLE_SELECTORS = ".ashby-job-posting-title, [class*='Title']"
LOCATION_SELECTORS = ".ashby-job-posting-location, [class*='Location']"
MAX_TITLE_LENGTH = 200


class AshbyAdapter(SourceAdapter):
    """Adapter for Ashby job boards (hybrid JSON/HTML)."""

    response_shape = ResponseShape.HYBRID

    def __init__(self, employers=(), http=None, label=None):
        super().__init__(source_name="Ashby", employers=employers, http=http, label=label)

    def build_url(self, employer: str) -> str:
        return f"{API_URL}/{employer}"

    def parse_json(self, employer: str, data: Any) -> list[Posting]:
        if not isinstance(data, dict) or not isinstance(data.get("jobs"), list):
            return []

        out = []
        for job in data["jobs"]:
            if job.get("isListed") is False:
                continue
            note_parts = [job.get("location")]
            if job.get("isRemote"):
                note_parts.append("remote")
            posting = self.make_posting(
                employer,
                title=job.get("title"),
                url=job.get("jobUrl"),
                note=", ".join(p for p in note_parts if p),
            )
            if posting:
                out.append(posting)
        return out

    def parse_html(
        self, employer: str, soup: BeautifulSoup, base_url: str
    ) -> list[Posting]:
        out = []
        seen_urls = set()

        for link in self.select_first(soup, LINK_SELECTORS):
            href = link.get("href", "")
            url = urljoin(f"{BOARD_URL}/", href) if href.startswith("/") else href
            if "ashbyhq.com" not in url or url in seen_urls:
                continue

            title_tag = link.select_one(TITLE_SELECTORS)
            title = (
                title_tag.get_text(" ", strip=True)
                if title_tag
                else link.get_text(" ", strip=True)
            )
            if len(title) > MAX_TITLE_LENGTH:
                continue

            location_tag = link.select_one(LOCATION_SELECTORS)
            posting = self.make_posting(
                employer,
                title=title,
                url=url,
                note=location_tag.get_text(" ", strip=True) if location_tag else None,
            )
            if posting:
                seen_urls.add(url)
                out.append(posting)

        return out
