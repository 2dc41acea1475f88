"""
BreezyHR adapter.

BreezyHR has no public JSON API, so the company portal page is scraped:

    https://{company}.breezy.hr/

The portal markup has changed several times; the card selectors are tried in
order and the first one that matches anything wins.
"""

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..base import Posting, ResponseShape, SourceAdapter

CARD_SELECTORS = (
    "a.position",
    "a[href*='/p/']",
    "a[href*='/position/']",
    ".position-card a",
    ".job-listing a",
)
TITLE_SELECTORS = "h2, .position-title, .job-title"
LOCATION_SELECTORS = ".location, .job-location"
MAX_TITLE_LENGTH = 200


class BreezyAdapter(SourceAdapter):
    """Adapter for BreezyHR portals (unstructured HTML)."""

    response_shape = ResponseShape.UNSTRUCTURED

    def __init__(self, employers=(), http=None, label=None):
        super().__init__(source_name="BreezyHR", employers=employers, http=http, label=label)

    def build_url(self, employer: str) -> str:
        return f"https://{employer}.breezy.hr/"

    def parse_html(
        self, employer: str, soup: BeautifulSoup, base_url: str
    ) -> list[Posting]:
        out = []
        seen_urls = set()

        for card in self.select_first(soup, CARD_SELECTORS):
            url = urljoin(base_url, card.get("href", ""))
            if "breezy.hr" not in url or url in seen_urls:
                continue

            title_tag = card.select_one(TITLE_SELECTORS)
            title = (
                title_tag.get_text(" ", strip=True)
                if title_tag
                else card.get_text(" ", strip=True)
            )
            if len(title) > MAX_TITLE_LENGTH:
                continue

            location_tag = card.select_one(LOCATION_SELECTORS)
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
