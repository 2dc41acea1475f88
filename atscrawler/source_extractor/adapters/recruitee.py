"""
Recruitee adapter.

Each Recruitee company exposes its open offers as JSON:

    https://{company}.recruitee.com/api/offers/
"""

from typing import Any

from ..base import Posting, ResponseShape, SourceAdapter


class RecruiteeAdapter(SourceAdapter):
    """Adapter for Recruitee career sites (structured JSON)."""

    response_shape = ResponseShape.STRUCTURED

    def __init__(self, employers=(), http=None, label=None):
        super().__init__(source_name="Recruitee", employers=employers, http=http, label=label)

    def build_url(self, employer: str) -> str:
        return f"https://{employer}.recruitee.com/api/offers/"

    def parse_json(self, employer: str, data: Any) -> list[Posting]:
        if not isinstance(data, dict):
            return []
        offers = data.get("offers")
        if not isinstance(offers, list):
            return []

        out = []
        for offer in offers:
            posting = self.make_posting(
                employer,
                title=offer.get("title"),
                url=offer.get("careers_url"),
                note=_location_text(offer),
            )
            if posting:
                out.append(posting)
        return out


def _location_text(offer: dict[str, Any]) -> str:
    """Flatten the location fields of an offer into one string."""
    parts = []
    for location in offer.get("locations") or []:
        if isinstance(location, dict):
            parts.extend(
                str(location[key]) for key in ("city", "country") if location.get(key)
            )
    if not parts and offer.get("location"):
        parts.append(str(offer["location"]))
    if offer.get("remote"):
        parts.append("remote")
    return ", ".join(parts)
