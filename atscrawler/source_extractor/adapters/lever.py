"""
Lever adapter.

Lever's public postings API returns a JSON array of postings per company:

    https://api.lever.co/v0/postings/{company}?mode=json
"""

from typing import Any

from ..base import Posting, ResponseShape, SourceAdapter

BASE_URL = "https://api.lever.co/v0/postings"


class LeverAdapter(SourceAdapter):
    """Adapter for Lever postings (structured JSON)."""

    response_shape = ResponseShape.STRUCTURED

    def __init__(self, employers=(), http=None, label=None):
        super().__init__(source_name="Lever", employers=employers, http=http, label=label)

    def build_url(self, employer: str) -> str:
        return f"{BASE_URL}/{employer}?mode=json"

    def parse_json(self, employer: str, data: Any) -> list[Posting]:
        # Unknown companies get {"ok": false, ...} instead of a list
        if not isinstance(data, list):
            return []

        out = []
        for job in data:
            categories = job.get("categories") or {}
            note_parts = [
                categories.get("location"),
                job.get("workplaceType"),
            ]
            posting = self.make_posting(
                employer,
                title=job.get("text"),
                url=job.get("hostedUrl"),
                note=" ".join(p for p in note_parts if p),
            )
            if posting:
                out.append(posting)
        return out
