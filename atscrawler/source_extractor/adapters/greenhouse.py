"""
Greenhouse adapter.

Uses the public Greenhouse job board API, which serves one JSON document per
board:

    https://boards-api.greenhouse.io/v1/boards/{board}/jobs
"""

from typing import Any

from ..base import Posting, ResponseShape, SourceAdapter

BASE_URL = "https://boards-api.greenhouse.io/v1/boards"


class GreenhouseAdapter(SourceAdapter):
    """Adapter for Greenhouse job boards (structured JSON)."""

    response_shape = ResponseShape.STRUCTURED

    def __init__(self, employers=(), http=None, label=None):
        super().__init__(source_name="Greenhouse", employers=employers, http=http, label=label)

    def build_url(self, employer: str) -> str:
        return f"{BASE_URL}/{employer}/jobs"

    def parse_json(self, employer: str, data: Any) -> list[Posting]:
        """
        Map a board document to postings.

        Expected shape:
            {"jobs": [{"title": ..., "absolute_url": ..., "location": {"name": ...}}]}
        """
        if not isinstance(data, dict):
            return []
        jobs = data.get("jobs")
        if not isinstance(jobs, list):
            return []

        out = []
        for job in jobs:
            location = job.get("location") or {}
            posting = self.make_posting(
                employer,
                title=job.get("title"),
                url=job.get("absolute_url"),
                note=location.get("name") if isinstance(location, dict) else None,
            )
            if posting:
                out.append(posting)
        return out
