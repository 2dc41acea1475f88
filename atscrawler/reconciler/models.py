"""
Persistent record model and sync statistics.

A Record is the URL-deduplicated representation of a posting across all
fetch cycles. Field validation happens once, in `Record.from_posting()`, so
the reconciliation loop can skip a bad posting without half-building a row.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Optional

from atscrawler.source_extractor.base import Posting

DEFAULT_STATUS = "Awaiting"

MAX_SOURCE_LENGTH = 100
MAX_COMPANY_LENGTH = 200
MAX_TITLE_LENGTH = 300
MAX_URL_LENGTH = 2048
MAX_STATUS_LENGTH = 50
MAX_NOTES_LENGTH = 2048


class InvalidPostingError(ValueError):
    """Raised when a posting cannot become a valid Record."""

    pass


def _require_text(value: Optional[str], field_name: str, max_length: int) -> str:
    """Trim a required text field and enforce its length cap."""
    if value is None or not str(value).strip():
        raise InvalidPostingError(f"{field_name} cannot be null or blank")
    value = str(value).strip()
    if len(value) > max_length:
        raise InvalidPostingError(f"{field_name} must be less than {max_length} characters")
    return value


def validate_url(url: Optional[str]) -> str:
    """Return the trimmed URL or raise InvalidPostingError."""
    if url is None or not url.strip():
        raise InvalidPostingError("URL cannot be null or blank")
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise InvalidPostingError("URL must start with http:// or https://")
    if len(url) > MAX_URL_LENGTH:
        raise InvalidPostingError(f"URL too long (max {MAX_URL_LENGTH} characters)")
    return url


def clean_status(status: Optional[str]) -> Optional[str]:
    """Return a trimmed non-blank status, or None for blank input."""
    if status is None or not status.strip():
        return None
    status = status.strip()
    if len(status) > MAX_STATUS_LENGTH:
        raise InvalidPostingError(f"status must be less than {MAX_STATUS_LENGTH} characters")
    return status


def clean_notes(notes: Optional[str]) -> Optional[str]:
    """Return trimmed non-blank notes capped at MAX_NOTES_LENGTH, or None."""
    if notes is None or not notes.strip():
        return None
    return notes.strip()[:MAX_NOTES_LENGTH]


@dataclass
class Record:
    """A job record as stored in the persistent store."""

    source: str
    company: str
    title: str
    url: str
    first_seen: date
    last_seen: date
    active: bool = True
    status: str = DEFAULT_STATUS
    notes: Optional[str] = None

    @classmethod
    def from_posting(cls, posting: Posting, today: date) -> "Record":
        """
        Build a new active Record first observed today.

        The posting's note (location fragment) seeds `notes`; a posting that
        carries a notes override uses that instead.

        Raises:
            InvalidPostingError: If a required field is blank or invalid
        """
        return cls(
            source=_require_text(posting.source, "source", MAX_SOURCE_LENGTH),
            company=_require_text(posting.company, "company", MAX_COMPANY_LENGTH),
            title=_require_text(posting.title, "title", MAX_TITLE_LENGTH),
            url=validate_url(posting.url),
            first_seen=today,
            last_seen=today,
            active=True,
            status=clean_status(posting.status) or DEFAULT_STATUS,
            notes=clean_notes(posting.notes) or clean_notes(posting.note),
        )

    def __str__(self) -> str:
        url = self.url if len(self.url) <= 50 else self.url[:50] + "..."
        return f"Record[{self.source}] {self.company} - {self.title} ({url})"


@dataclass
class ReconcileStats:
    """Counters produced by one reconcile pass."""

    new: int = 0
    updated: int = 0
    reactivated: int = 0
    errors: int = 0


@dataclass
class SyncStats:
    """Summary of one sync cycle, handed to notification/export channels."""

    new: int = 0
    updated: int = 0
    reactivated: int = 0
    expired: int = 0
    total_active: int = 0
    errors: int = 0
    fetched: int = 0
    admitted: int = 0
    failed_sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def format_summary(self) -> str:
        """Render the summary as the plain-text message sent to channels."""
        lines = [
            "📊 **Sync Summary**",
            f"• New: {self.new}",
            f"• Updated: {self.updated}",
            f"• Reactivated: {self.reactivated}",
            f"• Expired: {self.expired}",
            f"• Total active: {self.total_active}",
        ]
        if self.errors:
            lines.append(f"• Skipped postings: {self.errors}")
        if self.failed_sources:
            lines.append(
                f"• Failed sources ({len(self.failed_sources)}): "
                + ", ".join(self.failed_sources)
            )
        return "\n".join(lines)
