"""Source Extractor.

This package is responsible for fetching job postings from applicant
tracking systems and turning them into `Posting` objects.

Main components:
- SourceAdapter: Abstract base class for all ATS adapters
- Posting: Data class for a fetched job posting
- HttpClient: Shared HTTP helper with timeouts and error classification
- Adapters: ATS-specific implementations (in adapters/ directory)
"""

from .base import FetchCancelled, Posting, ResponseShape, SourceAdapter
from .http import HttpClient, TransientFetchError
from .source_config import SourceConfig, build_adapters, parse_sources_section

__all__ = [
    "FetchCancelled",
    "HttpClient",
    "Posting",
    "ResponseShape",
    "SourceAdapter",
    "SourceConfig",
    "TransientFetchError",
    "build_adapters",
    "parse_sources_section",
]
