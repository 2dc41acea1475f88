"""
Admission filter package.

Keeps only the postings that match the configured keyword policy.
"""

from .filters import DEFAULT_INCLUDE_KEYWORDS, AdmissionFilter, FilterPolicy

__all__ = ["AdmissionFilter", "DEFAULT_INCLUDE_KEYWORDS", "FilterPolicy"]
