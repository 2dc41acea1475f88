"""ATS Crawler Package.

This package contains all components of the ATS job crawler:
- source_extractor: Fetches job postings from applicant tracking systems
- orchestrator: Runs all source adapters concurrently with retries and timeouts
- admission: Keyword-based admission filter
- reconciler: Merges admitted postings into persistent records
- notifier: Sends the sync summary to configured channels
- sync: Daily sync pipeline and command-line entry point
"""

__version__ = "0.1.0"
