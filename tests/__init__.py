"""ATS Crawler Test Suite.

This package contains unit and integration tests for the ATS crawler.

Test Structure:
- unit/: Unit tests for individual functions and classes
- integration/: Integration tests against a real PostgreSQL (TEST_DATABASE_URL)
"""
