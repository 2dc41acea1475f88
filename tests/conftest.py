"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import os
from datetime import date
from typing import Optional

import pytest

from atscrawler.source_extractor.base import Posting


@pytest.fixture(scope="session")
def database_url() -> Optional[str]:
    """
    Provide database URL for integration tests.

    Only TEST_DATABASE_URL is honoured, so a developer's DATABASE_URL never
    receives test writes. Tests needing a database skip when it is unset.

    Scope: session (created once per test run)

    Returns:
        Optional[str]: PostgreSQL connection URL, or None
    """
    return os.getenv("TEST_DATABASE_URL")


@pytest.fixture(scope="function")
def today() -> date:
    """Fixed observation date so retention arithmetic is deterministic."""
    return date(2025, 1, 31)


@pytest.fixture(scope="function")
def sample_posting() -> Posting:
    """
    Provide a sample admitted posting.

    Scope: function (created fresh for each test)

    Returns:
        Posting: Java backend role at a remote-friendly employer
    """
    return Posting(
        source="Lever",
        company="acme",
        title="Java Backend",
        url="https://a.co/1",
        note="Remote",
    )


@pytest.fixture(scope="function")
def sample_posting_batch() -> list[Posting]:
    """
    Provide a batch of postings across sources for filter and reconcile tests.

    Scope: function (created fresh for each test)

    Returns:
        list[Posting]: Mixed batch, some of which a Java/remote policy rejects
    """
    return [
        Posting("Greenhouse", "stripe", "Senior Java Engineer", "https://boards.greenhouse.io/stripe/jobs/1", "Remote - LATAM"),
        Posting("Lever", "plaid", "Kotlin Developer", "https://jobs.lever.co/plaid/2", "Remote"),
        Posting("Ashby", "ramp", "JavaScript Developer", "https://jobs.ashbyhq.com/ramp/3", "Remote"),
        Posting("Recruitee", "bunq", "Java Developer", "https://bunq.recruitee.com/o/4", "Amsterdam"),
    ]


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
