"""
HTTP helper shared by all source adapters.

Wraps a `requests.Session` with browser-like headers, a rotating user agent
and explicit timeouts, and classifies failures:
- Missing boards (404 and other client errors) come back as None
- Rate limiting and server errors raise TransientFetchError
- Connection problems and timeouts raise TransientFetchError
"""

import logging
import random
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 15.0

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
)


class TransientFetchError(ConnectionError):
    """Raised when a request failed in a way that a later attempt may fix."""

    pass


class HttpClient:
    """
    Thin GET client used by adapters.

    One instance may be shared by several adapters running in parallel;
    `requests.Session` is used only for connection pooling and carries no
    per-request state.
    """

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the HTTP helper.

        Args:
            connect_timeout: Seconds to wait for the TCP connection
            read_timeout: Seconds to wait for response data
            session: Optional preconfigured session (tests inject a mock)
        """
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": random.choice(USER_AGENTS),
            "Accept": "text/html,application/json,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
        }

    def get_text(self, url: str) -> Optional[str]:
        """
        Perform a GET request and return the body text.

        Args:
            url: Absolute http(s) URL

        Returns:
            Response body, or None if the URL is invalid or the board does not exist

        Raises:
            TransientFetchError: On connection errors, timeouts, 429 or 5xx responses
        """
        if not url or not url.startswith(("http://", "https://")):
            logger.warning("Invalid URL, skipping request", extra={"url": url})
            return None

        try:
            response = self.session.get(
                url,
                headers=self._headers(),
                timeout=(self.connect_timeout, self.read_timeout),
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise TransientFetchError(f"GET {url} failed: {e}") from e

        status = response.status_code
        if status == 429 or status >= 500:
            raise TransientFetchError(f"GET {url} returned HTTP {status}")

        if status >= 400:
            logger.warning(
                "HTTP %d for %s",
                status,
                url,
                extra={"url": url, "status_code": status},
            )
            return None

        return response.text
