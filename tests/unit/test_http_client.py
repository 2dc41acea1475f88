"""
Unit tests for the shared HttpClient.

The requests session is mocked so status-code classification can be checked
without network access.
"""

from unittest.mock import Mock

import pytest
import requests

from atscrawler.source_extractor.http import USER_AGENTS, HttpClient, TransientFetchError


def make_client(status_code=200, text="ok", side_effect=None):
    session = Mock(spec=requests.Session)
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        response = Mock()
        response.status_code = status_code
        response.text = text
        session.get.return_value = response
    return HttpClient(connect_timeout=3.0, read_timeout=7.0, session=session), session


class TestHttpClient:
    """Tests for HttpClient.get_text()."""

    def test_success_returns_body(self):
        client, session = make_client(200, '{"jobs": []}')

        assert client.get_text("https://boards-api.greenhouse.io/v1/boards/x/jobs") == '{"jobs": []}'

    def test_request_uses_timeouts_and_browser_headers(self):
        client, session = make_client()

        client.get_text("https://example.com/jobs")

        _, kwargs = session.get.call_args
        assert kwargs["timeout"] == (3.0, 7.0)
        assert kwargs["headers"]["User-Agent"] in USER_AGENTS
        assert "Accept" in kwargs["headers"]

    @pytest.mark.parametrize("url", ["", "ftp://example.com", "example.com/jobs", None])
    def test_invalid_url_returns_none_without_request(self, url):
        client, session = make_client()

        assert client.get_text(url) is None
        session.get.assert_not_called()

    @pytest.mark.parametrize("status_code", [400, 403, 404, 410])
    def test_client_errors_return_none(self, status_code):
        """A missing or forbidden board is zero postings, not a failure."""
        client, _ = make_client(status_code, "Not Found")
        assert client.get_text("https://example.com/jobs") is None

    @pytest.mark.parametrize("status_code", [429, 500, 502, 503])
    def test_rate_limit_and_server_errors_are_transient(self, status_code):
        client, _ = make_client(status_code, "busy")

        with pytest.raises(TransientFetchError, match=str(status_code)):
            client.get_text("https://example.com/jobs")

    def test_timeout_is_transient(self):
        client, _ = make_client(side_effect=requests.exceptions.Timeout("read timed out"))

        with pytest.raises(TransientFetchError) as exc_info:
            client.get_text("https://example.com/jobs")
        assert isinstance(exc_info.value.__cause__, requests.exceptions.Timeout)

    def test_connection_error_is_transient(self):
        client, _ = make_client(side_effect=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(TransientFetchError):
            client.get_text("https://example.com/jobs")

    def test_transient_error_is_a_connection_error(self):
        """Retry decorators configured for ConnectionError also catch it."""
        assert issubclass(TransientFetchError, ConnectionError)


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
