"""Tests for watchparser.query - fetch, fallback and file extraction."""

from __future__ import annotations

import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from watchparser.items import RelatedContent
from watchparser.query import (
    FetchError,
    extract,
    fetch,
    fetch_html,
    fetch_related_html,
    parse_file,
)

SHELL_HTML = (
    "<html><body><div id='related'><div class='animate-pulse'></div></div>"
    "<p>Loading related shows and movies for this title, please wait while the "
    "page finishes rendering in your browser window.</p></body></html>"
)


# ---------------------------------------------------------------------------
# extract() / parse_file() - no network
# ---------------------------------------------------------------------------

class TestExtract:
    def test_returns_related_content(self, related_html):
        assert isinstance(extract(related_html), RelatedContent)

    def test_empty_html(self):
        result = extract("")
        assert result.movies == {}
        assert result.tv_shows == {}

    def test_no_related_section(self):
        assert extract("<html><body><h1>Test</h1></body></html>").is_empty()

    def test_origin_override(self, related_html):
        result = extract(related_html, origin="http://localhost:8080")
        assert result.tv_shows["Overall"][0].link == "http://localhost:8080/show/70523-dark"

    def test_parse_file(self, related_path):
        result = parse_file(related_path)
        assert not result.is_empty()
        assert len(result.tv_shows["Overall"]) == 2

    def test_parse_file_missing(self, tmp_path):
        with pytest.raises(OSError):
            parse_file(tmp_path / "missing.html")


# ---------------------------------------------------------------------------
# fetch_html() - HTTP fetch (mocked)
# ---------------------------------------------------------------------------

class TestFetchHtml:
    def _make_mock_response(self, body: str, charset: str = "utf-8") -> MagicMock:
        resp = MagicMock()
        resp.read.return_value = body.encode(charset)
        resp.headers.get.return_value = ""
        resp.headers.get_content_charset.return_value = charset
        resp.__enter__ = lambda s: s
        resp.__exit__ = MagicMock(return_value=False)
        return resp

    def test_returns_string(self):
        mock_resp = self._make_mock_response("<html><body><p>Hello world</p></body></html>")
        with patch("urllib.request.urlopen", return_value=mock_resp):
            result = fetch_html("https://goodwatch.app/show/1-a")
        assert "Hello world" in result

    def test_http_error_raises_fetch_error(self):
        with patch(
            "urllib.request.urlopen",
            side_effect=urllib.error.HTTPError(
                "https://goodwatch.app/show/1-a", 404, "Not Found", {}, None,
            ),
        ), pytest.raises(FetchError) as exc_info:
            fetch_html("https://goodwatch.app/show/1-a")
        assert exc_info.value.status == 404

    def test_retries_transient_errors(self):
        url = "https://goodwatch.app/show/1-a"
        mock_resp = self._make_mock_response("<html>ok</html>")
        with patch(
            "urllib.request.urlopen",
            side_effect=[urllib.error.HTTPError(url, 503, "Unavailable", {}, None), mock_resp],
        ) as mock_open, patch("watchparser.query.time.sleep") as mock_sleep:
            assert fetch_html(url, max_retries=1) == "<html>ok</html>"
        assert mock_open.call_count == 2
        mock_sleep.assert_called_once()

    def test_url_error_raises_after_retries(self):
        with patch(
            "urllib.request.urlopen",
            side_effect=urllib.error.URLError("Connection refused"),
        ), patch("watchparser.query.time.sleep"), pytest.raises(FetchError):
            fetch_html("https://goodwatch.app/show/1-a", max_retries=2)

    def test_invalid_scheme_raises_fetch_error(self):
        with pytest.raises(FetchError) as exc_info:
            fetch_html("ftp://goodwatch.app/show/1-a")
        assert "scheme" in str(exc_info.value).lower()

    def test_fetch_error_carries_url(self):
        url = "https://goodwatch.app/show/1-a"
        with patch(
            "urllib.request.urlopen",
            side_effect=urllib.error.HTTPError(url, 403, "Forbidden", {}, None),
        ), pytest.raises(FetchError) as exc_info:
            fetch_html(url)
        assert exc_info.value.url == url


# ---------------------------------------------------------------------------
# fetch_related_html() - static first, browser fallback
# ---------------------------------------------------------------------------

class TestFetchRelatedHtml:
    URL = "https://goodwatch.app/show/66732-stranger-things"

    def test_static_page_used_as_is(self, related_html):
        with patch("watchparser.query.fetch_html", return_value=related_html) as mock_http, \
             patch("watchparser.query._fetch_html_playwright") as mock_pw:
            assert fetch_related_html(self.URL) == related_html
        mock_http.assert_called_once()
        mock_pw.assert_not_called()

    def test_render_shell_falls_back_to_browser(self, related_html):
        with patch("watchparser.query.fetch_html", return_value=SHELL_HTML), \
             patch("watchparser.query._fetch_html_playwright", return_value=related_html) as mock_pw:
            assert fetch_related_html(self.URL) == related_html
        mock_pw.assert_called_once()

    def test_fetch_error_falls_back_to_browser(self, related_html):
        with patch(
            "watchparser.query.fetch_html",
            side_effect=FetchError("HTTP 403", url=self.URL, status=403),
        ), patch("watchparser.query._fetch_html_playwright", return_value=related_html) as mock_pw:
            assert fetch_related_html(self.URL) == related_html
        mock_pw.assert_called_once()

    def test_user_agent_kept_on_fallback(self, related_html):
        with patch("watchparser.query.fetch_html", return_value=SHELL_HTML), \
             patch("watchparser.query._fetch_html_playwright", return_value=related_html) as mock_pw:
            fetch_related_html(self.URL, user_agent="TestBot/1.0")
        assert mock_pw.call_args.kwargs["user_agent"] == "TestBot/1.0"

    def test_user_agent_kept_after_fetch_error(self, related_html):
        with patch("watchparser.query.fetch_html", side_effect=FetchError("boom", url=self.URL)), \
             patch("watchparser.query._fetch_html_playwright", return_value=related_html) as mock_pw:
            fetch_related_html(self.URL, user_agent="TestBot/1.0")
        assert mock_pw.call_args.kwargs["user_agent"] == "TestBot/1.0"

    def test_render_js_skips_static_fetch(self, related_html):
        with patch("watchparser.query._fetch_html_playwright", return_value=related_html) as mock_pw, \
             patch("watchparser.query.fetch_html") as mock_http:
            fetch_related_html(self.URL, render_js=True)
        mock_pw.assert_called_once()
        mock_http.assert_not_called()

    def test_browser_failure_propagates(self):
        with patch("watchparser.query.fetch_html", side_effect=FetchError("boom", url=self.URL)), \
             patch(
                 "watchparser.query._fetch_html_playwright",
                 side_effect=FetchError("no browser", url=self.URL),
             ), pytest.raises(FetchError, match="no browser"):
            fetch_related_html(self.URL)


def test_missing_playwright_raises_fetch_error():
    from watchparser.query import _fetch_html_playwright

    with patch.dict("sys.modules", {"playwright": None, "playwright.sync_api": None}), \
         pytest.raises(FetchError, match="playwright"):
        _fetch_html_playwright("https://goodwatch.app/show/1-a")


def test_fetch_extracts(related_html):
    with patch("watchparser.query.fetch_html", return_value=related_html):
        result = fetch("https://goodwatch.app/show/66732-stranger-things")
    assert list(result.tv_shows) == ["Overall", "Dark", "Mystery"]
