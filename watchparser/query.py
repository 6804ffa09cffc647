"""watchparser.query - fetch a title page and extract its related titles.

Uses the stdlib (``urllib``) for plain HTTP and falls back to a headless
Chromium browser (Playwright) when the static page is a client-side
rendering shell, a block page, or cannot be fetched at all.

Basic usage::

    from watchparser.query import fetch

    content = fetch("https://goodwatch.app/show/66732-stranger-things")
    print(content.to_json())

Low-level access::

    from watchparser.query import fetch_related_html, extract

    html = fetch_related_html("https://goodwatch.app/show/66732-stranger-things")
    content = extract(html)

Saved pages::

    from watchparser.query import parse_file

    content = parse_file("stranger-things.html")
"""

from __future__ import annotations

import contextlib
import gzip
import logging
import random
import time
import urllib.error
import urllib.request
import zlib
from pathlib import Path
from urllib.parse import urlparse

from watchparser import settings
from watchparser.extractors.related import extract_related
from watchparser.extractors.render_detection import detect_render_issue
from watchparser.items import RelatedContent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class FetchError(RuntimeError):
    """Raised when a page cannot be fetched or rendered.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
        body   -- decoded error body, when the server sent one
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int = 0,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


def _decode_response_body(raw: bytes, headers: object | None) -> str:
    encoding = ""
    if headers is not None:
        try:
            encoding = str(headers.get("Content-Encoding", "")).lower().strip()
        except Exception:
            encoding = ""

    if encoding == "gzip":
        raw = gzip.decompress(raw)
    elif encoding in ("deflate", "zlib"):
        raw = zlib.decompress(raw)

    charset = "utf-8"
    if headers is not None:
        try:
            charset = headers.get_content_charset("utf-8") or "utf-8"
        except Exception:
            charset = "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except (LookupError, ValueError):
        return raw.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Low-level HTTP fetch
# ---------------------------------------------------------------------------

_RETRY_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


def _backoff(attempt: int, retry_after: int = 0) -> float:
    return max(retry_after, 2 ** attempt) + random.uniform(0, 1)


def fetch_html(
    url: str,
    *,
    timeout: int = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
    max_retries: int = settings.MAX_RETRIES,
) -> str:
    """Fetch *url* and return the response body as a decoded string.

    Retries up to *max_retries* times with jittered exponential backoff on
    transient errors (429, 500, 502, 503, 504, and network-level failures).

    Raises:
        FetchError: On HTTP errors, connection failures, or invalid URLs.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent or settings.USER_AGENT,
            "Accept": (
                "text/html,application/xhtml+xml,application/xml;"
                "q=0.9,image/avif,image/webp,*/*;q=0.8"
            ),
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "DNT": "1",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Sec-Fetch-User": "?1",
            "Cache-Control": "max-age=0",
        },
    )

    last_exc: FetchError | None = None
    for attempt in range(max_retries + 1):
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                raw: bytes = resp.read()
                try:
                    return _decode_response_body(raw, resp.headers)
                except (OSError, zlib.error) as exc:
                    raise FetchError(
                        f"Decompression failed for {url}: {exc}", url=url,
                    ) from exc

        except urllib.error.HTTPError as exc:
            body_text = ""
            with contextlib.suppress(Exception):
                body_raw = exc.read()
                if body_raw:
                    body_text = _decode_response_body(body_raw, exc.headers)
            error = FetchError(
                f"HTTP {exc.code} fetching {url}: {exc.reason}",
                url=url,
                status=exc.code,
                body=body_text,
            )
            if exc.code in _RETRY_CODES and attempt < max_retries:
                retry_after = 0
                with contextlib.suppress(Exception):
                    ra_header = exc.headers.get("Retry-After", "") if exc.headers else ""
                    if ra_header and ra_header.strip().isdigit():
                        retry_after = int(ra_header)
                delay = _backoff(attempt, retry_after)
                logger.debug(
                    "HTTP %d for %s; retrying in %.1fs (attempt %d/%d)",
                    exc.code, url, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                last_exc = error
                continue
            raise error from exc

        except urllib.error.URLError as exc:
            if attempt < max_retries:
                delay = _backoff(attempt)
                logger.debug(
                    "URL error for %s; retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc.reason,
                )
                time.sleep(delay)
                last_exc = FetchError(f"URL error fetching {url}: {exc.reason}", url=url)
                continue
            raise FetchError(f"URL error fetching {url}: {exc.reason}", url=url) from exc

        except OSError as exc:
            if attempt < max_retries:
                delay = _backoff(attempt)
                logger.debug(
                    "Network error for %s; retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc,
                )
                time.sleep(delay)
                last_exc = FetchError(f"Network error fetching {url}: {exc}", url=url)
                continue
            raise FetchError(f"Network error fetching {url}: {exc}", url=url) from exc

    raise last_exc or FetchError(f"All retries exhausted for {url}", url=url)


def _fetch_html_playwright(
    url: str,
    *,
    timeout: int = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
) -> str:
    """Render *url* in headless Chromium and return the resulting DOM.

    Waits for network idle, then for the related block to appear, then a
    short settle delay so the carousels finish hydrating.
    """
    try:
        from playwright.sync_api import sync_playwright
    except ImportError as exc:
        raise FetchError(
            "Browser rendering requires playwright: pip install playwright && "
            "playwright install chromium",
            url=url,
        ) from exc

    logger.info("Launching headless browser for %s", url)
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True, args=settings.BROWSER_LAUNCH_ARGS)
            try:
                ctx = browser.new_context(
                    user_agent=user_agent or settings.BROWSER_USER_AGENT,
                    viewport=settings.BROWSER_VIEWPORT,
                )
                page = ctx.new_page()
                page.goto(url, timeout=timeout * 1_000, wait_until="networkidle")

                try:
                    page.wait_for_selector(
                        settings.RELATED_WAIT_SELECTOR,
                        timeout=settings.RELATED_WAIT_TIMEOUT_MS,
                    )
                    logger.debug("Related section found for %s", url)
                except Exception:
                    logger.warning(
                        "%s not found within %d ms for %s; continuing",
                        settings.RELATED_WAIT_SELECTOR, settings.RELATED_WAIT_TIMEOUT_MS, url,
                    )

                page.wait_for_timeout(settings.HYDRATION_SETTLE_MS)
                html: str = page.content()
            finally:
                with contextlib.suppress(Exception):
                    browser.close()
    except FetchError:
        raise
    except Exception as exc:
        raise FetchError(f"Playwright error fetching {url}: {exc}", url=url) from exc

    if not html.strip():
        raise FetchError(f"Playwright returned empty page for {url}", url=url)
    logger.info("Fetched %s with headless browser", url)
    return html


def fetch_related_html(
    url: str,
    *,
    render_js: bool = False,
    timeout: int = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
) -> str:
    """Return HTML for *url* that contains the rendered related block.

    With ``render_js=True`` the browser is used directly.  Otherwise the
    static fetch is tried first; the browser takes over when it fails or
    when the static HTML needs client-side rendering.

    Raises:
        FetchError: If the browser path fails as well.
    """
    if render_js:
        return _fetch_html_playwright(url, timeout=timeout, user_agent=user_agent)

    logger.info("Fetching %s", url)
    try:
        html = fetch_html(url, timeout=timeout, user_agent=user_agent)
    except FetchError as exc:
        logger.warning("Static fetch failed (%s); retrying with headless browser", exc)
        return _fetch_html_playwright(url, timeout=timeout, user_agent=user_agent)

    check = detect_render_issue(html)
    if check.needs_browser:
        logger.warning(
            "Static HTML not usable (%s: %s); retrying with headless browser",
            check.issue, check.reason,
        )
        return _fetch_html_playwright(url, timeout=timeout, user_agent=user_agent)
    return html


# ---------------------------------------------------------------------------
# Extraction (pure HTML → RelatedContent, no network)
# ---------------------------------------------------------------------------

def extract(html: str, *, origin: str = settings.SITE_ORIGIN) -> RelatedContent:
    """Extract the related titles from *html*.  Never raises on bad markup."""
    return extract_related(html, origin=origin)


def parse_file(path: str | Path, *, origin: str = settings.SITE_ORIGIN) -> RelatedContent:
    """Read a saved title page from disk and extract its related titles.

    Raises:
        OSError: If the file cannot be read.
    """
    html = Path(path).read_text(encoding="utf-8")
    return extract(html, origin=origin)


def fetch(
    url: str,
    *,
    render_js: bool = False,
    timeout: int = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
) -> RelatedContent:
    """Fetch *url* and return its :class:`RelatedContent`.

    Raises:
        :class:`FetchError`: If the page cannot be fetched or rendered.
    """
    html = fetch_related_html(url, render_js=render_js, timeout=timeout, user_agent=user_agent)
    return extract(html)
