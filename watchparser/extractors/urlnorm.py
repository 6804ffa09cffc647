"""URL helpers: absolute links, title slugs and source-URL validation."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

from watchparser.settings import SITE_HOST, SITE_ORIGIN

# /movie/1412450-stranger-things or /show/66732-stranger-things
_TITLE_PATH_RE = re.compile(r"/(movie|show)/([^/?#]+)")
_LEADING_ID_RE = re.compile(r"^\d+-")


def absolute_link(href: str, origin: str = SITE_ORIGIN) -> str:
    """Return *href* as an absolute URL on *origin*.

    Root-relative paths are appended to the origin verbatim; anything that
    already carries a scheme is returned unchanged.
    """
    href = href.strip()
    if urlparse(href).scheme:
        return href
    if href.startswith("/"):
        return f"{origin.rstrip('/')}{href}"
    return urljoin(origin.rstrip("/") + "/", href)


def extract_id_slug(url: str) -> str | None:
    """Return the ``<id>-<slug>`` segment of a title URL.

    Example:
        https://goodwatch.app/movie/1412450-stranger-things → 1412450-stranger-things
    """
    m = _TITLE_PATH_RE.search(url)
    return m.group(2) if m else None


def slug_to_title(slug: str) -> str:
    """Turn ``66732-stranger-things`` into ``Stranger Things``."""
    words = _LEADING_ID_RE.sub("", slug).replace("-", " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def validate_source_url(url: str, *, require_scheme: bool = True) -> str | None:
    """Return an error message if *url* is not a usable title URL, else None."""
    url = url.strip()
    if not url:
        return "URL is required"
    if require_scheme and urlparse(url).scheme not in ("http", "https"):
        return "URL must start with http:// or https://"
    if SITE_HOST not in url:
        return f"Please enter a valid {SITE_HOST} URL"
    return None
