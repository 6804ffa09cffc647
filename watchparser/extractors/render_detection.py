"""watchparser.extractors.render_detection - is static HTML good enough?

Pure-function, no network calls.  A plain HTTP fetch of a title page can
come back as a client-side rendering shell (loading skeletons instead of
the related carousels), a bot-protection page, or nothing at all.  Any of
those means the page has to be rendered in a headless browser instead.

Usage::

    from watchparser.extractors.render_detection import detect_render_issue

    result = detect_render_issue(html)
    if result.needs_browser:
        print(result.issue, result.reason)
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass
class RenderCheck:
    """Result of a static-HTML quality check."""

    needs_browser: bool
    # "cloudflare"|"captcha"|"render_shell"|"empty"
    issue: str | None
    reason: str | None


# ---------------------------------------------------------------------------
# Compiled patterns (evaluated once at import time)
# ---------------------------------------------------------------------------

_SHELL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"animate-pulse"),
    re.compile(r"skeleton"),
)

_CF_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<title[^>]*>\s*just a moment", re.IGNORECASE),
    re.compile(r"<title[^>]*>\s*attention required", re.IGNORECASE),
    re.compile(r"challenges\.cloudflare\.com", re.IGNORECASE),
    re.compile(r"cf-browser-verification", re.IGNORECASE),
)

_CAPTCHA_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"g-recaptcha", re.IGNORECASE),
    re.compile(r"h-captcha", re.IGNORECASE),
    re.compile(r"cf-turnstile", re.IGNORECASE),
)


def _word_count(html: str) -> int:
    text = re.sub(r"<[^>]+>", " ", html)
    return len(text.split())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_render_issue(html: str) -> RenderCheck:
    """Classify statically fetched *html*.

    Checks run in priority order; the first hit wins.

    Returns:
        :class:`RenderCheck` with ``needs_browser=False`` when the HTML can
        be handed to the extractor as-is.
    """
    wc = _word_count(html)

    if any(p.search(html) for p in _CF_PATTERNS):
        return RenderCheck(True, "cloudflare", "Cloudflare challenge page detected")

    if any(p.search(html) for p in _CAPTCHA_PATTERNS):
        return RenderCheck(True, "captcha", "CAPTCHA widget detected")

    if any(p.search(html) for p in _SHELL_PATTERNS):
        return RenderCheck(True, "render_shell", "Loading skeletons found; page renders client-side")

    if wc < 20:
        return RenderCheck(True, "empty", f"Page has only {wc} words")

    return RenderCheck(False, None, None)
