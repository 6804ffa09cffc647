"""Project settings for watchparser.

Every value is a plain module-level constant.  The ones that vary between
machines can be overridden with a ``WATCHPARSER_*`` environment variable;
CLI flags in ``__main__.py`` take precedence over both.
"""

from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Source site
# ---------------------------------------------------------------------------
SITE_ORIGIN = os.getenv("WATCHPARSER_SITE_ORIGIN", "https://goodwatch.app").rstrip("/")
SITE_HOST = "goodwatch.app"

# ---------------------------------------------------------------------------
# Static fetch
# ---------------------------------------------------------------------------
DOWNLOAD_TIMEOUT = _env_int("WATCHPARSER_TIMEOUT", 30)
MAX_RETRIES = _env_int("WATCHPARSER_MAX_RETRIES", 3)

USER_AGENT = os.getenv(
    "WATCHPARSER_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36",
)

# ---------------------------------------------------------------------------
# Headless browser (Playwright)
# ---------------------------------------------------------------------------
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)
BROWSER_LAUNCH_ARGS: list[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]
BROWSER_VIEWPORT = {"width": 1920, "height": 1080}

# Selector the browser waits for before grabbing the DOM
RELATED_WAIT_SELECTOR = "#related"
RELATED_WAIT_TIMEOUT_MS = 10_000
# Extra settle time for lazily hydrated carousels
HYDRATION_SETTLE_MS = 2_000

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
OUTPUT_DIR = os.getenv("WATCHPARSER_OUTPUT_DIR", "./output")
OUTPUT_SUFFIX = ".output.json"
STORYBOARD_SUFFIX = ".storyboard.json"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("WATCHPARSER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(message)s"
