"""Tests for watchparser.extractors.render_detection."""

from watchparser.extractors.render_detection import detect_render_issue

# ---------------------------------------------------------------------------
# Client-side rendering shells
# ---------------------------------------------------------------------------

SHELL_HTML = """<!DOCTYPE html>
<html>
<head><title>Stranger Things | GoodWatch</title></head>
<body>
<div id="related">
  <div class="h-64 w-40 animate-pulse rounded bg-gray-800"></div>
  <div class="h-64 w-40 animate-pulse rounded bg-gray-800"></div>
</div>
<p>Find out where to watch Stranger Things online, and discover related shows
and movies picked for you by mood, genre and overall similarity score.</p>
</body>
</html>"""


def test_animate_pulse_shell():
    result = detect_render_issue(SHELL_HTML)
    assert result.needs_browser is True
    assert result.issue == "render_shell"


def test_skeleton_class():
    html = SHELL_HTML.replace("animate-pulse", "skeleton")
    result = detect_render_issue(html)
    assert result.needs_browser is True
    assert result.issue == "render_shell"


def test_rendered_page_passes(related_html):
    result = detect_render_issue(related_html)
    assert result.needs_browser is False
    assert result.issue is None
    assert result.reason is None


# ---------------------------------------------------------------------------
# Block pages
# ---------------------------------------------------------------------------

def test_cloudflare_title():
    html = """<html><head><title>Just a moment...</title></head>
    <body><p>Checking your browser before accessing the site.</p></body></html>"""
    result = detect_render_issue(html)
    assert result.issue == "cloudflare"


def test_recaptcha():
    html = '<html><body><div class="g-recaptcha" data-sitekey="abc"></div></body></html>'
    result = detect_render_issue(html)
    assert result.issue == "captcha"


# ---------------------------------------------------------------------------
# Empty page
# ---------------------------------------------------------------------------

def test_empty_page():
    result = detect_render_issue("<html><body><div id='root'></div></body></html>")
    assert result.needs_browser is True
    assert result.issue == "empty"
