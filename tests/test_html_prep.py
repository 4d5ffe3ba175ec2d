"""
Unit tests for HTML preprocessing and Google Fonts inlining.

Network access is replaced with httpx.MockTransport.
"""

import httpx

from app.util.html_prep import (
    inject_preconnect_hints,
    inline_google_fonts,
    process_html_for_rendering,
    strip_active_content,
)

FONT_HREF = "https://fonts.googleapis.com/css2?family=Inter:wght@400;700&display=swap"
FONT_LINK = f'<link href="{FONT_HREF}" rel="stylesheet">'
FONT_CSS = (
    "@font-face { font-family: 'Inter'; "
    "src: url(//fonts.gstatic.com/s/inter/v1/a.woff2) format('woff2'); }"
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Preconnect hints
# ---------------------------------------------------------------------------

def test_preconnect_hints_inserted_before_head_close():
    html = "<html><head><title>t</title></head><body>x</body></html>"
    out = inject_preconnect_hints(html)
    assert '<link rel="preconnect" href="https://fonts.googleapis.com">' in out
    assert '<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>' in out
    assert out.index("fonts.gstatic.com") < out.index("</head>")


def test_preconnect_hints_prepended_without_head():
    out = inject_preconnect_hints("<h1>Hi</h1>")
    assert out.startswith('<link rel="preconnect"')
    assert out.endswith("<h1>Hi</h1>")


def test_preconnect_hints_not_duplicated():
    once = inject_preconnect_hints("<head></head><body></body>")
    twice = inject_preconnect_hints(once)
    assert twice == once
    assert twice.count("fonts.googleapis.com") == 1


# ---------------------------------------------------------------------------
# Active content
# ---------------------------------------------------------------------------

def test_scripts_and_iframes_are_stripped():
    html = (
        "<body><script>alert(1)</script><h1>Keep</h1>"
        '<SCRIPT src="x.js"></SCRIPT><iframe src="https://example.com">\n</iframe></body>'
    )
    out = strip_active_content(html)
    assert "<h1>Keep</h1>" in out
    assert "script" not in out.lower()
    assert "iframe" not in out.lower()


def test_process_html_keeps_font_links():
    out = process_html_for_rendering(f"<head>{FONT_LINK}</head><body><script>x()</script></body>")
    assert FONT_LINK in out
    assert "<script>" not in out


# ---------------------------------------------------------------------------
# Font inlining
# ---------------------------------------------------------------------------

def test_font_link_replaced_with_inline_style():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, text=FONT_CSS)

    out = inline_google_fonts(f"<head>{FONT_LINK}</head>", client=_client(handler))
    assert FONT_LINK not in out
    assert "<style data-inlined-google-fonts>" in out
    assert "url(https://fonts.gstatic.com/s/inter/v1/a.woff2)" in out
    assert len(requested) == 1


def test_failed_fetch_keeps_original_link():
    def handler(request):
        return httpx.Response(503)

    html = f"<head>{FONT_LINK}</head>"
    assert inline_google_fonts(html, client=_client(handler)) == html


def test_network_error_keeps_original_link():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    html = f"<head>{FONT_LINK}</head>"
    assert inline_google_fonts(html, client=_client(handler)) == html


def test_non_google_links_are_not_fetched():
    def handler(request):
        raise AssertionError(f"unexpected fetch: {request.url}")

    html = '<link href="https://example.com/fonts.css" rel="stylesheet">'
    assert inline_google_fonts(html, client=_client(handler)) == html
