"""
HTML preprocessing for the capture pipeline.

- Inject preconnect hints for Google Fonts.
- Strip <script> and <iframe> elements.
- Optionally inline Google Fonts stylesheets (best-effort network fetch).
"""

import re
import logging

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

GOOGLE_FONTS_CSS_ORIGIN = "https://fonts.googleapis.com"
GOOGLE_FONTS_FILE_ORIGIN = "https://fonts.gstatic.com"

_PRECONNECT_CSS_RE = re.compile(
    r"""<link[^>]+rel=["']preconnect["'][^>]+href=["']https://fonts\.googleapis\.com["'][^>]*>""",
    re.IGNORECASE,
)
_PRECONNECT_FILES_RE = re.compile(
    r"""<link[^>]+rel=["']preconnect["'][^>]+href=["']https://fonts\.gstatic\.com["'][^>]*>""",
    re.IGNORECASE,
)
_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_RE = re.compile(r"<iframe[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL)

_FONT_LINK_RE = re.compile(
    r"""<link[^>]+href=["'](https://fonts\.googleapis\.com/[^"']+)["'][^>]*>""",
    re.IGNORECASE,
)
_PROTOCOL_RELATIVE_GSTATIC_RE = re.compile(r"url\((//fonts\.gstatic\.com[^)]+)\)")


def inject_preconnect_hints(html: str) -> str:
    """Add preconnect links for the font provider unless already present."""
    hints = ""
    if not _PRECONNECT_CSS_RE.search(html):
        hints += f'<link rel="preconnect" href="{GOOGLE_FONTS_CSS_ORIGIN}">'
    if not _PRECONNECT_FILES_RE.search(html):
        hints += f'<link rel="preconnect" href="{GOOGLE_FONTS_FILE_ORIGIN}" crossorigin>'
    if not hints:
        return html
    if "</head>" in html:
        return html.replace("</head>", f"{hints}</head>", 1)
    return hints + html


def strip_active_content(html: str) -> str:
    """Remove <script> and <iframe> elements."""
    html = _SCRIPT_RE.sub("", html)
    return _IFRAME_RE.sub("", html)


def process_html_for_rendering(html: str) -> str:
    """Preconnect hints + active-content stripping; font links are kept."""
    return strip_active_content(inject_preconnect_hints(html))


def _absolutize_font_urls(css: str) -> str:
    return _PROTOCOL_RELATIVE_GSTATIC_RE.sub(r"url(https:\1)", css)


def inline_google_fonts(html: str, client: httpx.Client | None = None) -> str:
    """
    Replace Google Fonts <link> tags with the fetched stylesheet.

    Each link is handled independently; a failed fetch keeps its original tag.
    Only https://fonts.googleapis.com/ URLs are fetched.
    """
    links = [(m.group(0), m.group(1)) for m in _FONT_LINK_RE.finditer(html)]
    if not links:
        return html

    settings = get_settings()
    own_client = client is None
    if own_client:
        client = httpx.Client(
            timeout=settings.font_fetch_timeout_seconds,
            headers={"User-Agent": settings.render_user_agent},
            follow_redirects=True,
        )

    inlined = html
    try:
        for link_tag, href in links:
            href = href.replace("&amp;", "&")
            try:
                resp = client.get(href)
            except httpx.HTTPError as e:
                logger.warning("[html_prep] Font stylesheet fetch failed for %s: %s", href, e)
                continue
            if resp.status_code >= 400:
                logger.warning("[html_prep] Font stylesheet %s returned %d", href, resp.status_code)
                continue
            css = _absolutize_font_urls(resp.text)
            inlined = inlined.replace(link_tag, f"<style data-inlined-google-fonts>{css}</style>")
            logger.debug("[html_prep] Inlined %s (%d bytes)", href, len(css))
    finally:
        if own_client:
            client.close()
    return inlined
