"""
Playwright rendering engine.

Provides HTML code to PNG image rendering in two flavours:
- simple: viewport screenshot after network idle.
- enhanced: preprocessed HTML, font inlining, CSP bypass, a bounded
  stabilization wait (fonts, images, animation frames) and a clipped,
  transparent-background screenshot.

Uses headless Chromium, Docker-compatible. One browser per call; nothing is
pooled or reused, and the browser is always closed before returning.
"""

import time
import logging
from dataclasses import dataclass

from ..config import get_settings
from .html_prep import process_html_for_rendering, inline_google_fonts

logger = logging.getLogger(__name__)

_SIMPLE_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
]

_ENHANCED_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-web-security",
    "--font-render-hinting=full",
    "--enable-font-antialiasing",
    "--disable-gpu",
    "--enable-webgl",
    "--enable-software-rasterizer",
]

# Minimal normalization applied after the content is loaded.
_NORMALIZE_CSS = """
html, body { margin: 0 !important; padding: 0 !important; background: transparent !important; }
* { -webkit-font-smoothing: antialiased; -moz-osx-font-smoothing: grayscale; }
"""

# Resolves {settled, images}; settled is false when the budget ran out first.
_STABILIZE_JS = """
async ({ frames, frameDelayMs, budgetMs }) => {
    const settle = async () => {
        try {
            if (document.fonts && document.fonts.ready) {
                await document.fonts.ready;
            }
        } catch (e) {}

        try {
            const probe = document.createElement('span');
            probe.style.fontFamily = getComputedStyle(document.body).fontFamily || 'sans-serif';
            probe.textContent = 'Font Load Check';
            document.body.appendChild(probe);
            probe.getBoundingClientRect();
            probe.remove();
        } catch (e) {}

        const pending = Array.from(document.images).filter(img => !img.complete);
        await Promise.all(pending.map(img => new Promise(resolve => {
            img.addEventListener('load', resolve, { once: true });
            img.addEventListener('error', resolve, { once: true });
        })));

        for (let i = 0; i < frames; i++) {
            await new Promise(resolve => requestAnimationFrame(() => resolve()));
            await new Promise(resolve => setTimeout(resolve, frameDelayMs));
        }
        return true;
    };
    const budget = new Promise(resolve => setTimeout(() => resolve(false), budgetMs));
    const settled = await Promise.race([settle(), budget]);
    return { settled, images: document.images.length };
}
"""


@dataclass
class CaptureResult:
    """Rendered PNG plus timing metadata; never written to disk."""
    png: bytes
    width: int
    height: int
    device_scale_factor: float
    elapsed_seconds: float
    settled: bool = True


def _sync_playwright():
    try:
        from playwright.sync_api import sync_playwright
    except ImportError as e:
        raise RuntimeError(
            "playwright not installed. Run: pip install playwright && playwright install chromium"
        ) from e
    return sync_playwright()


def _close_quietly(browser) -> None:
    try:
        browser.close()
    except Exception as e:
        logger.error("[renderer] Browser close failed: %s", e)


def render_html_simple(html_content: str, width: int = 1200, height: int = 630) -> CaptureResult:
    """
    Render HTML to a viewport-sized PNG.

    No preprocessing and no stabilization beyond network idle.
    """
    start = time.perf_counter()
    logger.info("[renderer] Simple render %dx%d, %d chars", width, height, len(html_content))

    with _sync_playwright() as p:
        browser = p.chromium.launch(headless=True, args=_SIMPLE_ARGS)
        try:
            page = browser.new_page(viewport={"width": width, "height": height})
            page.set_content(html_content, wait_until="networkidle")
            png = page.screenshot(type="png")
        finally:
            _close_quietly(browser)

    elapsed = time.perf_counter() - start
    logger.info("[renderer] Simple render done: %d bytes in %.2fs", len(png), elapsed)
    return CaptureResult(
        png=png, width=width, height=height, device_scale_factor=1, elapsed_seconds=elapsed,
    )


def capture_html(
    html_content: str,
    width: int = 1200,
    height: int = 800,
    device_scale_factor: float = 2,
) -> CaptureResult:
    """
    Run the full capture pipeline on an HTML document.

    Phases: preprocess -> launch -> load -> stabilize -> capture -> close.
    The browser is closed on every path; errors propagate to the caller.

    Args:
        html_content: Complete HTML code.
        width: Viewport / clip width in CSS pixels.
        height: Viewport / clip height in CSS pixels.
        device_scale_factor: Pixel density of the output.

    Returns:
        CaptureResult with PNG bytes of width*scale x height*scale pixels.
    """
    settings = get_settings()
    start = time.perf_counter()
    logger.info(
        "[renderer] Capture %dx%d @ scale %s, %d chars",
        width, height, device_scale_factor, len(html_content),
    )

    clean_html = process_html_for_rendering(html_content)
    if settings.render_inline_fonts:
        clean_html = inline_google_fonts(clean_html)

    with _sync_playwright() as p:
        logger.info("[renderer] Launching browser")
        browser = p.chromium.launch(
            headless=True,
            args=_ENHANCED_ARGS + [f"--window-size={width},{height}"],
        )
        try:
            context = browser.new_context(
                viewport={"width": width, "height": height},
                device_scale_factor=device_scale_factor,
                user_agent=settings.render_user_agent,
                bypass_csp=True,
            )
            page = context.new_page()

            logger.info("[renderer] Loading content")
            page.set_content(
                clean_html,
                wait_until="networkidle",
                timeout=settings.render_content_timeout_ms,
            )
            page.add_style_tag(content=_NORMALIZE_CSS)

            logger.info("[renderer] Stabilizing (budget %dms)", settings.render_stabilize_budget_ms)
            status = page.evaluate(
                _STABILIZE_JS,
                {
                    "frames": settings.render_settle_frames,
                    "frameDelayMs": settings.render_frame_delay_ms,
                    "budgetMs": settings.render_stabilize_budget_ms,
                },
            )
            settled = bool(status.get("settled"))
            if not settled:
                logger.warning(
                    "[renderer] Stabilization budget of %dms exhausted (%d images), capturing anyway",
                    settings.render_stabilize_budget_ms, status.get("images", 0),
                )
            page.wait_for_timeout(settings.render_final_delay_ms)

            logger.info("[renderer] Capturing screenshot")
            png = page.screenshot(
                type="png",
                omit_background=True,
                full_page=False,
                clip={"x": 0, "y": 0, "width": width, "height": height},
            )
        finally:
            _close_quietly(browser)

    elapsed = time.perf_counter() - start
    logger.info("[renderer] Capture done: %d bytes in %.2fs (settled=%s)", len(png), elapsed, settled)
    return CaptureResult(
        png=png,
        width=width,
        height=height,
        device_scale_factor=device_scale_factor,
        elapsed_seconds=elapsed,
        settled=settled,
    )
