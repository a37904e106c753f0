"""
Document Renderer - turns resume HTML into A4 PDF bytes with headless Chromium.

A fresh browser is launched for every call and always closed afterwards.
Failures are reported as RenderFailed with the stage that broke:
launch, load or pdf. There is no retry.
"""
import logging
import time
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from jobassist.config import A4_VIEWPORT, BROWSER_LAUNCH_ARGS, PDF_MARGIN, RENDER_TIMEOUT
from jobassist.utils.deadline import Deadline, clamp_timeout
from jobassist.utils.exceptions import RenderFailed

logger = logging.getLogger(__name__)

PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "margin": {"top": PDF_MARGIN, "right": PDF_MARGIN, "bottom": PDF_MARGIN, "left": PDF_MARGIN},
}


async def render_pdf(html: str, deadline: Optional[Deadline] = None,
                     timeout: float = RENDER_TIMEOUT) -> bytes:
    """
    Render a complete HTML document to PDF.

    Args:
        html: The document to render
        deadline: Overall request budget; the page-load timeout is clamped to it
        timeout: Page-load timeout in seconds

    Returns:
        PDF bytes

    Raises:
        RenderFailed: stage "launch", "load" or "pdf"
        DeadlineExceeded: if the deadline had already run out
    """
    if not html or not html.strip():
        raise RenderFailed("load", "No HTML content to render")

    start = time.time()
    try:
        async with async_playwright() as playwright:
            pdf_bytes = await _render_in_browser(playwright, html, deadline, timeout)
    except (PlaywrightError, OSError) as exc:
        # Driver startup and shutdown; stage errors are already RenderFailed
        logger.error(f"[Renderer] Playwright driver failed: {exc}")
        raise RenderFailed("launch", f"Could not start headless browser: {exc}") from exc

    logger.info("[Renderer] PDF rendered", extra={
        "bytes": len(pdf_bytes),
        "elapsed_ms": int((time.time() - start) * 1000),
    })
    return pdf_bytes


async def _render_in_browser(playwright, html: str, deadline: Optional[Deadline], timeout: float) -> bytes:
    try:
        browser = await playwright.chromium.launch(headless=True, args=BROWSER_LAUNCH_ARGS)
    except PlaywrightError as exc:
        logger.error(f"[Renderer] Browser launch failed: {exc}")
        raise RenderFailed("launch", f"Could not start headless browser: {exc}") from exc

    try:
        try:
            page = await browser.new_page(viewport=A4_VIEWPORT)
        except PlaywrightError as exc:
            logger.error(f"[Renderer] Could not open a page: {exc}")
            raise RenderFailed("launch", f"Could not open a browser page: {exc}") from exc

        load_timeout = clamp_timeout(timeout, deadline, "render")
        try:
            await page.set_content(html, wait_until="networkidle", timeout=load_timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise RenderFailed("load", f"Page load timed out after {load_timeout:g} seconds") from exc
        except PlaywrightError as exc:
            raise RenderFailed("load", f"Page load failed: {exc}") from exc

        clamp_timeout(timeout, deadline, "render")
        try:
            return await page.pdf(**PDF_OPTIONS)
        except PlaywrightError as exc:
            raise RenderFailed("pdf", f"PDF generation failed: {exc}") from exc
    finally:
        await browser.close()


class PdfRenderer:
    """Injectable wrapper so the HTTP layer and tests can swap the browser out."""

    def __init__(self, timeout: float = RENDER_TIMEOUT):
        self.timeout = timeout

    async def render(self, html: str, deadline: Optional[Deadline] = None) -> bytes:
        return await render_pdf(html, deadline=deadline, timeout=self.timeout)
