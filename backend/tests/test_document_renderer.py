"""
Tests for headless-browser PDF rendering (browser mocked)
"""
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from jobassist.services.document_renderer import PdfRenderer, render_pdf
from jobassist.utils.deadline import Deadline
from jobassist.utils.exceptions import DeadlineExceeded, RenderFailed

HTML = "<!DOCTYPE html><html><body><h1>Resume</h1></body></html>"


def _browser(pdf=b"%PDF-1.4 test", set_content_error=None, pdf_error=None):
    page = MagicMock()
    page.set_content = AsyncMock(side_effect=set_content_error)
    page.pdf = AsyncMock(return_value=pdf, side_effect=pdf_error)
    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()
    return browser, page


def _playwright_factory(browser=None, launch_error=None):
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser, side_effect=launch_error)
    manager = MagicMock()
    manager.__aenter__.return_value = playwright
    manager.__aexit__.return_value = False
    return Mock(return_value=manager), playwright


class TestRenderPdf:
    """Test render_pdf stages"""

    @pytest.mark.asyncio
    async def test_success(self):
        """Test PDF bytes are returned and the browser is closed"""
        browser, page = _browser()
        factory, playwright = _playwright_factory(browser)

        with patch("jobassist.services.document_renderer.async_playwright", factory):
            result = await render_pdf(HTML, timeout=5)

        assert result == b"%PDF-1.4 test"
        playwright.chromium.launch.assert_awaited_once()
        assert playwright.chromium.launch.call_args.kwargs["headless"] is True
        page.set_content.assert_awaited_once_with(HTML, wait_until="networkidle", timeout=5000)
        assert page.pdf.call_args.kwargs["format"] == "A4"
        assert page.pdf.call_args.kwargs["print_background"] is True
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_html(self):
        """Test empty documents fail at load without launching a browser"""
        factory, _ = _playwright_factory()
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(RenderFailed) as exc_info:
                await render_pdf("   ")
        assert exc_info.value.stage == "load"
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_launch_failure(self):
        """Test browser launch errors are reported as the launch stage"""
        factory, _ = _playwright_factory(launch_error=PlaywrightError("Executable doesn't exist"))
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(RenderFailed) as exc_info:
                await render_pdf(HTML)
        assert exc_info.value.stage == "launch"
        assert exc_info.value.details["stage"] == "launch"

    @pytest.mark.asyncio
    async def test_new_page_failure_closes_browser(self):
        """Test a failure opening the page is the launch stage and the browser is closed"""
        browser, page = _browser()
        browser.new_page = AsyncMock(side_effect=PlaywrightError("Target closed"))
        factory, _ = _playwright_factory(browser)
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(RenderFailed) as exc_info:
                await render_pdf(HTML)
        assert exc_info.value.stage == "launch"
        page.set_content.assert_not_awaited()
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        PlaywrightError("Connection closed while reading from the driver"),
        FileNotFoundError("playwright driver not found"),
    ])
    async def test_driver_startup_failure(self, error):
        """Test Playwright driver startup errors are the launch stage"""
        factory, playwright = _playwright_factory()
        factory.return_value.__aenter__.side_effect = error
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(RenderFailed) as exc_info:
                await render_pdf(HTML)
        assert exc_info.value.stage == "launch"
        playwright.chromium.launch.assert_not_called()

    @pytest.mark.asyncio
    async def test_load_timeout_closes_browser(self):
        """Test a page-load timeout is the load stage and the browser is still closed"""
        browser, _ = _browser(set_content_error=PlaywrightTimeoutError("Timeout 5000ms exceeded"))
        factory, _ = _playwright_factory(browser)
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(RenderFailed) as exc_info:
                await render_pdf(HTML, timeout=5)
        assert exc_info.value.stage == "load"
        assert "timed out" in exc_info.value.message
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_pdf_failure_closes_browser(self):
        """Test PDF emission errors are the pdf stage"""
        browser, _ = _browser(pdf_error=PlaywrightError("Target closed"))
        factory, _ = _playwright_factory(browser)
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(RenderFailed) as exc_info:
                await render_pdf(HTML)
        assert exc_info.value.stage == "pdf"
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_deadline(self):
        """Test an exhausted deadline stops before the page is loaded"""
        browser, page = _browser()
        factory, _ = _playwright_factory(browser)
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            with pytest.raises(DeadlineExceeded):
                await render_pdf(HTML, deadline=Deadline(0))
        page.set_content.assert_not_awaited()
        browser.close.assert_awaited_once()


class TestPdfRenderer:
    """Test the injectable wrapper"""

    @pytest.mark.asyncio
    async def test_uses_configured_timeout(self):
        """Test the renderer passes its timeout through"""
        browser, page = _browser()
        factory, _ = _playwright_factory(browser)
        with patch("jobassist.services.document_renderer.async_playwright", factory):
            await PdfRenderer(timeout=12).render(HTML)
        assert page.set_content.call_args.kwargs["timeout"] == 12000
