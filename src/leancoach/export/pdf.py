"""
A3 PDF Rendering

Turns the rendered A3 HTML into a PDF with headless Chromium (Playwright).

One browser is launched lazily and shared; every render gets its own page.
A semaphore bounds how many pages render at once, and each render has a
hard timeout.
"""
import asyncio
import logging
from typing import Optional

from playwright.async_api import async_playwright, Browser, Playwright, Error as PlaywrightError

from ..config import Config

logger = logging.getLogger("leancoach.export.pdf")


class ExportError(Exception):
    """PDF rendering failed"""


class ExportTimeoutError(ExportError):
    """PDF rendering did not finish in time"""


class PdfRenderer:
    """Shared headless browser for PDF export"""

    def __init__(self, max_concurrent: Optional[int] = None, timeout: Optional[float] = None):
        self.max_concurrent = max_concurrent or Config.PDF_MAX_CONCURRENT
        self.timeout = timeout or Config.PDF_TIMEOUT_SECONDS
        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        self._launch_lock = asyncio.Lock()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def _get_browser(self) -> Browser:
        async with self._launch_lock:
            if self._browser is None or not self._browser.is_connected():
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                logger.info("Launching headless Chromium for PDF export")
                self._browser = await self._playwright.chromium.launch(headless=True)
            return self._browser

    async def render(self, html: str) -> bytes:
        """
        Render HTML to an A3 landscape PDF.

        Raises:
            ExportTimeoutError: If rendering exceeds the timeout
            ExportError: If the browser fails
        """
        async with self._semaphore:
            try:
                return await asyncio.wait_for(self._render(html), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.error(f"PDF rendering timed out after {self.timeout}s")
                raise ExportTimeoutError(f"PDF rendering timed out after {self.timeout}s")
            except PlaywrightError as e:
                logger.error(f"PDF rendering failed: {e}")
                raise ExportError(f"PDF rendering failed: {e}")

    async def _render(self, html: str) -> bytes:
        browser = await self._get_browser()
        page = await browser.new_page()
        try:
            await page.set_content(html, wait_until="load")
            await page.emulate_media(media="print")
            return await page.pdf(
                format="A3",
                landscape=True,
                print_background=True,
                prefer_css_page_size=True,
            )
        finally:
            await page.close()

    async def close(self):
        """Shut the browser down"""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("PDF renderer closed")
