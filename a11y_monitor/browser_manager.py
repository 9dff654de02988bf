"""
Chromium session used to load pages for axe scans
"""

from contextlib import asynccontextmanager
from typing import Optional, Dict, Callable, AsyncIterator
import logging

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

logger = logging.getLogger(__name__)

MISSING_BROWSER_HINT = "Playwright browsers are not installed. Please run: playwright install chromium"


class BrowserManager:
    """One Chromium browser and context shared by every scan of a run"""

    def __init__(self, headless: bool = True, timeout: int = 30000,
                 viewport: Dict[str, int] = None, settle_ms: int = 1000,
                 playwright_factory: Callable = None):
        """
        Initialize browser manager

        Args:
            headless: Run browser in headless mode
            timeout: Navigation timeout in milliseconds
            viewport: Viewport dimensions {'width': int, 'height': int}
            settle_ms: Pause after navigation so client-side rendering finishes before axe runs
            playwright_factory: Replacement for async_playwright
        """
        self.headless = headless
        self.timeout = timeout
        self.viewport = viewport or {'width': 1920, 'height': 1080}
        self.settle_ms = settle_ms
        self.playwright_factory = playwright_factory or async_playwright
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

    @property
    def running(self) -> bool:
        return self.context is not None

    async def start(self):
        """Launch Chromium and open a scan context; a no-op when already running"""
        if self.running:
            return

        try:
            self.playwright = await self.playwright_factory().start()
            self.browser = await self.playwright.chromium.launch(headless=self.headless)
            self.context = await self.browser.new_context(
                viewport=self.viewport,
                ignore_https_errors=True
            )
        except Exception as e:
            await self.stop()
            if "Executable doesn't exist" in str(e):
                logger.error(MISSING_BROWSER_HINT)
                raise RuntimeError(MISSING_BROWSER_HINT) from None
            logger.error(f"Error starting browser: {e}")
            raise

        logger.debug(f"Browser started (headless={self.headless})")

    async def stop(self):
        """Close whatever part of the session has been opened"""
        context, browser, playwright = self.context, self.browser, self.playwright
        self.context = None
        self.browser = None
        self.playwright = None

        if context:
            await context.close()
        if browser:
            await browser.close()
        if playwright:
            await playwright.stop()

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open a page for a single scan and close it when the scan ends"""
        await self.start()
        page = await self.context.new_page()
        try:
            yield page
        finally:
            await page.close()

    async def navigate(self, page: Page, url: str, wait_until: str = "networkidle") -> bool:
        """
        Load the page to be scanned

        Returns:
            True when the server answered with a status below 400
        """
        try:
            response = await page.goto(url, wait_until=wait_until, timeout=self.timeout)
        except Exception as e:
            logger.error(f"Error navigating to {url}: {e}")
            return False

        if self.settle_ms:
            await page.wait_for_timeout(self.settle_ms)

        if response is None:
            logger.warning(f"No response received for {url}")
            return False
        if response.status >= 400:
            logger.warning(f"{url} answered with HTTP {response.status}")
            return False
        return True
