"""
axe-core scanning via Playwright, producing raw results for the metrics aggregator
"""

import asyncio
import time
from typing import List, Dict, Any
import logging

from playwright.async_api import Page

from a11y_monitor.browser_manager import BrowserManager

logger = logging.getLogger(__name__)

AXE_SCRIPT_URL = "https://unpkg.com/axe-core@4.8.2/axe.min.js"
DEFAULT_TAGS = ['wcag2a', 'wcag2aa', 'wcag21aa']


class AxeScanner:
    """Runs axe-core against pages and returns its violations"""

    def __init__(self, tags: List[str] = None, timeout: float = 30.0,
                 axe_script_url: str = AXE_SCRIPT_URL):
        """
        Initialize axe scanner

        Args:
            tags: axe rule tags to run (runOnly filter)
            timeout: Seconds to wait for axe.run before giving up
            axe_script_url: Where to load axe-core from
        """
        self.tags = tags or list(DEFAULT_TAGS)
        self.timeout = timeout
        self.axe_script_url = axe_script_url

    async def run_scan(self, page: Page, url: str) -> Dict[str, Any]:
        """
        Run axe on an already loaded page

        Args:
            page: Playwright page object
            url: URL being scanned

        Returns:
            Dictionary in axe results shape with 'violations', pass/incomplete
            counts and 'executionTime' in seconds
        """
        started = time.perf_counter()
        try:
            axe_loaded = await page.evaluate("""() => typeof window.axe !== 'undefined'""")

            if not axe_loaded:
                await page.add_script_tag(url=self.axe_script_url)
                await page.wait_for_timeout(500)

            results = await asyncio.wait_for(
                page.evaluate(
                    """async (tags) => {
                        return await axe.run({
                            runOnly: {
                                type: 'tag',
                                values: tags
                            }
                        });
                    }""",
                    self.tags
                ),
                timeout=self.timeout
            )

            violations = [
                {
                    'id': violation.get('id', ''),
                    'impact': violation.get('impact'),
                    'tags': violation.get('tags', []),
                    'description': violation.get('description', ''),
                    'help': violation.get('help', ''),
                    'helpUrl': violation.get('helpUrl', ''),
                    'nodes': [
                        {
                            'html': node.get('html', ''),
                            'target': node.get('target', []),
                            'failureSummary': node.get('failureSummary', '')
                        }
                        for node in violation.get('nodes', [])
                    ]
                }
                for violation in results.get('violations', [])
            ]

            execution_time = time.perf_counter() - started
            logger.info(f"axe found {len(violations)} violations on {url} in {execution_time:.2f}s")
            return {
                'url': url,
                'violations': violations,
                'passCount': len(results.get('passes', [])),
                'incompleteCount': len(results.get('incomplete', [])),
                'executionTime': execution_time
            }

        except Exception as e:
            logger.error(f"Error running accessibility scan on {url}: {e}")
            return {
                'url': url,
                'violations': [],
                'passCount': 0,
                'incompleteCount': 0,
                'executionTime': time.perf_counter() - started,
                'error': str(e)
            }

    async def scan_url(self, url: str, browser_manager: BrowserManager) -> Dict[str, Any]:
        """
        Open a URL in a fresh page and scan it

        Args:
            url: URL to scan
            browser_manager: Started (or startable) browser manager

        Returns:
            Scan results, see run_scan
        """
        async with browser_manager.page() as page:
            if not await browser_manager.navigate(page, url):
                logger.warning(f"Navigation to {url} did not complete cleanly, scanning anyway")
            return await self.run_scan(page, url)
