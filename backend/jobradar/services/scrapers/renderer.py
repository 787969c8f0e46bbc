"""
Headless page renderer for career pages that build their listings in JavaScript.

One Chromium instance is launched lazily on first use and shared. Every load
opens its own browser context and page, so concurrent loads never share
cookies or navigation state. Text extraction happens on the returned HTML in
Python, which keeps it testable without a browser.
"""

import asyncio
import logging
from typing import Optional

from bs4 import BeautifulSoup
from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from jobradar.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]
NOISE_TAGS = ["script", "style", "noscript", "nav", "footer", "header"]


def extract_visible_text(html: str) -> str:
    """Readable text of the main content area, chrome and scripts removed."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()

    root = soup.find("main") or soup.find(attrs={"role": "main"}) or soup.body or soup
    return root.get_text("\n", strip=True)


class PageRenderer:
    def __init__(self):
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def _get_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(headless=True, args=LAUNCH_ARGS)
                logger.info("Launched headless Chromium")
            return self._browser

    async def render_html(self, url: str) -> Optional[str]:
        """Fully rendered HTML of a page, or None on failure or timeout."""
        context = None
        try:
            browser = await self._get_browser()
            context = await browser.new_context(user_agent=USER_AGENT)
            page = await context.new_page()
            await page.goto(url, wait_until="load", timeout=settings.render_timeout_ms)
            await page.wait_for_selector("body", timeout=settings.render_body_timeout_ms)
            html = await page.content()
        except (PlaywrightError, asyncio.TimeoutError) as e:
            logger.warning(f"Failed to render {url}: {e}")
            return None
        finally:
            if context is not None:
                await context.close()

        logger.info(f"Rendered {url} ({len(html)} chars)")
        return html

    async def render_text(self, url: str) -> Optional[str]:
        html = await self.render_html(url)
        if html is None:
            return None
        return extract_visible_text(html)

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
