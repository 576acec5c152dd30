import time
import asyncio
import logging
from typing import Optional

from playwright.async_api import async_playwright, Error as PlaywrightError

from ..config import ProxyConfiguration
from ..errors import FetchError
from ..utils.headers import build_headers, random_user_agent
from .page_content import PageContent
from .rendered_page import RenderedPage

logger = logging.getLogger(__name__)


class BrowserFetcher:
    """Renders pages in headless Chromium and hands back a live page handle"""

    def __init__(self, headless: bool = True, navigation_timeout: float = 60.0,
                 viewport_width: int = 1920, viewport_height: int = 1080,
                 proxy_configuration: Optional[ProxyConfiguration] = None):
        self.headless = headless
        self.navigation_timeout = navigation_timeout
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.proxy_configuration = proxy_configuration
        self.playwright = None
        self.browser = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Launch the browser"""
        if self.browser is not None:
            return

        logger.info("Starting browser for rendered pages")
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(
            headless=self.headless,
            args=[
                '--no-sandbox',
                '--disable-dev-shm-usage',
                '--disable-gpu'
            ]
        )

    async def close(self):
        """Clean up browser resources"""
        try:
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
        except PlaywrightError as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            self.browser = None
            self.playwright = None

    async def fetch(self, url: str) -> PageContent:
        """Open url in a fresh browser context; the caller closes the returned page"""
        if self.browser is None:
            raise RuntimeError("Browser not initialized. Call start() first")

        headers = build_headers(random_user_agent())
        user_agent = headers.pop('User-Agent')
        # Chromium manages transport headers itself
        for name in ('Accept-Encoding', 'Connection'):
            headers.pop(name, None)
        context_options = {
            'viewport': {'width': self.viewport_width, 'height': self.viewport_height},
            'user_agent': user_agent,
            'extra_http_headers': headers
        }
        proxy = self.proxy_configuration.new_url() if self.proxy_configuration else None
        if proxy:
            context_options['proxy'] = {'server': proxy}

        start_time = time.time()
        context = await self.browser.new_context(**context_options)
        try:
            page = await context.new_page()
            response = await page.goto(url, wait_until='domcontentloaded',
                                       timeout=self.navigation_timeout * 1000)
        except PlaywrightError as e:
            await context.close()
            raise FetchError(url, f"Navigation failed: {e}") from e
        except asyncio.CancelledError:
            await context.close()
            raise

        status = response.status if response else None
        if status is not None and status >= 400:
            await context.close()
            raise FetchError(url, f"HTTP {status}", status)

        return PageContent(
            url=url,
            loaded_url=page.url,
            page=RenderedPage(page, context),
            status_code=status,
            response_time=time.time() - start_time
        )
