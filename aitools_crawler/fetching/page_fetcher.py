import asyncio
import logging
from typing import Optional

from ..config import CrawlerConfig, ProxyConfiguration
from .browser_fetcher import BrowserFetcher
from .http_fetcher import HttpFetcher
from .page_content import PageContent

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Fetch collaborator used by the crawl controller

    Lightweight routes go through aiohttp; rendered routes get a live
    Chromium page. The browser is only launched on the first rendered fetch.
    """

    def __init__(self, config: CrawlerConfig = None,
                 proxy_configuration: Optional[ProxyConfiguration] = None):
        config = config or CrawlerConfig()
        self.http = HttpFetcher(
            navigation_timeout=config.navigation_timeout,
            proxy_configuration=proxy_configuration
        )
        self.browser = BrowserFetcher(
            headless=config.headless,
            navigation_timeout=config.browser_navigation_timeout,
            proxy_configuration=proxy_configuration
        )
        self._browser_started = False
        self._browser_lock = asyncio.Lock()

    async def start(self):
        await self.http.start()

    async def close(self):
        await self.http.close()
        if self._browser_started:
            await self.browser.close()
            self._browser_started = False

    async def fetch(self, url: str, rendered: bool = False) -> PageContent:
        if rendered:
            async with self._browser_lock:
                if not self._browser_started:
                    logger.debug(f"First rendered route ({url}), launching browser")
                    await self.browser.start()
                    self._browser_started = True
            return await self.browser.fetch(url)
        return await self.http.fetch(url)
