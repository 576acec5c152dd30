import time
import logging
from typing import Optional

import aiohttp

from ..config import ProxyConfiguration
from ..errors import FetchError
from ..utils.headers import build_headers
from .page_content import PageContent

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Plain HTML fetches over a shared aiohttp session"""

    def __init__(self, navigation_timeout: float = 30.0,
                 proxy_configuration: Optional[ProxyConfiguration] = None):
        self.navigation_timeout = navigation_timeout
        self.proxy_configuration = proxy_configuration
        self.session: Optional[aiohttp.ClientSession] = None

    async def start(self):
        if self.session is None:
            self.session = aiohttp.ClientSession()

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def fetch(self, url: str) -> PageContent:
        """Fetch a single URL; non-200 responses and network failures raise FetchError"""
        if self.session is None:
            raise RuntimeError("HttpFetcher not started. Call start() first")

        start_time = time.time()
        timeout = aiohttp.ClientTimeout(total=self.navigation_timeout)
        proxy = self.proxy_configuration.new_url() if self.proxy_configuration else None

        try:
            async with self.session.get(url, headers=build_headers(), timeout=timeout,
                                        proxy=proxy) as response:
                response_time = time.time() - start_time

                if response.status == 200:
                    html = await response.text()
                    return PageContent(
                        url=url,
                        loaded_url=str(response.url),
                        html=html,
                        status_code=response.status,
                        response_time=response_time
                    )
                elif response.status == 429:
                    raise FetchError(url, "Rate limited", response.status)
                elif 400 <= response.status < 500:
                    raise FetchError(url, f"Client error: {response.status}", response.status)
                elif 500 <= response.status < 600:
                    raise FetchError(url, f"Server error: {response.status}", response.status)
                else:
                    raise FetchError(url, f"Unexpected HTTP {response.status}", response.status)

        except (aiohttp.ClientError, TimeoutError) as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
