"""
Configuration - scraper input document and crawler tuning knobs
"""

import json
import itertools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_START_URLS = [
    'https://theresanaiforthat.com/ai/?ref=featured&v=full',
    'https://www.producthunt.com/topics/artificial-intelligence',
]
DEFAULT_MAX_ITEMS = 100


@dataclass
class ProxyConfiguration:
    """Proxy settings passed through to the fetchers untouched by the crawl core"""
    use_apify_proxy: bool = False
    apify_proxy_groups: List[str] = field(default_factory=list)
    proxy_urls: List[str] = field(default_factory=list)

    def __post_init__(self):
        self._rotation = itertools.cycle(self.proxy_urls) if self.proxy_urls else None
        if self.use_apify_proxy and not self.proxy_urls:
            groups = ", ".join(self.apify_proxy_groups) or "default"
            logger.warning(f"useApifyProxy requested (groups: {groups}) but no proxyUrls given; "
                           f"Apify proxy is not available outside the platform, fetching directly")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['ProxyConfiguration']:
        if not data:
            return None
        return cls(
            use_apify_proxy=bool(data.get('useApifyProxy', False)),
            apify_proxy_groups=list(data.get('apifyProxyGroups') or []),
            proxy_urls=list(data.get('proxyUrls') or [])
        )

    def new_url(self) -> Optional[str]:
        """Next proxy URL in round-robin order, or None when no URLs are configured"""
        if self._rotation is None:
            return None
        return next(self._rotation)


@dataclass
class ScraperInput:
    """Input document of one scraper run"""
    start_urls: List[str] = field(default_factory=lambda: list(DEFAULT_START_URLS))
    max_items: int = DEFAULT_MAX_ITEMS
    proxy_configuration: Optional[ProxyConfiguration] = None

    def __post_init__(self):
        if not self.start_urls:
            self.start_urls = list(DEFAULT_START_URLS)
        if isinstance(self.max_items, bool) or not isinstance(self.max_items, int) or self.max_items < 1:
            raise ValueError(f"maxItems must be a positive integer, got {self.max_items!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ScraperInput':
        """Build from the camelCase input document; missing keys fall back to defaults"""
        data = data or {}

        start_urls = []
        for entry in data.get('startUrls') or []:
            url = entry.get('url') if isinstance(entry, dict) else entry
            if isinstance(url, str) and url.strip():
                start_urls.append(url.strip())

        max_items = data.get('maxItems')
        return cls(
            start_urls=start_urls,
            max_items=DEFAULT_MAX_ITEMS if max_items is None else max_items,
            proxy_configuration=ProxyConfiguration.from_dict(data.get('proxyConfiguration'))
        )


def load_scraper_input(path: Optional[str]) -> ScraperInput:
    """Read the input JSON document; a missing path yields the defaults"""
    if not path:
        return ScraperInput()

    input_path = Path(path)
    if not input_path.exists():
        logger.warning(f"Input file {input_path} not found, using defaults")
        return ScraperInput()

    with open(input_path, 'r', encoding='utf-8') as f:
        return ScraperInput.from_dict(json.load(f))


@dataclass
class CrawlerConfig:
    """Tuning for the crawl controller, fetchers and infinite scroll"""
    max_concurrency: int = 5
    browser_concurrency: int = 2
    max_retries: int = 3
    retry_base_delay: float = 1.0
    request_timeout: float = 60.0
    browser_request_timeout: float = 180.0
    navigation_timeout: float = 30.0
    browser_navigation_timeout: float = 60.0
    politeness_delay: Tuple[float, float] = (0.5, 1.5)
    scroll_settle_interval: float = 1.5
    scroll_stall_limit: int = 3
    items_per_scroll_batch: int = 50
    # Share of browser_request_timeout a listing may spend waiting and scrolling
    scroll_time_share: float = 0.75
    requests_per_item: int = 3
    report_interval: Optional[float] = None
    headless: bool = True

    def __post_init__(self):
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.browser_concurrency < 1:
            raise ValueError("browser_concurrency must be at least 1")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")

        low, high = self.politeness_delay
        if low < 0 or high < low:
            raise ValueError(f"Invalid politeness delay range: {self.politeness_delay}")
        if not 0 < self.scroll_time_share < 1:
            raise ValueError("scroll_time_share must be between 0 and 1")

    @property
    def scroll_time_limit(self) -> float:
        return self.browser_request_timeout * self.scroll_time_share
