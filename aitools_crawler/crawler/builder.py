"""
Crawler Builder - Fluent API for assembling a crawl controller
"""

import dataclasses
from typing import Dict, List, Optional

from ..config import DEFAULT_MAX_ITEMS, CrawlerConfig, ProxyConfiguration
from ..extractors import ExtractorRegistry, SiteExtractor
from ..fetching import PageFetcher
from ..storage import DatasetWriter
from .controller import CrawlController
from .routing import RouteLabel


class CrawlerBuilder:
    """Builder for creating crawl controllers with custom collaborators"""

    def __init__(self, start_urls: List[str]):
        self.start_urls = list(start_urls)
        self._max_items = DEFAULT_MAX_ITEMS
        self._config = CrawlerConfig()
        self._overrides = {}
        self._proxy_configuration: Optional[ProxyConfiguration] = None
        self._fetcher = None
        self._sink = None
        self._output_path = 'crawl_data/dataset.jsonl'
        self._registry: Optional[ExtractorRegistry] = None
        self._extractors: Dict[RouteLabel, SiteExtractor] = {}
        self._metrics_collector = None
        self._log_manager = None

    def max_items(self, count: int):
        """Set the number of tools to accept before stopping"""
        if count < 1:
            raise ValueError(f"max_items must be at least 1, got {count}")
        self._max_items = count
        return self

    def with_config(self, config: CrawlerConfig):
        """Start from a full config; later with_* calls still apply on top"""
        self._config = config
        return self

    def with_concurrency(self, max_concurrency: int, browser_concurrency: int = None):
        self._overrides['max_concurrency'] = max_concurrency
        if browser_concurrency is not None:
            self._overrides['browser_concurrency'] = browser_concurrency
        return self

    def with_politeness_delay(self, low: float, high: float):
        """Random pause between requests on one worker, in seconds"""
        self._overrides['politeness_delay'] = (low, high)
        return self

    def with_retries(self, max_retries: int, base_delay: float = None):
        self._overrides['max_retries'] = max_retries
        if base_delay is not None:
            self._overrides['retry_base_delay'] = base_delay
        return self

    def with_timeouts(self, request_timeout: float = None, browser_request_timeout: float = None):
        if request_timeout is not None:
            self._overrides['request_timeout'] = request_timeout
        if browser_request_timeout is not None:
            self._overrides['browser_request_timeout'] = browser_request_timeout
        return self

    def with_progress_reporting(self, interval: float = 30.0):
        """Print a progress report every interval seconds"""
        self._overrides['report_interval'] = interval
        return self

    def with_proxy(self, proxy_configuration: Optional[ProxyConfiguration]):
        self._proxy_configuration = proxy_configuration
        return self

    def with_fetcher(self, fetcher):
        """Replace the default aiohttp/Playwright fetcher"""
        self._fetcher = fetcher
        return self

    def with_output(self, path: str):
        self._output_path = path
        return self

    def with_sink(self, sink):
        """Replace the JSONL dataset writer; sink must provide async append(tool)"""
        self._sink = sink
        return self

    def with_registry(self, registry: ExtractorRegistry):
        self._registry = registry
        return self

    def with_extractor(self, label: RouteLabel, extractor: SiteExtractor):
        """Override the extractor for one route"""
        self._extractors[label] = extractor
        return self

    def with_metrics(self, metrics_collector):
        self._metrics_collector = metrics_collector
        return self

    def with_log_manager(self, log_manager):
        """Send per-page performance events to the log manager's performance log"""
        self._log_manager = log_manager
        return self

    def build(self) -> CrawlController:
        """Build the configured controller"""
        config = dataclasses.replace(self._config, **self._overrides)

        registry = self._registry or ExtractorRegistry.default(config)
        for label, extractor in self._extractors.items():
            registry = registry.with_extractor(label, extractor)

        fetcher = self._fetcher or PageFetcher(config, self._proxy_configuration)
        sink = self._sink or DatasetWriter(self._output_path)

        controller = CrawlController(
            fetcher=fetcher,
            sink=sink,
            registry=registry,
            config=config,
            metrics_collector=self._metrics_collector,
            log_manager=self._log_manager
        )
        controller.start_urls = list(self.start_urls)
        controller.max_items = self._max_items
        return controller
