"""
Crawl Controller - budget-bounded, deduplicated traversal of directory listings
"""

import asyncio
import random
import time
import logging
from functools import partial
from typing import Iterable, List, Optional, Set

from ..config import CrawlerConfig
from ..deduplication import normalize
from ..errors import ClassificationFailure, ExtractionError, FetchError
from ..extractors import ExtractorRegistry, SiteExtractor
from ..fetching import PageContent
from ..models import NormalizedTool, RawCandidate
from ..monitoring import MetricsCollector, ProgressReporter
from ..utils.error_handler import ErrorHandler, RetryConfig
from .frontier import Frontier
from .request import CrawlRequest
from .result import CrawlSummary, ExtractionResult
from .routing import classify_url
from .state import CrawlState

logger = logging.getLogger(__name__)


class CrawlController:
    """
    Drives the frontier to completion under a global item budget

    A fixed pool of workers pulls requests from the frontier, fetches them,
    hands the page to the extractor registered for the request's route and
    accepts the resulting candidates through CrawlState. The run ends when the
    frontier drains or the budget is spent; the latter cancels the pool
    without waiting for in-flight pages.
    """

    def __init__(self, fetcher, sink, registry: ExtractorRegistry = None,
                 config: CrawlerConfig = None, metrics_collector: MetricsCollector = None,
                 log_manager=None):
        self.config = config or CrawlerConfig()
        self.fetcher = fetcher
        self.sink = sink
        self.registry = registry or ExtractorRegistry.default(self.config)
        self.log_manager = log_manager

        # Seeds used by crawl(); start() takes them explicitly
        self.start_urls: List[str] = []
        self.max_items: int = 100

        self.error_handler = ErrorHandler(RetryConfig(
            max_retries=self.config.max_retries,
            base_delay=self.config.retry_base_delay
        ))
        self.metrics_collector = metrics_collector or MetricsCollector()
        self.progress_reporter = None
        if self.config.report_interval:
            self.progress_reporter = ProgressReporter(self.metrics_collector, self.config.report_interval)

        self.state: Optional[CrawlState] = None
        self.frontier: Optional[Frontier] = None
        self._browser_slots: Optional[asyncio.Semaphore] = None
        self._pending_writes: Set[asyncio.Task] = set()

        self.requests_handled = 0
        self.requests_failed = 0
        self.requests_dropped = 0
        self.write_failures = 0
        self._stopped_for_budget = False

    async def crawl(self) -> CrawlSummary:
        """Run with the seeds configured on this controller"""
        return await self.start(self.start_urls, self.max_items)

    async def start(self, seed_urls: Iterable[str], max_items: int) -> CrawlSummary:
        """
        Crawl from seed_urls until the frontier is empty or max_items tools are accepted

        Returns:
            CrawlSummary with the final accepted count and why the run stopped
        """
        seed_urls = list(seed_urls)
        start_time = time.time()
        self.prepare_run(max_items)

        logger.info(f"Configuration: maxItems={max_items}, startUrls={len(seed_urls)}")
        for url in seed_urls:
            self._enqueue(CrawlRequest(url=url, label=classify_url(url)))

        await self.fetcher.start()
        if self.progress_reporter:
            await self.progress_reporter.start_reporting()

        workers = [
            asyncio.create_task(self._worker(i))
            for i in range(self.config.max_concurrency)
        ]

        try:
            await self._wait_for_completion()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

            # Records already accepted must reach the dataset
            if self._pending_writes:
                await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

            if self.progress_reporter:
                await self.progress_reporter.stop_reporting()
            await self.fetcher.close()

        summary = CrawlSummary(
            accepted_count=self.state.accepted_count,
            max_items=max_items,
            requests_handled=self.requests_handled,
            requests_failed=self.requests_failed,
            requests_dropped=self.requests_dropped,
            write_failures=self.write_failures,
            stop_reason=self._stop_reason(),
            elapsed_seconds=time.time() - start_time
        )

        error_summary = self.error_handler.get_error_summary()
        if error_summary['total_errors'] > 0:
            logger.warning(f"Fetch errors: {error_summary}")

        logger.info(f"Scraping completed. Total items scraped: {summary.accepted_count} "
                    f"({summary.stop_reason})")
        return summary

    def prepare_run(self, max_items: int):
        """Fresh budget, seen-set and frontier for one run"""
        self.max_items = max_items
        if self.progress_reporter:
            self.progress_reporter.max_items = max_items
        self.state = CrawlState(max_items)
        self.frontier = Frontier(max_requests=max_items * self.config.requests_per_item)
        self._browser_slots = asyncio.Semaphore(self.config.browser_concurrency)
        self._pending_writes = set()
        self.requests_handled = 0
        self.requests_failed = 0
        self.requests_dropped = 0
        self.write_failures = 0
        self._stopped_for_budget = False

    async def _wait_for_completion(self):
        """Return once the frontier drains or the budget is exhausted"""
        drained = asyncio.create_task(self.frontier.join())
        exhausted = asyncio.create_task(self.state.exhausted_event.wait())
        try:
            done, _ = await asyncio.wait({drained, exhausted}, return_when=asyncio.FIRST_COMPLETED)
            self._stopped_for_budget = exhausted in done
        finally:
            drained.cancel()
            exhausted.cancel()

    def _stop_reason(self) -> str:
        if self._stopped_for_budget or self.state.exhausted:
            return "budget_exhausted"
        if self.frontier.limit_reached:
            return "request_limit"
        return "frontier_exhausted"

    async def _worker(self, worker_id: int):
        """Fetch-then-process one request at a time until cancelled"""
        while True:
            request = await self.frontier.get()
            fetched = False
            try:
                if self.state.exhausted_event.is_set():
                    logger.debug(f"[WORKER-{worker_id}] Budget spent, discarding {request.url}")
                else:
                    fetched = await self.dispatch(request)
            except Exception as e:
                logger.error(f"[WORKER-{worker_id}] Unexpected error handling {request.url}: {e}",
                             exc_info=True)
            finally:
                self.frontier.task_done()
                self.metrics_collector.update_queue_depth(self.frontier.qsize())

            if fetched and not self.state.exhausted_event.is_set():
                await self._politeness_pause()

    async def _politeness_pause(self):
        low, high = self.config.politeness_delay
        if high > 0:
            await asyncio.sleep(random.uniform(low, high))

    async def dispatch(self, request: CrawlRequest) -> bool:
        """
        Handle one frontier entry end to end

        Returns:
            True when the request went out to the network, False when it was
            dropped before fetching (budget spent or no route)
        """
        if self.state.exhausted:
            self.state.exhausted_event.set()
            return False

        label = request.label or classify_url(request.url)
        try:
            extractor = self.registry.get(label, request.url)
        except ClassificationFailure as e:
            logger.warning(f"{e}, dropping request")
            self.requests_dropped += 1
            self.metrics_collector.record_dropped_request(request.url)
            return False

        request.label = label
        logger.info(f"Handling request: {request.url} [{label.value}]")

        if extractor.rendered:
            async with self._browser_slots:
                await self._handle(request, extractor)
        else:
            await self._handle(request, extractor)
        return True

    async def _handle(self, request: CrawlRequest, extractor: SiteExtractor):
        content = await self._fetch(request, extractor)
        if content is None:
            return

        try:
            if self.state.exhausted_event.is_set():
                logger.info(f"Max items reached, discarding {request.url}")
                return

            self.requests_handled += 1
            self.metrics_collector.record_page_fetched(
                request.url, extractor.source_name, content.response_time
            )
            result = await self._extract(extractor, content, request)
        finally:
            await content.close()

        if result is None:
            return

        source = result.source or extractor.source_name
        for candidate in result.candidates:
            if self.state.exhausted:
                break
            await self._process_candidate(candidate, source, request)

        enqueued = 0
        for follow_up in result.follow_ups:
            if self.state.exhausted:
                break
            if self._enqueue(follow_up):
                enqueued += 1

        if self.log_manager:
            self.log_manager.log_performance_event(
                'page_handled',
                url=request.url,
                label=request.label.value,
                response_time=content.response_time,
                retries=request.retry_count,
                candidates=len(result.candidates),
                follow_ups_enqueued=enqueued,
                accepted_total=self.state.accepted_count
            )

    def _request_timeout(self, extractor: SiteExtractor) -> float:
        if extractor.rendered:
            return self.config.browser_request_timeout
        return self.config.request_timeout

    async def _fetch(self, request: CrawlRequest, extractor: SiteExtractor) -> Optional[PageContent]:
        """Fetch with retries; None once retries are exhausted"""
        timeout = self._request_timeout(extractor)
        attempts = 0

        async def attempt():
            nonlocal attempts
            request.retry_count = attempts
            attempts += 1
            return await asyncio.wait_for(
                self.fetcher.fetch(request.url, rendered=extractor.rendered),
                timeout=timeout
            )

        try:
            content = await self.error_handler.execute_with_retry(attempt, request.url)
        except FetchError as e:
            request.retry_count = e.retry_count
            self.requests_failed += 1
            self.metrics_collector.record_fetch_error(request.url, extractor.source_name)
            return None

        request.loaded_url = content.loaded_url
        return content

    async def _extract(self, extractor: SiteExtractor, content: PageContent,
                       request: CrawlRequest) -> Optional[ExtractionResult]:
        try:
            return await asyncio.wait_for(
                extractor.extract(content, request, self.state),
                timeout=self._request_timeout(extractor)
            )
        except asyncio.TimeoutError:
            logger.error(f"Extraction timed out for {request.url}")
        except ExtractionError as e:
            logger.error(f"Extraction failed for {request.url}: {e}")
        except Exception as e:
            logger.error(f"Error processing {request.url}: {e}", exc_info=True)
        return None

    async def _process_candidate(self, candidate: RawCandidate, source: str, request: CrawlRequest):
        tool = normalize(candidate, source, request.page_url)
        if tool is None:
            self.metrics_collector.record_candidate(source, accepted=False, rejected=True)
            return

        if not await self.state.try_accept(tool):
            if not self.state.exhausted:
                self.metrics_collector.record_candidate(source, accepted=False)
            return

        if not await self._write(tool, source):
            return

        count = self.state.accepted_count
        if count <= 10 or count % 10 == 0:
            logger.info(f"Scraped tool: {tool.name} ({count}/{self.state.max_items})")

    async def _write(self, tool: NormalizedTool, source: str) -> bool:
        """
        Append to the sink; the write outlives a cancelled worker

        Returns:
            False when the sink failed; the tool's budget slot is given back
        """
        task = asyncio.ensure_future(self.sink.append(tool))
        self._pending_writes.add(task)
        task.add_done_callback(partial(self._write_done, tool, source))
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            raise
        except Exception:
            # Reported and released in _write_done
            return False
        return True

    def _write_done(self, tool: NormalizedTool, source: str, task: asyncio.Task):
        self._pending_writes.discard(task)
        if task.cancelled():
            return
        if task.exception() is None:
            self.metrics_collector.record_candidate(source, accepted=True)
            return

        logger.error(f"Failed to append {tool.name} to dataset: {task.exception()}")
        self.write_failures += 1
        self.state.release(tool)
        self.metrics_collector.record_write_error(source)

    def _enqueue(self, request: CrawlRequest) -> bool:
        """Add a request to the frontier while budget remains"""
        if self.state.exhausted:
            return False
        if request.label is None:
            request.label = classify_url(request.url)
        return self.frontier.add(request)
