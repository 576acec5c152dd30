import time
import psutil
import logging
import threading
from datetime import datetime
from dataclasses import asdict
from typing import Any, Dict, Optional
from collections import deque
from .crawl_metrics import CrawlMetrics
from .system_metrics import SystemMetrics
from .source_metrics import SourceMetrics

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class MetricsCollector:
    """
    Counters for one crawl run, safe to update from any worker

    Pages are counted per directory (source) as well as globally; every raw
    candidate ends up in exactly one of accepted, rejected, duplicate or
    unstored (accepted but lost by the dataset sink).
    """

    def __init__(self, history_size: int = 100):
        self.start_time = time.time()

        self.crawl_metrics = CrawlMetrics()
        self.system_metrics = SystemMetrics()
        self.source_metrics: Dict[str, SourceMetrics] = {}

        self.metrics_history: deque = deque(maxlen=history_size)
        self.response_times: deque = deque(maxlen=history_size)

        self._process = psutil.Process()
        self._lock = threading.Lock()

    def for_source(self, source: str) -> SourceMetrics:
        metrics = self.source_metrics.get(source)
        if metrics is None:
            metrics = self.source_metrics[source] = SourceMetrics(source=source)
        return metrics

    def record_page_fetched(self, url: str, source: str, response_time: float):
        with self._lock:
            self.crawl_metrics.pages_fetched += 1
            self.for_source(source).pages_fetched += 1
            self.response_times.append(response_time)
            self._refresh_rates()

    def record_fetch_error(self, url: str, source: Optional[str] = None):
        """A request abandoned after its last retry"""
        with self._lock:
            self.crawl_metrics.fetch_errors += 1
            if source:
                self.for_source(source).errors += 1
            self._refresh_rates()

    def record_dropped_request(self, url: str):
        with self._lock:
            self.crawl_metrics.requests_dropped += 1

    def record_candidate(self, source: str, accepted: bool, rejected: bool = False):
        """Count one candidate as accepted, rejected by validation, or a duplicate"""
        with self._lock:
            crawl = self.crawl_metrics
            crawl.candidates_seen += 1

            if accepted:
                crawl.tools_accepted += 1
                source_metrics = self.for_source(source)
                source_metrics.tools_accepted += 1
                source_metrics.last_accepted = datetime.now()
            elif rejected:
                crawl.candidates_rejected += 1
            else:
                crawl.duplicates_skipped += 1

    def record_write_error(self, source: str):
        """An accepted tool the dataset sink failed to store"""
        with self._lock:
            self.crawl_metrics.candidates_seen += 1
            self.crawl_metrics.write_errors += 1
            self.for_source(source).errors += 1

    def update_queue_depth(self, depth: int):
        with self._lock:
            self.crawl_metrics.queue_depth = depth

    def collect_system_metrics(self):
        """Sample host CPU/memory and the crawler process (including browser children)"""
        system = self.system_metrics
        try:
            system.cpu_percent = psutil.cpu_percent(interval=None)
            system.memory_percent = psutil.virtual_memory().percent

            with self._process.oneshot():
                system.process_rss_mb = self._process.memory_info().rss / MB
                system.process_threads = self._process.num_threads()
            system.browser_processes = len(self._process.children(recursive=True))

            try:
                system.open_files = (self._process.num_fds() if hasattr(self._process, 'num_fds')
                                     else len(self._process.open_files()))
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                system.open_files = 0

        except psutil.Error as e:
            logger.warning(f"Failed to collect system metrics: {e}")

    def _refresh_rates(self):
        crawl = self.crawl_metrics
        elapsed = time.time() - self.start_time
        if elapsed > 0:
            crawl.pages_per_second = crawl.pages_fetched / elapsed

        attempted = crawl.pages_fetched + crawl.fetch_errors
        if attempted:
            crawl.fetch_success_rate = crawl.pages_fetched / attempted * 100

        if self.response_times:
            crawl.avg_response_time = sum(self.response_times) / len(self.response_times)

    def get_current_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            self.collect_system_metrics()
            return {
                'timestamp': datetime.now().isoformat(),
                'uptime_seconds': time.time() - self.start_time,
                'crawl_metrics': asdict(self.crawl_metrics),
                'system_metrics': asdict(self.system_metrics),
                'source_metrics': {name: asdict(m) for name, m in self.source_metrics.items()}
            }

    def store_historical_snapshot(self):
        self.metrics_history.append(self.get_current_snapshot())
