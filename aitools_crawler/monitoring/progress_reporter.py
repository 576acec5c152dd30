import time
import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional
from .metrics_collector import MetricsCollector

BAR_WIDTH = 30


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


class ProgressReporter:
    """Periodic console reports while crawling, and the final report afterwards"""

    def __init__(self, metrics_collector: MetricsCollector, report_interval: float = 30.0,
                 max_items: Optional[int] = None):
        self.metrics = metrics_collector
        self.report_interval = report_interval
        self.max_items = max_items
        self.reporting_task: Optional[asyncio.Task] = None

    async def start_reporting(self):
        self.reporting_task = asyncio.create_task(self._report_periodically())

    async def stop_reporting(self):
        task, self.reporting_task = self.reporting_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _report_periodically(self):
        while True:
            await asyncio.sleep(self.report_interval)
            self.print_progress_report()
            self.metrics.store_historical_snapshot()

    def budget_bar(self, accepted: int) -> str:
        if not self.max_items:
            return f"{accepted}"
        filled = int(BAR_WIDTH * min(accepted / self.max_items, 1.0))
        return f"[{'#' * filled}{'.' * (BAR_WIDTH - filled)}] {accepted}/{self.max_items}"

    def print_progress_report(self):
        snapshot = self.metrics.get_current_snapshot()
        crawl = snapshot['crawl_metrics']
        system = snapshot['system_metrics']

        print(f"\n{'-' * 60}")
        print(f"📊 CRAWL PROGRESS REPORT - {datetime.now().strftime('%H:%M:%S')}")
        print(f"{'-' * 60}")
        print(f"🧰 Tools {self.budget_bar(crawl['tools_accepted'])}")
        print(f"  rejected {crawl['candidates_rejected']}, duplicates {crawl['duplicates_skipped']}")

        print(f"🌐 Pages fetched {crawl['pages_fetched']} ({crawl['pages_per_second']:.2f}/s), "
              f"queued {crawl['queue_depth']}, failed {crawl['fetch_errors']}, "
              f"unrouted {crawl['requests_dropped']}, "
              f"unstored {crawl['write_errors']}")
        print(f"  success {crawl['fetch_success_rate']:.1f}%, "
              f"avg response {crawl['avg_response_time']:.2f}s")

        print(f"💻 CPU {system['cpu_percent']:.1f}%, memory {system['memory_percent']:.1f}%, "
              f"crawler RSS {system['process_rss_mb']:.0f} MB, "
              f"browser processes {system['browser_processes']}")

        for source, metrics in snapshot['source_metrics'].items():
            print(f"  🌍 {source}: {metrics['tools_accepted']} tools from "
                  f"{metrics['pages_fetched']} pages, {metrics['errors']} failed")

    def get_final_report(self) -> Dict[str, Any]:
        return {
            'final_snapshot': self.metrics.get_current_snapshot(),
            'performance_summary': self._performance_summary(),
            'source_summary': self._source_summary(),
            'efficiency_metrics': self._efficiency_metrics()
        }

    def _performance_summary(self) -> Dict[str, Any]:
        crawl = self.metrics.crawl_metrics
        minutes = (time.time() - self.metrics.start_time) / 60
        return {
            'total_runtime_minutes': minutes,
            'pages_per_minute': _ratio(crawl.pages_fetched, minutes),
            'tools_per_minute': _ratio(crawl.tools_accepted, minutes),
            'fetch_success_rate': crawl.fetch_success_rate
        }

    def _source_summary(self) -> List[Dict[str, Any]]:
        return [
            {
                'source': name,
                'pages_fetched': metrics.pages_fetched,
                'tools_accepted': metrics.tools_accepted,
                'total_errors': metrics.errors,
                'last_accepted': metrics.last_accepted.isoformat() if metrics.last_accepted else None
            }
            for name, metrics in self.metrics.source_metrics.items()
        ]

    def _efficiency_metrics(self) -> Dict[str, Any]:
        crawl = self.metrics.crawl_metrics
        seen = crawl.candidates_seen
        return {
            'acceptance_rate': _ratio(crawl.tools_accepted, seen) * 100,
            'rejection_rate': _ratio(crawl.candidates_rejected, seen) * 100,
            'duplication_rate': _ratio(crawl.duplicates_skipped, seen) * 100,
            'tools_per_page': _ratio(crawl.tools_accepted, crawl.pages_fetched)
        }
