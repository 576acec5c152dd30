"""
Scraper Runner - reads the input document, runs one crawl and exports its report
"""

import sys
import asyncio
import argparse
import logging
from typing import List, Optional

from .config import CrawlerConfig, ScraperInput, load_scraper_input
from .crawler import CrawlerBuilder, CrawlSummary
from .monitoring import LogManager, ProgressReporter

logger = logging.getLogger(__name__)


async def run_scraper(scraper_input: ScraperInput, output_path: str = 'crawl_data/dataset.jsonl',
                      config: CrawlerConfig = None, log_manager: LogManager = None,
                      fetcher=None) -> CrawlSummary:
    """Run one crawl over the input's start URLs and write the dataset"""
    logger.info("Starting AI Tools Directory Scraper...")

    builder = (CrawlerBuilder(scraper_input.start_urls)
               .max_items(scraper_input.max_items)
               .with_proxy(scraper_input.proxy_configuration)
               .with_output(output_path)
               .with_log_manager(log_manager))
    if config is not None:
        builder.with_config(config)
    if fetcher is not None:
        builder.with_fetcher(fetcher)

    controller = builder.build()
    summary = await controller.crawl()

    if log_manager:
        report = ProgressReporter(controller.metrics_collector).get_final_report()
        report['summary'] = summary.to_dict()
        report['errors'] = controller.error_handler.get_error_summary()
        log_manager.export_metrics_json(report)

    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aitools-crawler',
        description='Collect AI tool listings from public directories into a JSON Lines dataset'
    )
    parser.add_argument('--input', help='Path to the input JSON document')
    parser.add_argument('--start-url', action='append', dest='start_urls', default=[],
                        help='Start URL (repeatable); overrides startUrls from the input')
    parser.add_argument('--max-items', type=int, help='Number of tools to collect')
    parser.add_argument('--output', default='crawl_data/dataset.jsonl', help='Dataset path')
    parser.add_argument('--log-dir', default='crawl_data/logs', help='Directory for log files')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--concurrency', type=int, default=5, help='Number of crawl workers')
    parser.add_argument('--progress-interval', type=float,
                        help='Seconds between progress reports (off by default)')
    return parser


def resolve_input(args: argparse.Namespace) -> ScraperInput:
    """Merge the input document with command line overrides"""
    scraper_input = load_scraper_input(args.input)
    if args.start_urls:
        scraper_input.start_urls = list(args.start_urls)
    if args.max_items is not None:
        scraper_input = ScraperInput(
            start_urls=scraper_input.start_urls,
            max_items=args.max_items,
            proxy_configuration=scraper_input.proxy_configuration
        )
    return scraper_input


def cli(argv: Optional[List[str]] = None):
    """Console entry point"""
    args = build_parser().parse_args(argv)

    try:
        scraper_input = resolve_input(args)
        config = CrawlerConfig(max_concurrency=args.concurrency,
                               report_interval=args.progress_interval)
    except ValueError as e:
        print(f"❌ Invalid input: {e}")
        sys.exit(2)

    log_manager = LogManager(log_dir=args.log_dir, log_level=args.log_level)
    print("🤖 AI Tools Directory Crawler Starting...")
    try:
        summary = asyncio.run(run_scraper(scraper_input, args.output, config, log_manager))
    except KeyboardInterrupt:
        print("\n🛑 Crawler stopped by user")
        sys.exit(130)
    finally:
        log_manager.close()

    print(f"\n📦 Collected {summary.accepted_count}/{summary.max_items} tools "
          f"in {summary.elapsed_seconds:.1f}s ({summary.stop_reason})")
    print(f"  Requests handled: {summary.requests_handled}, failed: {summary.requests_failed}, "
          f"dropped: {summary.requests_dropped}")
    print(f"  Dataset: {args.output}")
    print("✅ Crawling completed!")
