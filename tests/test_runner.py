"""
Tests for the runner and command line entry point
"""

import asyncio
import json

import pytest

from aitools_crawler.config import CrawlerConfig, ScraperInput
from aitools_crawler.monitoring import LogManager
from aitools_crawler.runner import build_parser, cli, resolve_input, run_scraper

from conftest import FakeFetcher

DETAIL_URL = "https://www.producthunt.com/posts/sum-it-up"
DETAIL_HTML = """
<html><body>
<h1>Sum It Up</h1>
<div class="tagline">Summarization for long reports</div>
<a href="https://sumitup.example.com">Website</a>
<p>Open source</p>
</body></html>
"""


def test_run_scraper_writes_dataset_and_report(tmp_path):
    output = tmp_path / "dataset.jsonl"
    log_manager = LogManager(log_dir=str(tmp_path / "logs"))
    config = CrawlerConfig(politeness_delay=(0.0, 0.0))
    try:
        summary = asyncio.run(run_scraper(
            ScraperInput(start_urls=[DETAIL_URL], max_items=5),
            output_path=str(output),
            config=config,
            log_manager=log_manager,
            fetcher=FakeFetcher({DETAIL_URL: DETAIL_HTML})
        ))
    finally:
        log_manager.close()

    assert summary.accepted_count == 1
    [record] = [json.loads(line) for line in output.read_text(encoding='utf-8').splitlines()]
    assert record['name'] == "Sum It Up"
    assert record['pricing'] == "Open Source"
    assert record['source'] == "ProductHunt"
    assert record['tags'] == ["Summarization"]

    [report_file] = (tmp_path / "logs").glob("metrics_export_*.json")
    report = json.loads(report_file.read_text(encoding='utf-8'))
    assert report['summary']['accepted_count'] == 1


def test_command_line_overrides_input(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps({'startUrls': ['https://theresanaiforthat.com/ai/'], 'maxItems': 50}))

    args = build_parser().parse_args([
        '--input', str(path),
        '--start-url', 'https://www.producthunt.com/topics/ai',
        '--start-url', 'https://www.producthunt.com/topics/writing',
        '--max-items', '7',
    ])
    scraper_input = resolve_input(args)

    assert scraper_input.start_urls == [
        'https://www.producthunt.com/topics/ai',
        'https://www.producthunt.com/topics/writing',
    ]
    assert scraper_input.max_items == 7


def test_invalid_max_items_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli(['--max-items', '0'])

    assert excinfo.value.code == 2
    assert "Invalid input" in capsys.readouterr().out
