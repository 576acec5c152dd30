"""
Tests for the JSON Lines dataset writer
"""

import asyncio
import json

from aitools_crawler.models import NormalizedTool
from aitools_crawler.storage import DatasetWriter


def read_names(path):
    return [json.loads(line)['name'] for line in path.read_text(encoding='utf-8').splitlines()]


def tool(name):
    return NormalizedTool(
        name=name,
        description="Summarizes long documents",
        url=f"https://{name.lower()}.example.com",
        source="TheresAnAIForThat",
        source_url="https://theresanaiforthat.com/ai/",
        scraped_at="2024-01-01T00:00:00+00:00",
        pricing="Free",
        tags=["Summarization"]
    )


def test_append_writes_one_json_line_per_record(tmp_path):
    path = tmp_path / "out" / "dataset.jsonl"
    writer = DatasetWriter(path)

    async def run():
        await asyncio.gather(*(writer.append(tool(f"Tool{i}")) for i in range(5)))

    asyncio.run(run())

    lines = path.read_text(encoding='utf-8').splitlines()
    assert len(lines) == 5
    assert writer.records_written == 5
    record = json.loads(lines[0])
    assert record['sourceUrl'] == "https://theresanaiforthat.com/ai/"
    assert record['tags'] == ["Summarization"]
    assert 'category' not in record


def test_previous_dataset_is_replaced(tmp_path):
    path = tmp_path / "dataset.jsonl"
    path.write_text('{"name": "stale"}\n', encoding='utf-8')

    writer = DatasetWriter(path)
    asyncio.run(writer.append(tool("Fresh")))

    assert read_names(path) == ["Fresh"]


def test_append_mode_keeps_previous_records(tmp_path):
    path = tmp_path / "dataset.jsonl"
    asyncio.run(DatasetWriter(path).append(tool("First")))

    writer = DatasetWriter(path, overwrite=False)
    asyncio.run(writer.append(tool("Second")))

    assert read_names(path) == ["First", "Second"]


def test_non_ascii_is_preserved(tmp_path):
    writer = DatasetWriter(tmp_path / "dataset.jsonl")
    asyncio.run(writer.append(tool("Über")))

    assert "Über" in (tmp_path / "dataset.jsonl").read_text(encoding='utf-8')
