"""
Shared fakes: an in-memory fetcher, canned extractors and a list-backed sink
"""

import copy
from typing import Dict, List, Optional

import pytest

from aitools_crawler.config import CrawlerConfig
from aitools_crawler.crawler import ExtractionResult, RouteLabel
from aitools_crawler.errors import FetchError
from aitools_crawler.extractors import ExtractorRegistry, SiteExtractor
from aitools_crawler.fetching import PageContent
from aitools_crawler.models import RawCandidate

LISTING_URL = 'https://www.producthunt.com/topics/artificial-intelligence'
TAAFT_URL = 'https://theresanaiforthat.com/ai/?ref=featured&v=full'


class FakeRenderedPage:
    """Stands in for RenderedPage; item count grows per scroll as scripted"""

    def __init__(self, counts: List[int], cards: Optional[List[dict]] = None,
                 links: Optional[List[str]] = None, has_cards: bool = True):
        self.counts = counts
        self.cards = cards or []
        self.hrefs = links or []
        self.has_cards = has_cards
        self.scrolls = 0
        self.evaluations = 0
        self.closed = False

    async def wait_for_selector(self, selector, timeout):
        return self.has_cards

    async def scroll_to_bottom(self):
        self.scrolls += 1

    async def count(self, selector):
        if not self.counts:
            return 0
        return self.counts[min(max(self.scrolls, 1), len(self.counts)) - 1]

    async def evaluate(self, script, arg=None):
        self.evaluations += 1
        return self.cards

    async def links(self, selector):
        return list(self.hrefs)

    async def close(self):
        self.closed = True


class FakeFetcher:
    """
    Serves canned pages by URL

    A value may be an HTML string, a FakeRenderedPage, an exception to raise, or
    a list of those consumed one per attempt (the last entry repeats).
    Unknown URLs fail with a 404.
    """

    def __init__(self, pages: Dict[str, object] = None):
        self.pages = dict(pages or {})
        self.calls: List[str] = []
        self.started = False
        self.closed = False

    async def start(self):
        self.started = True

    async def close(self):
        self.closed = True

    async def fetch(self, url: str, rendered: bool = False) -> PageContent:
        self.calls.append(url)
        outcome = self.pages.get(url)
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]

        if outcome is None:
            raise FetchError(url, "HTTP 404", 404)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, FakeRenderedPage):
            return PageContent(url=url, page=outcome, status_code=200)
        return PageContent(url=url, html=outcome, status_code=200)


class CannedExtractor(SiteExtractor):
    """Returns a prepared ExtractionResult per URL"""

    source_name = "Fake"

    def __init__(self, results: Dict[str, ExtractionResult] = None, rendered: bool = False):
        self.results = results or {}
        self.rendered = rendered
        self.calls: List[str] = []

    async def extract(self, content, request, state):
        self.calls.append(request.url)
        return copy.deepcopy(self.results.get(request.url, ExtractionResult()))


class MemorySink:
    def __init__(self):
        self.records = []

    async def append(self, tool):
        self.records.append(tool)


def candidate(index: int, description: str = None, url: str = None) -> RawCandidate:
    return RawCandidate(
        name=f"Tool {index}",
        description=description or f"Tool number {index} writes marketing copy",
        url=url or f"https://tool{index}.example.com",
        pricing="Freemium"
    )


def registry_for(extractor: SiteExtractor) -> ExtractorRegistry:
    """Registry routing every label to the same extractor"""
    return ExtractorRegistry({label: extractor for label in RouteLabel.routable()})


@pytest.fixture
def fast_config():
    return CrawlerConfig(
        max_concurrency=3,
        politeness_delay=(0.0, 0.0),
        retry_base_delay=0.01,
        scroll_settle_interval=0.0
    )


@pytest.fixture
def sink():
    return MemorySink()
