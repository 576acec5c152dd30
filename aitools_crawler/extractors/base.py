"""
Base Extractor Interface - Abstract base class for all site extractors
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from ..crawler.request import CrawlRequest
from ..crawler.result import ExtractionResult
from ..crawler.routing import RouteLabel
from ..crawler.state import CrawlState
from ..fetching import PageContent
from ..utils.text import extract_url

logger = logging.getLogger(__name__)


class SiteExtractor(ABC):
    """
    Turns one fetched page into raw candidates and follow-up requests

    Extractors never accept records themselves; the controller normalizes,
    deduplicates and counts whatever they return.
    """

    # Name recorded as the source of every record this extractor yields
    source_name: str = "unknown"
    # Whether pages need a live browser page instead of static HTML
    rendered: bool = False

    @abstractmethod
    async def extract(self, content: PageContent, request: CrawlRequest,
                      state: CrawlState) -> ExtractionResult:
        """Extract candidates and follow-up requests from a fetched page"""
        pass

    def select_links(self, content: PageContent, selector: str,
                     label: Optional[RouteLabel], limit: int) -> List[CrawlRequest]:
        """Follow-up requests for up to `limit` distinct links matching a CSS selector"""
        requests = []
        seen = set()
        for element in content.soup().select(selector):
            href = element.get('href')
            if not href:
                continue
            url = extract_url(href, content.page_url)
            if url in seen or url == content.page_url:
                continue
            seen.add(url)
            requests.append(CrawlRequest(url=url, label=label))
            if len(requests) >= limit:
                break
        return requests
