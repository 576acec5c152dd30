"""
TheresAnAIForThat Extractor - infinite-scroll listing rendered in a browser
"""

import re
import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..crawler.request import CrawlRequest
from ..crawler.result import ExtractionResult
from ..crawler.routing import RouteLabel
from ..crawler.state import CrawlState
from ..errors import ExtractionError
from ..fetching import PageContent
from ..models import RawCandidate
from ..utils.text import extract_url, infer_tags
from .base import SiteExtractor
from .infinite_scroll import ScrollTracker, scroll_until_done

logger = logging.getLogger(__name__)

TOOL_CARD_SELECTOR = '.tool-card'
PAGINATION_SELECTOR = 'a[href*="page"], a[href*="?p="], .pagination a, a.next'
INFINITE_SCROLL_PATH = re.compile(r'theresanaiforthat\.com/[a-z0-9-]+/?(?:\?|$)')

# Reads every loaded card in one evaluation; cards missing required fields come back null
EXTRACT_CARDS_SCRIPT = """
(selector) => Array.from(document.querySelectorAll(selector)).map(card => {
    const text = (query) => {
        const el = card.querySelector(query);
        return el && el.textContent ? el.textContent.trim() : '';
    };
    const link = card.querySelector('a');
    return {
        name: text('[class*="tool-name"]'),
        version: text('[class*="tool-version"]'),
        description: text('[class*="tool-description"]'),
        url: link ? (link.getAttribute('href') || '') : '',
        category: text('[class*="task_label"]'),
        pricing: text('[class*="pricing"], [class*="price"]')
    };
})
"""


class TheresAnAIForThatExtractor(SiteExtractor):
    """Scrolls the listing until it stops growing, then reads all tool cards at once"""

    source_name = "TheresAnAIForThat"
    rendered = True

    def __init__(self, settle_interval: float = 1.5, stall_limit: int = 3,
                 items_per_batch: int = 50, card_timeout: float = 30.0,
                 pagination_limit: int = 10, scroll_time_limit: Optional[float] = None):
        self.settle_interval = settle_interval
        self.stall_limit = stall_limit
        self.items_per_batch = items_per_batch
        self.card_timeout = card_timeout
        self.pagination_limit = pagination_limit
        self.scroll_time_limit = scroll_time_limit

    async def extract(self, content: PageContent, request: CrawlRequest,
                      state: CrawlState) -> ExtractionResult:
        page = content.page
        if page is None:
            raise ExtractionError(f"{self.source_name} needs a rendered page: {request.url}")

        logger.info(f"Processing TheresAnAIForThat.com: {request.url}")
        result = ExtractionResult(source=self.source_name)

        card_timeout = self.card_timeout
        deadline = None
        if self.scroll_time_limit:
            deadline = asyncio.get_running_loop().time() + self.scroll_time_limit
            card_timeout = min(card_timeout, self.scroll_time_limit)

        if not await page.wait_for_selector(TOOL_CARD_SELECTOR, card_timeout):
            logger.warning(f"No {TOOL_CARD_SELECTOR} found on {request.url}, page might have different structure")

        tracker = ScrollTracker(
            target_count=state.max_items,
            items_per_batch=self.items_per_batch,
            stall_limit=self.stall_limit
        )
        await scroll_until_done(page, tracker, TOOL_CARD_SELECTOR,
                                settle_interval=self.settle_interval,
                                should_stop=lambda: state.exhausted,
                                deadline=deadline)

        logger.info("Extracting tools data...")
        cards = await page.evaluate(EXTRACT_CARDS_SCRIPT, TOOL_CARD_SELECTOR) or []
        for card in cards:
            try:
                result.candidates.append(self._parse_card(card))
            except ExtractionError as e:
                logger.debug(f"Skipping tool card on {request.url}: {e}")

        logger.info(f"Extracted {len(result.candidates)} tools from page")

        if not state.exhausted and not self.is_infinite_scroll_page(request.url):
            result.follow_ups.extend(await self._pagination_requests(content))

        return result

    @staticmethod
    def is_infinite_scroll_page(url: str) -> bool:
        """Listing pages under /ai/ and single-segment task pages load by scrolling"""
        return '/ai/' in url or bool(INFINITE_SCROLL_PATH.search(url.lower()))

    def _parse_card(self, card: Dict[str, Any]) -> RawCandidate:
        if not isinstance(card, dict):
            raise ExtractionError(f"Unexpected card payload: {card!r}")

        name = card.get('name') or ''
        description = card.get('description') or ''
        url = card.get('url') or ''
        if not (name and description and url):
            raise ExtractionError(f"Card missing name, description or link: {name!r}")

        tags = infer_tags(description)
        return RawCandidate(
            name=name,
            description=description,
            url=url,
            pricing=card.get('pricing') or None,
            category=card.get('category') or None,
            tags=tags or None
        )

    async def _pagination_requests(self, content: PageContent) -> List[CrawlRequest]:
        hrefs = await content.page.links(PAGINATION_SELECTOR)
        requests = []
        seen = set()
        for href in hrefs:
            url = extract_url(href, content.page_url)
            if url in seen or url == content.page_url:
                continue
            seen.add(url)
            requests.append(CrawlRequest(url=url, label=RouteLabel.THERESANAIFORTHAT))
            if len(requests) >= self.pagination_limit:
                break
        return requests
