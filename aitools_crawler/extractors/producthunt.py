"""
ProductHunt Extractors - topic listings fan out to product detail pages
"""

import re
import logging
from typing import List, Optional

from ..crawler.request import CrawlRequest
from ..crawler.result import ExtractionResult
from ..crawler.routing import RouteLabel
from ..crawler.state import CrawlState
from ..fetching import PageContent
from ..models import RawCandidate
from ..utils.text import clean_text, extract_url, infer_tags
from .base import SiteExtractor

logger = logging.getLogger(__name__)

SOURCE_NAME = "ProductHunt"
DETAIL_PATH = re.compile(r'/posts/[\w-]+$')
PAGINATION_SELECTOR = 'a[href*="page"], .pagination a, a[rel="next"]'


class ProductHuntListExtractor(SiteExtractor):
    """Listing pages hold no records themselves, only links to detail pages"""

    source_name = SOURCE_NAME

    def __init__(self, pagination_limit: int = 3):
        self.pagination_limit = pagination_limit

    async def extract(self, content: PageContent, request: CrawlRequest,
                      state: CrawlState) -> ExtractionResult:
        logger.info(f"Processing ProductHunt listing page: {request.url}")
        result = ExtractionResult(source=self.source_name)

        detail_links = self._detail_links(content)
        logger.info(f"Found {len(detail_links)} product detail links")

        for link in detail_links[:state.remaining]:
            result.follow_ups.append(CrawlRequest(url=link, label=RouteLabel.PRODUCTHUNT_DETAIL))

        if not state.exhausted:
            result.follow_ups.extend(self.select_links(
                content, PAGINATION_SELECTOR, RouteLabel.PRODUCTHUNT_LIST, self.pagination_limit
            ))

        return result

    def _detail_links(self, content: PageContent) -> List[str]:
        soup = content.soup()
        links = []

        for element in soup.select('a[href*="/posts/"]'):
            href = element.get('href') or ''
            if DETAIL_PATH.search(href):
                self._add_link(links, extract_url(href, content.page_url))

        for element in soup.select('#content ul li a, [id*="content"] ul li a'):
            href = element.get('href') or ''
            if '/posts/' in href:
                self._add_link(links, extract_url(href, content.page_url))

        return links

    @staticmethod
    def _add_link(links: List[str], url: str):
        if url not in links:
            links.append(url)


class ProductHuntDetailExtractor(SiteExtractor):
    """One product per page; the record points at the product's own website"""

    source_name = SOURCE_NAME
    category = "Artificial Intelligence"

    async def extract(self, content: PageContent, request: CrawlRequest,
                      state: CrawlState) -> ExtractionResult:
        logger.info(f"Processing ProductHunt detail page: {request.url}")
        result = ExtractionResult(source=self.source_name)
        soup = content.soup()

        name = clean_text(
            self._first_text(soup, 'h1') or
            self._first_text(soup, '[class*="product-name"], [class*="title"]')
        )
        description = clean_text(
            self._first_text(soup, '[class*="tagline"]') or
            self._meta(soup, 'meta[name="description"]') or
            self._meta(soup, 'meta[property="og:description"]') or
            self._first_text(soup, 'p')
        )
        url = self._product_url(soup)

        if not name or not description or not url or 'producthunt.com' in url.lower():
            logger.warning(f"Incomplete data for {name or 'unknown'}, skipping")
            return result

        body = soup.body
        full_text = body.get_text(' ') if body else soup.get_text(' ')

        tags = []
        for element in soup.select('[class*="topic"], [class*="tag"], [class*="badge"]'):
            if 'tagline' in ' '.join(element.get('class') or []):
                continue
            tag_text = clean_text(element.get_text(' '))
            if 2 < len(tag_text) < 50 and tag_text not in tags:
                tags.append(tag_text)
        if not tags:
            tags = infer_tags(full_text)

        result.candidates.append(RawCandidate(
            name=name,
            description=description,
            url=url,
            pricing=full_text,
            category=self.category,
            tags=tags or None
        ))
        return result

    @staticmethod
    def _first_text(soup, selector: str) -> str:
        element = soup.select_one(selector)
        return element.get_text(' ') if element else ''

    @staticmethod
    def _meta(soup, selector: str) -> str:
        element = soup.select_one(selector)
        return (element.get('content') or '') if element else ''

    def _product_url(self, soup) -> Optional[str]:
        link = soup.select_one('a[href*="http"]:not([href*="producthunt.com"])')
        if link is not None:
            url = clean_text(link.get('href') or '')
            if url:
                return url
        return self._meta(soup, 'meta[property="og:url"]') or None
