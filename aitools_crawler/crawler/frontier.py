import asyncio
import logging
from typing import Optional, Set

from ..deduplication import URLCanonicalizer
from .request import CrawlRequest

logger = logging.getLogger(__name__)


class Frontier:
    """Queue of pending requests; each canonical URL is enqueued at most once"""

    def __init__(self, max_requests: Optional[int] = None):
        self.max_requests = max_requests
        self.canonicalizer = URLCanonicalizer()
        self.queue: asyncio.Queue = asyncio.Queue()
        self.enqueued_urls: Set[str] = set()
        self.total_enqueued = 0
        self._limit_logged = False

    def add(self, request: CrawlRequest) -> bool:
        """Add a request; returns False for duplicates or once the request cap is hit"""
        canonical_url = self.canonicalizer.canonicalize(request.url)
        if canonical_url in self.enqueued_urls:
            logger.debug(f"Skipping duplicate request: {request.url}")
            return False

        if self.max_requests is not None and self.total_enqueued >= self.max_requests:
            if not self._limit_logged:
                logger.warning(f"Request limit ({self.max_requests}) reached, not enqueuing more pages")
                self._limit_logged = True
            return False

        self.enqueued_urls.add(canonical_url)
        self.total_enqueued += 1
        self.queue.put_nowait(request)
        return True

    async def get(self) -> CrawlRequest:
        return await self.queue.get()

    def task_done(self):
        self.queue.task_done()

    async def join(self):
        await self.queue.join()

    @property
    def limit_reached(self) -> bool:
        return self.max_requests is not None and self.total_enqueued >= self.max_requests

    def qsize(self) -> int:
        return self.queue.qsize()
