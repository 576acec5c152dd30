import asyncio
import logging
from typing import Set

from ..deduplication import dedup_key, is_duplicate
from ..models import NormalizedTool

logger = logging.getLogger(__name__)


class CrawlState:
    """
    Budget and seen-set shared by every worker of one crawl run

    All mutation goes through try_accept, which performs the duplicate check,
    the budget check and the increment under one lock, and release, which
    hands a slot back when the accepted record could not be stored.
    """

    def __init__(self, max_items: int):
        if max_items < 1:
            raise ValueError(f"max_items must be positive, got {max_items}")
        self.max_items = max_items
        self._accepted_count = 0
        self._seen: Set[str] = set()
        self._lock = asyncio.Lock()
        self.exhausted_event = asyncio.Event()

    @property
    def accepted_count(self) -> int:
        return self._accepted_count

    @property
    def remaining(self) -> int:
        return max(self.max_items - self._accepted_count, 0)

    @property
    def exhausted(self) -> bool:
        return self._accepted_count >= self.max_items

    async def try_accept(self, tool: NormalizedTool) -> bool:
        """Accept the tool unless it is a duplicate or the budget is spent"""
        async with self._lock:
            if self._accepted_count >= self.max_items:
                return False
            if is_duplicate(tool, self._seen):
                return False

            self._seen.add(dedup_key(tool))
            self._accepted_count += 1

            if self._accepted_count >= self.max_items:
                logger.info(f"Max items reached ({self.max_items}), stopping crawler")
                self.exhausted_event.set()

            return True

    def release(self, tool: NormalizedTool):
        """
        Undo the acceptance of a tool whose record never reached the dataset

        Runs without awaiting, so it cannot interleave with try_accept. The
        exhausted event stays set once fired; a crawl that already stopped
        for budget is not resumed.
        """
        key = dedup_key(tool)
        if key not in self._seen:
            return
        self._seen.discard(key)
        self._accepted_count -= 1
        logger.info(f"Released budget slot of {tool.name} ({self._accepted_count}/{self.max_items})")
