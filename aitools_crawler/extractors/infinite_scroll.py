"""
Infinite Scroll - drives a rendered listing page until no more items load
"""

import asyncio
import math
import logging
from enum import Enum
from typing import Callable, Optional

from ..fetching import RenderedPage

logger = logging.getLogger(__name__)


class ScrollState(Enum):
    SCROLLING = "scrolling"
    STALLED = "stalled"
    DONE = "done"


class DoneReason(Enum):
    END_OF_CONTENT = "end_of_content"   # item count stopped growing
    TARGET_REACHED = "target_reached"   # enough items loaded for the budget
    ATTEMPT_CAP = "attempt_cap"         # hard cap on scroll attempts
    BUDGET_EXHAUSTED = "budget_exhausted"
    TIME_LIMIT = "time_limit"           # scrolling would outlast the request timeout


class ScrollTracker:
    """
    Termination logic for infinite scroll, independent of any browser

    Feed it the loaded item count after every scroll; it reports SCROLLING
    while the page grows, STALLED while it does not, and DONE once the page
    stalled `stall_limit` times in a row, the target count is loaded, or
    `max_attempts` scrolls were made.
    """

    def __init__(self, target_count: int, items_per_batch: int = 50, stall_limit: int = 3):
        self.target_count = target_count
        self.stall_limit = stall_limit
        self.max_attempts = max(1, math.ceil(target_count / items_per_batch))
        self.previous_count = 0
        self.stall_count = 0
        self.attempts = 0
        self.state = ScrollState.SCROLLING
        self.done_reason: Optional[DoneReason] = None

    @property
    def done(self) -> bool:
        return self.state is ScrollState.DONE

    def observe(self, current_count: int) -> ScrollState:
        """Record the item count measured after one scroll attempt"""
        if self.done:
            return self.state

        self.attempts += 1

        if current_count <= self.previous_count:
            self.stall_count += 1
            self.state = ScrollState.STALLED
            logger.info(f"No new tools loaded ({self.stall_count}/{self.stall_limit}). Current: {current_count}")
        else:
            self.stall_count = 0
            self.state = ScrollState.SCROLLING
            logger.info(f"Tools loaded: {current_count} (scroll {self.attempts})")

        self.previous_count = max(self.previous_count, current_count)

        if self.stall_count >= self.stall_limit:
            self._finish(DoneReason.END_OF_CONTENT)
        elif current_count >= self.target_count:
            self._finish(DoneReason.TARGET_REACHED)
        elif self.attempts >= self.max_attempts:
            self._finish(DoneReason.ATTEMPT_CAP)

        return self.state

    def stop(self, reason: DoneReason):
        """Force DONE from outside, e.g. when the crawl budget ran out"""
        if not self.done:
            self._finish(reason)

    def _finish(self, reason: DoneReason):
        self.state = ScrollState.DONE
        self.done_reason = reason
        if reason is DoneReason.ATTEMPT_CAP:
            logger.info(f"Scroll attempt cap ({self.max_attempts}) reached before the page stopped growing")
        elif reason is DoneReason.END_OF_CONTENT:
            logger.info("Reached end of infinite scroll")
        elif reason is DoneReason.TARGET_REACHED:
            logger.info(f"Loaded enough tools: {self.previous_count}")
        elif reason is DoneReason.TIME_LIMIT:
            logger.warning(f"Scroll time limit reached after {self.attempts} attempts, extracting what loaded")


async def scroll_until_done(page: RenderedPage, tracker: ScrollTracker, item_selector: str,
                            settle_interval: float = 1.5,
                            should_stop: Optional[Callable[[], bool]] = None,
                            deadline: Optional[float] = None) -> int:
    """
    Scroll page to the bottom until tracker reaches DONE

    deadline is an event loop time; scrolling ends there even if the page
    is still growing, so the caller has time left to read what loaded.

    Returns:
        Number of item elements loaded when scrolling ended
    """
    logger.info("Starting infinite scroll...")
    loop = asyncio.get_running_loop()

    while not tracker.done:
        if should_stop is not None and should_stop():
            tracker.stop(DoneReason.BUDGET_EXHAUSTED)
            break

        settle = settle_interval
        if deadline is not None:
            time_left = deadline - loop.time()
            if time_left <= 0:
                tracker.stop(DoneReason.TIME_LIMIT)
                break
            settle = min(settle, time_left)

        await page.scroll_to_bottom()
        await asyncio.sleep(settle)
        tracker.observe(await page.count(item_selector))

    logger.info(f"Finished scrolling after {tracker.attempts} attempts. "
                f"Total items found: {tracker.previous_count}")
    return tracker.previous_count
