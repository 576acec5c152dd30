import logging
from typing import Any, List

from playwright.async_api import Error as PlaywrightError

logger = logging.getLogger(__name__)


class RenderedPage:
    """
    Narrow handle over a live Playwright page

    Extractors only scroll, count, wait and run one batched evaluation through
    this handle; they never pass per-item callbacks into the browser.
    """

    def __init__(self, page, context=None):
        self._page = page
        self._context = context

    @property
    def url(self) -> str:
        return self._page.url

    async def wait_for_selector(self, selector: str, timeout: float) -> bool:
        """Wait for selector to appear; False on timeout"""
        try:
            await self._page.wait_for_selector(selector, timeout=timeout * 1000)
            return True
        except PlaywrightError as e:
            logger.debug(f"Selector {selector} not found on {self.url}: {e}")
            return False

    async def scroll_to_bottom(self):
        await self._page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")

    async def count(self, selector: str) -> int:
        return await self._page.locator(selector).count()

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run one script in the page and return its (JSON-serializable) result"""
        if arg is None:
            return await self._page.evaluate(script)
        return await self._page.evaluate(script, arg)

    async def links(self, selector: str) -> List[str]:
        """href attributes of all elements matching selector"""
        return await self._page.eval_on_selector_all(
            selector,
            "elements => elements.map(el => el.getAttribute('href')).filter(Boolean)"
        )

    async def close(self):
        try:
            await self._page.close()
            if self._context is not None:
                await self._context.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing page: {e}")
