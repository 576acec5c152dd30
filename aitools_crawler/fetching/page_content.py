from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup

from .rendered_page import RenderedPage


@dataclass
class PageContent:
    """Fetched page: static HTML, or a live rendered page for browser routes"""
    url: str
    loaded_url: Optional[str] = None
    html: Optional[str] = None
    page: Optional[RenderedPage] = None
    status_code: Optional[int] = None
    response_time: float = 0.0

    def __post_init__(self):
        self._soup = None

    @property
    def page_url(self) -> str:
        return self.loaded_url or self.url

    def soup(self) -> BeautifulSoup:
        """Parsed HTML, built on first use"""
        if self._soup is None:
            self._soup = BeautifulSoup(self.html or '', 'html.parser')
        return self._soup

    async def close(self):
        """Release the rendered page, if any"""
        if self.page is not None:
            await self.page.close()
            self.page = None
