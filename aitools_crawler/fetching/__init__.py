"""
Fetch collaborators - aiohttp for plain HTML, Playwright for rendered pages
"""

from .page_content import PageContent
from .rendered_page import RenderedPage
from .http_fetcher import HttpFetcher
from .browser_fetcher import BrowserFetcher
from .page_fetcher import PageFetcher

__all__ = [
    'PageContent',
    'RenderedPage',
    'HttpFetcher',
    'BrowserFetcher',
    'PageFetcher'
]
