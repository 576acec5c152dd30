"""
Crawler error taxonomy
"""

from typing import Optional


class CrawlerError(Exception):
    """Base class for all crawler errors"""


class FetchError(CrawlerError):
    """Network, timeout or navigation failure while fetching a page"""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message
        self.status_code = status_code
        self.retry_count = 0

    @property
    def status(self) -> Optional[int]:
        # Same attribute name aiohttp.ClientResponseError uses
        return self.status_code


class ExtractionError(CrawlerError):
    """A single candidate (or a whole page) could not be extracted"""


class ClassificationFailure(CrawlerError):
    """No extractor route could be derived for a URL"""

    def __init__(self, url: str):
        super().__init__(f"Could not determine route for URL: {url}")
        self.url = url
