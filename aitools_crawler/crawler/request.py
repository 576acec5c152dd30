from dataclasses import dataclass
from typing import Optional

from .routing import RouteLabel


@dataclass
class CrawlRequest:
    """A frontier entry: URL plus the route that will handle it"""
    url: str
    label: Optional[RouteLabel] = None
    retry_count: int = 0
    loaded_url: Optional[str] = None

    @property
    def page_url(self) -> str:
        """URL after redirects when known, otherwise the requested URL"""
        return self.loaded_url or self.url
