"""
Route classification - maps a URL to the extractor that understands it
"""

from enum import Enum
from typing import List
from urllib.parse import urlparse


class RouteLabel(Enum):
    """Extractor routes; UNROUTED marks URLs no extractor understands"""
    THERESANAIFORTHAT = "THERESANAIFORTHAT"
    PRODUCTHUNT_LIST = "PRODUCTHUNT_LIST"
    PRODUCTHUNT_DETAIL = "PRODUCTHUNT_DETAIL"
    UNROUTED = "UNROUTED"

    @classmethod
    def routable(cls) -> List['RouteLabel']:
        return [label for label in cls if label is not cls.UNROUTED]


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith('.' + domain)


def classify_url(url: str) -> RouteLabel:
    """Derive a route label from the URL's domain and path"""
    try:
        parsed = urlparse(url.strip().lower())
        host = parsed.hostname or ''
    except (AttributeError, ValueError):
        return RouteLabel.UNROUTED

    if _host_matches(host, 'theresanaiforthat.com'):
        return RouteLabel.THERESANAIFORTHAT

    if _host_matches(host, 'producthunt.com'):
        if '/posts/' in parsed.path:
            return RouteLabel.PRODUCTHUNT_DETAIL
        return RouteLabel.PRODUCTHUNT_LIST

    return RouteLabel.UNROUTED
