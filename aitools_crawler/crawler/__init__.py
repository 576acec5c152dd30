"""
Crawl core - frontier, routing, budget state and the controller driving them
"""

from .request import CrawlRequest
from .result import CrawlSummary, ExtractionResult
from .routing import RouteLabel, classify_url
from .state import CrawlState
from .frontier import Frontier
from .controller import CrawlController
from .builder import CrawlerBuilder

__all__ = [
    'CrawlRequest',
    'CrawlSummary',
    'ExtractionResult',
    'RouteLabel',
    'classify_url',
    'CrawlState',
    'Frontier',
    'CrawlController',
    'CrawlerBuilder'
]
