"""
AI Tools Directory Crawler - bounded, deduplicated crawling of AI tool directories
"""

from .crawler import CrawlController, CrawlerBuilder, CrawlSummary
from .models import RawCandidate, NormalizedTool

__version__ = "1.0.0"

__all__ = [
    'CrawlController',
    'CrawlerBuilder',
    'CrawlSummary',
    'RawCandidate',
    'NormalizedTool'
]
