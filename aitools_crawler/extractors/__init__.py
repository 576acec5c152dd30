"""
Site Extractors - pluggable per-site extraction rules
"""

from .base import SiteExtractor
from .infinite_scroll import DoneReason, ScrollState, ScrollTracker, scroll_until_done
from .producthunt import ProductHuntDetailExtractor, ProductHuntListExtractor
from .theresanaiforthat import TheresAnAIForThatExtractor
from .registry import ExtractorRegistry

__all__ = [
    'SiteExtractor',
    'DoneReason',
    'ScrollState',
    'ScrollTracker',
    'scroll_until_done',
    'ProductHuntDetailExtractor',
    'ProductHuntListExtractor',
    'TheresAnAIForThatExtractor',
    'ExtractorRegistry'
]
