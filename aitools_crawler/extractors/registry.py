import logging
from typing import Dict, Optional

from ..config import CrawlerConfig
from ..crawler.routing import RouteLabel
from ..errors import ClassificationFailure
from .base import SiteExtractor
from .producthunt import ProductHuntDetailExtractor, ProductHuntListExtractor
from .theresanaiforthat import TheresAnAIForThatExtractor

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """Total mapping from every routable label to its extractor"""

    def __init__(self, extractors: Dict[RouteLabel, SiteExtractor]):
        if RouteLabel.UNROUTED in extractors:
            raise ValueError("UNROUTED cannot have an extractor")

        missing = [label.value for label in RouteLabel.routable() if label not in extractors]
        if missing:
            raise ValueError(f"No extractor registered for: {', '.join(missing)}")

        self._extractors = dict(extractors)

    @classmethod
    def default(cls, config: Optional[CrawlerConfig] = None) -> 'ExtractorRegistry':
        config = config or CrawlerConfig()
        return cls({
            RouteLabel.THERESANAIFORTHAT: TheresAnAIForThatExtractor(
                settle_interval=config.scroll_settle_interval,
                stall_limit=config.scroll_stall_limit,
                items_per_batch=config.items_per_scroll_batch,
                scroll_time_limit=config.scroll_time_limit
            ),
            RouteLabel.PRODUCTHUNT_LIST: ProductHuntListExtractor(),
            RouteLabel.PRODUCTHUNT_DETAIL: ProductHuntDetailExtractor(),
        })

    def with_extractor(self, label: RouteLabel, extractor: SiteExtractor) -> 'ExtractorRegistry':
        """Copy of this registry with one route's extractor replaced"""
        extractors = dict(self._extractors)
        extractors[label] = extractor
        return ExtractorRegistry(extractors)

    def get(self, label: RouteLabel, url: str = "") -> SiteExtractor:
        if label is RouteLabel.UNROUTED:
            raise ClassificationFailure(url)
        return self._extractors[label]

    def __contains__(self, label: RouteLabel) -> bool:
        return label in self._extractors
