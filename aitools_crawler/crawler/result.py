"""
Crawl Result - data structures returned by extractors and by a finished crawl
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..models import RawCandidate
from .request import CrawlRequest


@dataclass
class ExtractionResult:
    """What a site extractor found on one page"""
    candidates: List[RawCandidate] = field(default_factory=list)
    follow_ups: List[CrawlRequest] = field(default_factory=list)
    source: Optional[str] = None


@dataclass
class CrawlSummary:
    """Outcome of a crawl run"""
    accepted_count: int
    max_items: int
    requests_handled: int = 0
    requests_failed: int = 0
    requests_dropped: int = 0
    write_failures: int = 0
    stop_reason: str = "frontier_exhausted"
    elapsed_seconds: float = 0.0

    @property
    def budget_exhausted(self) -> bool:
        return self.stop_reason == "budget_exhausted"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
