from dataclasses import dataclass
from typing import List, Optional


@dataclass
class RawCandidate:
    """Unvalidated tool record produced by a site extractor"""
    name: str
    description: str
    url: str
    pricing: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
