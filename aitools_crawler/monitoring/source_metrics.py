from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class SourceMetrics:
    """Per-directory metrics"""
    source: str
    pages_fetched: int = 0
    tools_accepted: int = 0
    errors: int = 0
    last_accepted: Optional[datetime] = None
