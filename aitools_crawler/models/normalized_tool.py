from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class NormalizedTool:
    """Validated, canonical tool record ready for the dataset"""
    name: str
    description: str
    url: str
    source: str
    source_url: str
    scraped_at: str
    pricing: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Dataset representation; unset optional fields are omitted"""
        record = {
            'name': self.name,
            'description': self.description,
            'url': self.url,
            'pricing': self.pricing,
            'category': self.category,
            'tags': list(self.tags) if self.tags else None,
            'source': self.source,
            'sourceUrl': self.source_url,
            'scrapedAt': self.scraped_at
        }
        return {key: value for key, value in record.items() if value is not None}
