"""
Record Normalizer - turns extractor output into validated dataset records
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..models import NormalizedTool, RawCandidate
from ..utils.text import clean_text, extract_url, infer_pricing, is_valid_url

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_DESCRIPTION_LENGTH = 10


def normalize(raw: RawCandidate, source: str, source_url: str) -> Optional[NormalizedTool]:
    """
    Validate and canonicalize a raw candidate

    Args:
        raw: Candidate as produced by a site extractor
        source: Name of the originating site
        source_url: Absolute URL of the page the candidate was scraped from

    Returns:
        NormalizedTool, or None when the candidate fails validation
    """
    name = clean_text(raw.name)
    description = clean_text(raw.description)
    category = clean_text(raw.category) or None

    if len(name) < MIN_NAME_LENGTH:
        logger.debug(f"Rejected candidate from {source_url}: name too short ({name!r})")
        return None

    if len(description) < MIN_DESCRIPTION_LENGTH:
        logger.debug(f"Rejected {name!r} from {source_url}: description too short")
        return None

    href = (raw.url or '').strip()
    url = extract_url(href, source_url) if href else ''
    if not is_valid_url(url):
        logger.debug(f"Rejected {name!r} from {source_url}: invalid URL {raw.url!r}")
        return None

    return NormalizedTool(
        name=name,
        description=description,
        url=url,
        pricing=infer_pricing(raw.pricing),
        category=category,
        tags=_clean_tags(raw.tags),
        source=source,
        source_url=source_url,
        scraped_at=datetime.now(timezone.utc).isoformat()
    )


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if not tags:
        return None

    cleaned = []
    for tag in tags:
        tag = clean_text(tag)
        if tag and tag not in cleaned:
            cleaned.append(tag)

    return cleaned or None
