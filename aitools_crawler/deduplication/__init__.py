"""
Record normalization plus record- and URL-level deduplication
"""

from .normalizer import normalize
from .tool_key import KEY_SEPARATOR, dedup_key, is_duplicate
from .url_canonicalizer import URLCanonicalizer

__all__ = [
    'normalize',
    'KEY_SEPARATOR',
    'dedup_key',
    'is_duplicate',
    'URLCanonicalizer'
]
