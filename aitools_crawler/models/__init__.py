"""
Record types flowing from extractors to the dataset
"""

from .pricing_tier import PricingTier
from .raw_candidate import RawCandidate
from .normalized_tool import NormalizedTool

__all__ = [
    'PricingTier',
    'RawCandidate',
    'NormalizedTool'
]
