"""
Utility modules for crawling and record cleanup
"""

from .error_handler import ErrorHandler, ErrorInfo, ErrorType, RetryConfig
from .headers import build_headers, random_user_agent
from .text import clean_text, extract_url, infer_pricing, infer_tags, is_valid_url

__all__ = [
    'ErrorHandler',
    'ErrorInfo',
    'ErrorType',
    'RetryConfig',
    'build_headers',
    'random_user_agent',
    'clean_text',
    'extract_url',
    'infer_pricing',
    'infer_tags',
    'is_valid_url'
]
