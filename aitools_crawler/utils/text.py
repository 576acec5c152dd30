"""
Text helpers shared by extractors and the record normalizer
"""

import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from ..models import PricingTier

CURRENCY_SYMBOLS = ('$', '€', '£')
CURRENCY_AMOUNT = re.compile(r'[$€£]\s*\d+')
WHITESPACE = re.compile(r'\s+')

# Order defines the output order of infer_tags
TAG_VOCABULARY = [
    'machine learning',
    'nlp',
    'natural language processing',
    'computer vision',
    'image generation',
    'text generation',
    'chatbot',
    'automation',
    'productivity',
    'writing',
    'coding',
    'design',
    'marketing',
    'seo',
    'sales',
    'data analysis',
    'video',
    'audio',
    'translation',
    'summarization',
]


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace (newlines and tabs included) into single spaces and trim"""
    if not text:
        return ''
    return WHITESPACE.sub(' ', text).strip()


def infer_pricing(text: Optional[str]) -> Optional[str]:
    """
    Infer a pricing tier from free text

    Precedence: free (but not freemium), freemium, open source, currency amount
    (or Paid when no amount follows the symbol), subscription/premium, contact.

    Returns:
        A PricingTier value, a literal amount such as "$29", or None
    """
    if not text:
        return None

    lowered = text.lower().strip()

    if 'free' in lowered and 'freemium' not in lowered:
        return PricingTier.FREE.value
    if 'freemium' in lowered:
        return PricingTier.FREEMIUM.value
    if 'open source' in lowered or 'opensource' in lowered:
        return PricingTier.OPEN_SOURCE.value
    if any(symbol in lowered for symbol in CURRENCY_SYMBOLS):
        match = CURRENCY_AMOUNT.search(text)
        if match:
            return match.group(0)
        return PricingTier.PAID.value
    if 'subscription' in lowered or 'premium' in lowered:
        return PricingTier.PAID.value
    if 'contact' in lowered:
        return PricingTier.CONTACT.value

    return None


def title_case(phrase: str) -> str:
    return ' '.join(word[:1].upper() + word[1:] for word in phrase.split(' '))


def infer_tags(text: Optional[str]) -> List[str]:
    """Return title-cased vocabulary phrases found in the text, deduplicated"""
    if not text:
        return []

    lowered = text.lower()
    tags = []
    for phrase in TAG_VOCABULARY:
        if phrase in lowered:
            tag = title_case(phrase)
            if tag not in tags:
                tags.append(tag)
    return tags


def extract_url(href: Optional[str], base_url: str) -> str:
    """
    Resolve an href found on a page against the page URL

    Args:
        href: Raw href (absolute, protocol-relative, root-relative or relative)
        base_url: Absolute URL of the page the href was found on

    Returns:
        Absolute URL; the base URL itself when href is empty
    """
    href = (href or '').strip()
    if not href:
        return base_url

    if href.startswith(('http://', 'https://')):
        return href

    if href.startswith('//'):
        return f"https:{href}"

    if href.startswith('/'):
        base = urlparse(base_url)
        return f"{base.scheme}://{base.netloc}{href}"

    return urljoin(base_url, href)


def is_valid_url(url: Optional[str]) -> bool:
    """Basic syntax check: absolute http(s) URL with a host and no whitespace"""
    if not url or any(ch.isspace() for ch in url):
        return False

    try:
        parsed = urlparse(url)
        # Accessing port validates it
        parsed.port
    except ValueError:
        return False

    return parsed.scheme in ('http', 'https') and bool(parsed.hostname)
