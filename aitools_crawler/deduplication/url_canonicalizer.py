import logging
from urllib.parse import urlsplit, parse_qsl, urlencode, urlunsplit

logger = logging.getLogger(__name__)

# Query parameters that never change which listing or detail page is served
TRACKING_PARAMS = frozenset({
    'utm_source', 'utm_medium', 'utm_campaign', 'utm_term', 'utm_content',
    'fbclid', 'gclid', 'msclkid', 'ref', 'referrer', '_ga', '_gid'
})


class URLCanonicalizer:
    """
    Request URL keys for the frontier

    Scheme and host are lowercased, a leading "www." and trailing slash are
    dropped, tracking parameters are removed, the remaining query is sorted
    and the fragment discarded. Path and query values keep their case, since
    directory slugs are case sensitive.
    """

    def __init__(self, tracking_params=TRACKING_PARAMS):
        self.tracking_params = frozenset(p.lower() for p in tracking_params)

    def canonicalize(self, url: str) -> str:
        raw = url.strip()
        try:
            parts = urlsplit(raw if '://' in raw else f"https://{raw}")
            host = parts.netloc.lower()
            if host.startswith('www.'):
                host = host[len('www.'):]

            query = sorted(
                (key, value) for key, value in parse_qsl(parts.query)
                if key.lower() not in self.tracking_params
            )
            return urlunsplit((parts.scheme.lower(), host, parts.path.rstrip('/') or '/', urlencode(query), ''))

        except ValueError as e:
            logger.warning(f"Failed to canonicalize URL {url}: {e}")
            return raw

