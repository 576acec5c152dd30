"""
Tests for route classification and the extractor registry
"""

import pytest

from aitools_crawler.crawler import RouteLabel, classify_url
from aitools_crawler.errors import ClassificationFailure
from aitools_crawler.extractors import (
    ExtractorRegistry, ProductHuntDetailExtractor, ProductHuntListExtractor,
    TheresAnAIForThatExtractor
)

from conftest import CannedExtractor


@pytest.mark.parametrize("url, label", [
    ("https://theresanaiforthat.com/ai/?ref=featured&v=full", RouteLabel.THERESANAIFORTHAT),
    ("https://THERESANAIFORTHAT.com/task/writing/", RouteLabel.THERESANAIFORTHAT),
    ("https://www.producthunt.com/topics/artificial-intelligence", RouteLabel.PRODUCTHUNT_LIST),
    ("https://www.producthunt.com/posts/copy-wizard", RouteLabel.PRODUCTHUNT_DETAIL),
    ("https://producthunt.com/posts/copy-wizard?ref=topic", RouteLabel.PRODUCTHUNT_DETAIL),
    ("https://example.com/posts/x", RouteLabel.UNROUTED),
    ("https://notproducthunt.com/topics/ai", RouteLabel.UNROUTED),
    ("not a url", RouteLabel.UNROUTED),
])
def test_classify_url(url, label):
    assert classify_url(url) is label


def test_default_registry_covers_every_route():
    registry = ExtractorRegistry.default()

    assert isinstance(registry.get(RouteLabel.THERESANAIFORTHAT), TheresAnAIForThatExtractor)
    assert isinstance(registry.get(RouteLabel.PRODUCTHUNT_LIST), ProductHuntListExtractor)
    assert isinstance(registry.get(RouteLabel.PRODUCTHUNT_DETAIL), ProductHuntDetailExtractor)
    assert RouteLabel.UNROUTED not in registry


def test_unrouted_lookup_raises():
    with pytest.raises(ClassificationFailure) as excinfo:
        ExtractorRegistry.default().get(RouteLabel.UNROUTED, "https://example.com")
    assert excinfo.value.url == "https://example.com"


def test_registry_must_be_total():
    with pytest.raises(ValueError):
        ExtractorRegistry({RouteLabel.THERESANAIFORTHAT: CannedExtractor()})

    complete = {label: CannedExtractor() for label in RouteLabel.routable()}
    with pytest.raises(ValueError):
        ExtractorRegistry({**complete, RouteLabel.UNROUTED: CannedExtractor()})


def test_with_extractor_returns_copy():
    original = ExtractorRegistry.default()
    replacement = CannedExtractor()

    updated = original.with_extractor(RouteLabel.PRODUCTHUNT_LIST, replacement)

    assert updated.get(RouteLabel.PRODUCTHUNT_LIST) is replacement
    assert original.get(RouteLabel.PRODUCTHUNT_LIST) is not replacement
