"""
Tests for the input document and crawler configuration
"""

import json
import logging

import pytest

from aitools_crawler.config import (
    DEFAULT_START_URLS, CrawlerConfig, ProxyConfiguration, ScraperInput, load_scraper_input
)


def test_input_defaults():
    scraper_input = ScraperInput.from_dict({})

    assert scraper_input.start_urls == DEFAULT_START_URLS
    assert scraper_input.max_items == 100
    assert scraper_input.proxy_configuration is None


def test_input_accepts_strings_and_url_objects():
    scraper_input = ScraperInput.from_dict({
        'startUrls': ['https://theresanaiforthat.com/ai/', {'url': ' https://www.producthunt.com/topics/ai '}, {}, ''],
        'maxItems': 25,
        'proxyConfiguration': {'useApifyProxy': True, 'apifyProxyGroups': ['RESIDENTIAL']},
    })

    assert scraper_input.start_urls == [
        'https://theresanaiforthat.com/ai/',
        'https://www.producthunt.com/topics/ai',
    ]
    assert scraper_input.max_items == 25
    assert scraper_input.proxy_configuration.use_apify_proxy
    assert scraper_input.proxy_configuration.apify_proxy_groups == ['RESIDENTIAL']


@pytest.mark.parametrize("max_items", [0, -3, "10", True, 2.5])
def test_invalid_max_items(max_items):
    with pytest.raises(ValueError):
        ScraperInput.from_dict({'maxItems': max_items})


def test_proxy_urls_rotate():
    proxy = ProxyConfiguration.from_dict({'proxyUrls': ['http://p1:8000', 'http://p2:8000']})

    assert [proxy.new_url() for _ in range(3)] == ['http://p1:8000', 'http://p2:8000', 'http://p1:8000']
    assert ProxyConfiguration().new_url() is None


def test_apify_proxy_without_urls_warns(caplog):
    with caplog.at_level(logging.WARNING, logger='aitools_crawler.config'):
        proxy = ProxyConfiguration.from_dict({'useApifyProxy': True, 'apifyProxyGroups': ['RESIDENTIAL']})

    assert proxy.new_url() is None
    assert 'RESIDENTIAL' in caplog.text
    assert 'no proxyUrls' in caplog.text


def test_apify_proxy_with_urls_is_quiet(caplog):
    with caplog.at_level(logging.WARNING, logger='aitools_crawler.config'):
        ProxyConfiguration.from_dict({'useApifyProxy': True, 'proxyUrls': ['http://p1:8000']})

    assert caplog.text == ''


def test_load_scraper_input(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps({'startUrls': [{'url': 'https://theresanaiforthat.com/ai/'}], 'maxItems': 3}))

    scraper_input = load_scraper_input(str(path))

    assert scraper_input.start_urls == ['https://theresanaiforthat.com/ai/']
    assert scraper_input.max_items == 3
    assert load_scraper_input(str(tmp_path / "missing.json")).max_items == 100
    assert load_scraper_input(None).start_urls == DEFAULT_START_URLS


@pytest.mark.parametrize("overrides", [
    {'max_concurrency': 0},
    {'browser_concurrency': 0},
    {'max_retries': -1},
    {'politeness_delay': (2.0, 1.0)},
    {'politeness_delay': (-1.0, 1.0)},
    {'scroll_time_share': 1.0},
])
def test_invalid_crawler_config(overrides):
    with pytest.raises(ValueError):
        CrawlerConfig(**overrides)


def test_crawler_config_defaults():
    config = CrawlerConfig()

    assert config.max_concurrency == 5
    assert config.browser_concurrency == 2
    assert config.max_retries == 3
    assert config.politeness_delay == (0.5, 1.5)
    assert (config.request_timeout, config.browser_request_timeout) == (60.0, 180.0)
    assert config.scroll_time_limit == 135.0
