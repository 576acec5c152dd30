"""
Tests for the aiohttp fetcher against a local server, and browser context cleanup
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils
from playwright.async_api import Error as PlaywrightError

from aitools_crawler.config import CrawlerConfig
from aitools_crawler.errors import FetchError
from aitools_crawler.fetching import BrowserFetcher, HttpFetcher, PageContent, PageFetcher
from aitools_crawler.utils.headers import USER_AGENTS, build_headers


def make_app(seen_headers):
    async def ok(request):
        seen_headers.append(dict(request.headers))
        return web.Response(text="<html><body><h1>Listing</h1></body></html>",
                            content_type='text/html')

    async def moved(request):
        raise web.HTTPFound('/ok')

    async def status(request):
        return web.Response(status=int(request.match_info['code']))

    app = web.Application()
    app.router.add_get('/ok', ok)
    app.router.add_get('/moved', moved)
    app.router.add_get('/status/{code}', status)
    return app


async def fetch_path(fetcher, path, seen_headers=None):
    server = test_utils.TestServer(make_app(seen_headers if seen_headers is not None else []))
    await server.start_server()
    await fetcher.start()
    try:
        return await fetcher.fetch(str(server.make_url(path)))
    finally:
        await fetcher.close()
        await server.close()


def test_fetch_returns_html_and_sends_browser_headers():
    seen_headers = []

    content = asyncio.run(fetch_path(HttpFetcher(navigation_timeout=5), '/ok', seen_headers))

    assert content.status_code == 200
    assert content.soup().h1.get_text() == "Listing"
    assert seen_headers[0]['User-Agent'] in USER_AGENTS
    assert seen_headers[0]['Accept-Language'] == 'en-US,en;q=0.9'


def test_redirect_sets_loaded_url():
    content = asyncio.run(fetch_path(HttpFetcher(navigation_timeout=5), '/moved'))

    assert content.url.endswith('/moved')
    assert content.loaded_url.endswith('/ok')
    assert content.page_url == content.loaded_url


@pytest.mark.parametrize("code, message", [
    (404, "Client error: 404"),
    (429, "Rate limited"),
    (503, "Server error: 503"),
])
def test_error_statuses_raise_fetch_error(code, message):
    with pytest.raises(FetchError) as excinfo:
        asyncio.run(fetch_path(HttpFetcher(navigation_timeout=5), f'/status/{code}'))

    assert excinfo.value.status == code
    assert excinfo.value.message == message


def test_fetch_requires_start():
    with pytest.raises(RuntimeError):
        asyncio.run(HttpFetcher().fetch("https://example.com"))


def test_page_fetcher_uses_http_for_static_routes():
    fetcher = PageFetcher(CrawlerConfig())

    content = asyncio.run(fetch_path(fetcher, '/ok'))

    assert content.html.startswith("<html>")
    assert content.page is None
    assert fetcher.browser.browser is None


def test_close_without_page_is_noop():
    content = PageContent(url="https://example.com", html="<p>x</p>")
    asyncio.run(content.close())
    assert content.page is None


def test_build_headers_rotates_known_agents():
    headers = build_headers()

    assert headers['User-Agent'] in USER_AGENTS
    assert headers['Accept-Encoding'] == 'gzip, deflate, br'
    assert build_headers('custom/1.0')['User-Agent'] == 'custom/1.0'


class FailingContext:
    def __init__(self, error):
        self.error = error
        self.closed = False

    async def new_page(self):
        raise self.error

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, context):
        self.context = context

    async def new_context(self, **options):
        return self.context


def test_browser_context_closed_when_page_cannot_open():
    context = FailingContext(PlaywrightError("Target closed"))
    fetcher = BrowserFetcher()
    fetcher.browser = FakeBrowser(context)

    with pytest.raises(FetchError):
        asyncio.run(fetcher.fetch("https://theresanaiforthat.com/ai/"))

    assert context.closed


def test_browser_context_closed_when_page_open_is_cancelled():
    context = FailingContext(asyncio.CancelledError())
    fetcher = BrowserFetcher()
    fetcher.browser = FakeBrowser(context)

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(fetcher.fetch("https://theresanaiforthat.com/ai/"))

    assert context.closed
