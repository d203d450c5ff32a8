"""Tests for page fetching, URL helpers and policy discovery."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from policycheck.utils.fetch_page import fetch_page_content, html_to_text
from policycheck.utils.policy_discovery import discover_policies
from policycheck.utils.url_utils import base_url, get_domain, normalize_url

LONG_POLICY = "<p>" + "Returns are accepted within 30 days of delivery for unused items. " * 3 + "</p>"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_html_to_text_strips_markup_and_chrome():
    html = (
        "<html><head><style>p{}</style><script>alert(1)</script></head>"
        "<body><header>Logo</header><nav>Menu</nav><p>No   returns.</p><footer>(c) Shop</footer></body></html>"
    )
    assert html_to_text(html) == "No returns."


def test_fetch_page_content_with_client():
    async def go():
        async with _client(lambda request: httpx.Response(200, text="<p>Hello policy</p>")) as client:
            return await fetch_page_content("https://shop.example.com/returns", client=client)

    assert asyncio.run(go()) == "Hello policy"


def test_fetch_page_content_raises_on_http_error():
    async def go():
        async with _client(lambda request: httpx.Response(500)) as client:
            return await fetch_page_content("https://shop.example.com/returns", client=client)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(go())


@pytest.mark.parametrize(
    "url, domain",
    [
        ("https://example.com/path", "example.com"),
        ("https://shop.example.com/returns", "example.com"),
        ("https://sub.example.co.uk:443/", "example.co.uk"),
        ("shop.example.com", "example.com"),
    ],
)
def test_get_domain(url, domain):
    assert get_domain(url) == domain


def test_url_helpers():
    assert normalize_url("  shop.example.com ") == "https://shop.example.com"
    assert normalize_url("http://shop.example.com") == "http://shop.example.com"
    assert base_url("https://shop.example.com/a/b?c=1") == "https://shop.example.com"


def test_discovery_skips_short_pages_and_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/policies/refund-policy":
            return httpx.Response(200, text="<p>Coming soon</p>")
        if request.url.path == "/pages/return-policy":
            return httpx.Response(200, text=LONG_POLICY)
        if request.url.path == "/policies/shipping-policy":
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(404)

    async def go():
        async with _client(handler) as client:
            return await discover_policies("https://shop.example.com/collections/all", client=client)

    found = asyncio.run(go())
    assert found.attempted == ("returns", "shipping", "terms", "privacy")
    assert found.obtained == ("returns",)
    assert found.sources == {"returns": "https://shop.example.com/pages/return-policy"}
    assert found.texts["returns"].startswith("Returns are accepted within 30 days")
