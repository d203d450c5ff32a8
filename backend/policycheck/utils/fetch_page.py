"""Utility to download a page by URL and extract its text content."""

import logging
import re

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; PolicyCheck/1.0; +https://policycheck.tools)"


def html_to_text(html: str) -> str:
    """
    Extract plain text from HTML: strip tags and normalize whitespace.
    Removes script, style, navigation chrome and other non-policy elements.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(["script", "style", "noscript", "iframe", "svg", "nav", "header", "footer"]):
        tag.decompose()

    text = soup.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


async def fetch_page_content(
    url: str,
    *,
    timeout: float = 10.0,
    use_browser: bool = False,
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    Download the page at the given URL and return its text (no HTML tags).

    With use_browser, a headless Chromium renders the page so JavaScript-built policy
    pages are included. Otherwise a plain HTTP GET is used; pass *client* to reuse one.

    Raises httpx.HTTPError on HTTP errors when use_browser is False.
    Raises playwright-specific errors when use_browser is True.
    """
    if use_browser:
        raw = await _fetch_with_browser(url, timeout)
    else:
        raw = await _fetch_with_httpx(url, timeout, client)

    text = html_to_text(raw)
    logger.debug("Fetched %d chars of text from %s", len(text), url)
    return text


async def _fetch_with_httpx(url: str, timeout: float, client: httpx.AsyncClient | None) -> str:
    if client is not None:
        response = await client.get(url, timeout=timeout)
        response.raise_for_status()
        return response.text
    async with httpx.AsyncClient(
        follow_redirects=True, timeout=timeout, headers={"User-Agent": USER_AGENT}
    ) as own_client:
        response = await own_client.get(url)
        response.raise_for_status()
        return response.text


async def _fetch_with_browser(url: str, timeout: float) -> str:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            page = await browser.new_page(user_agent=USER_AGENT)
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout * 1000)
            try:
                await page.wait_for_load_state("networkidle", timeout=timeout * 1000)
            except Exception:
                logger.debug("networkidle timed out for %s, proceeding with current content", url)
            return await page.content()
        finally:
            await browser.close()
