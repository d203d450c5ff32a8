"""Find a seller's policy pages by probing well-known storefront paths, concurrently per category."""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from policycheck.utils.fetch_page import USER_AGENT, fetch_page_content
from policycheck.utils.url_utils import base_url

logger = logging.getLogger(__name__)

# Category -> candidate paths, most common storefront layout first.
POLICY_PATHS: dict[str, tuple[str, ...]] = {
    "returns": ("/policies/refund-policy", "/pages/return-policy", "/returns", "/pages/returns-and-exchanges"),
    "shipping": ("/policies/shipping-policy", "/pages/shipping", "/shipping"),
    "terms": ("/policies/terms-of-service", "/terms-of-service", "/terms", "/pages/terms-of-service"),
    "privacy": ("/policies/privacy-policy", "/pages/privacy-policy", "/privacy"),
}

MIN_PAGE_CHARS = 100


@dataclass
class DiscoveredPolicies:
    attempted: tuple[str, ...]
    texts: dict[str, str] = field(default_factory=dict)
    sources: dict[str, str] = field(default_factory=dict)

    @property
    def obtained(self) -> tuple[str, ...]:
        return tuple(c for c in self.attempted if c in self.texts)


async def _discover_category(
    root: str,
    category: str,
    paths: tuple[str, ...],
    *,
    client: httpx.AsyncClient,
    timeout: float,
    use_browser: bool,
) -> tuple[str, str, str] | None:
    """Try each path in order; the first page with enough text wins."""
    for path in paths:
        url = root + path
        try:
            text = await fetch_page_content(url, timeout=timeout, use_browser=use_browser, client=client)
        except Exception as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            continue
        if len(text) > MIN_PAGE_CHARS:
            logger.info("Found %s policy at %s (%d chars)", category, url, len(text))
            return category, url, text
    return None


async def discover_policies(
    seller_url: str,
    *,
    timeout: float = 10.0,
    use_browser: bool = False,
    client: httpx.AsyncClient | None = None,
    paths: dict[str, tuple[str, ...]] = POLICY_PATHS,
) -> DiscoveredPolicies:
    """
    Fetch the seller's returns, shipping, terms and privacy pages.
    Categories are probed concurrently; a category whose paths all fail is simply absent.
    """
    root = base_url(seller_url)
    result = DiscoveredPolicies(attempted=tuple(paths))
    own_client = client is None
    if client is None:
        client = httpx.AsyncClient(follow_redirects=True, headers={"User-Agent": USER_AGENT})
    try:
        found = await asyncio.gather(
            *(
                _discover_category(root, category, category_paths, client=client, timeout=timeout, use_browser=use_browser)
                for category, category_paths in paths.items()
            )
        )
    finally:
        if own_client:
            await client.aclose()

    for item in found:
        if item is None:
            continue
        category, url, text = item
        result.texts[category] = text
        result.sources[category] = url
    logger.info("Discovered %d/%d policy pages for %s", len(result.texts), len(result.attempted), root)
    return result
