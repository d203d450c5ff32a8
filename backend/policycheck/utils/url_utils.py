"""URL parsing utilities."""

from urllib.parse import urlsplit

import tldextract

# Bundled public-suffix snapshot only; never fetch the list over the network.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def normalize_url(url: str) -> str:
    """Add an https:// scheme when the caller passed a bare host such as "shop.example.com"."""
    url = url.strip()
    if url and "://" not in url:
        url = f"https://{url}"
    return url


def get_domain(url: str) -> str:
    """
    Return the registered (root) domain from a URL, stripping subdomains.
    Examples:
        https://example.com/path          -> example.com
        https://shop.example.com/returns  -> example.com
        https://sub.example.co.uk:443/    -> example.co.uk
    """
    ext = _extract(normalize_url(url))
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return ext.domain or ""


def base_url(url: str) -> str:
    """Scheme and host of *url*: https://shop.example.com/a/b -> https://shop.example.com"""
    parts = urlsplit(normalize_url(url))
    return f"{parts.scheme}://{parts.netloc}"
