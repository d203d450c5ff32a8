"""Application utilities."""

from policycheck.utils.fetch_page import fetch_page_content, html_to_text
from policycheck.utils.policy_discovery import DiscoveredPolicies, discover_policies
from policycheck.utils.url_utils import base_url, get_domain, normalize_url

__all__ = [
    "DiscoveredPolicies",
    "base_url",
    "discover_policies",
    "fetch_page_content",
    "get_domain",
    "html_to_text",
    "normalize_url",
]
