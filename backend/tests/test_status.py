"""Tests for analysis status and confidence classification."""

from __future__ import annotations

import pytest

from policycheck.engine.status import Coverage, classify_coverage, has_content

CATEGORIES = ("returns", "shipping", "terms", "privacy")


@pytest.mark.parametrize(
    "obtained, text_provided, content, expected",
    [
        ((), True, True, Coverage("text_provided", "high")),
        ((), True, False, Coverage("no_content", "none")),
        ((), False, False, Coverage("no_content", "none")),
        (("returns",), False, False, Coverage("no_content", "none")),
        (("returns",), False, True, Coverage("partial", "low")),
        (("returns", "terms"), False, True, Coverage("partial", "medium")),
        (("returns", "shipping", "terms"), False, True, Coverage("partial", "medium")),
        (CATEGORIES, False, True, Coverage("complete", "high")),
    ],
)
def test_classify_coverage(obtained, text_provided, content, expected):
    attempted = () if text_provided else CATEGORIES
    assert classify_coverage(attempted, obtained, text_provided=text_provided, has_content=content) == expected


def test_has_content_threshold():
    assert not has_content(None)
    assert not has_content("short text")
    assert has_content("x" * 50)
