"""Tests for text cleaning and number parsing."""

from __future__ import annotations

import pytest

from policycheck.engine.normalize import clean_text, parse_amount, parse_int, sentence_around


def test_clean_text_collapses_nbsp_and_whitespace():
    assert clean_text("  No returns \n\n accepted.\t") == "No returns accepted."


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,000", 1000.0),
        ("USD 250.50", 250.5),
        ("US$ 99", 99.0),
        ("100 dollars", 100.0),
        ("$1 000", 1.0),
        ("no amount here", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_int():
    assert parse_int("within 30 days") == 30
    assert parse_int("1,200") == 1200
    assert parse_int("thirty") is None
    assert parse_int(None) is None


def test_sentence_around_returns_matching_sentence():
    text = "Welcome to our store. All sales are final. Thank you!"
    start = text.index("final")
    assert sentence_around(text, start, start + 5) == "All sales are final."


def test_sentence_around_caps_length():
    text = "word " * 200
    sentence = sentence_around(text, 10, 15, limit=50)
    assert len(sentence) == 50
    assert sentence.endswith("...")
