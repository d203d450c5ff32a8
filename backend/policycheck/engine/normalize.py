"""Text cleaning and currency/number normalization shared by the extraction rules."""

import re

_WHITESPACE = re.compile(r"\s+")
_AMOUNT = re.compile(r"(?:US\$|USD|\$)?\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
_INTEGER = re.compile(r"\d+")
_SENTENCE_BREAK = re.compile(r"[.!?](?=\s|$)")


def clean_text(raw: str) -> str:
    """Collapse non-breaking spaces and runs of whitespace; trim."""
    return _WHITESPACE.sub(" ", raw.replace("\u00a0", " ")).strip()


def parse_amount(value: str | None) -> float | None:
    """
    Parse a money amount such as "$1,000", "USD 250.50" or "100 dollars".
    Thousands separators and currency markers are stripped. Returns None when no number is present.
    """
    if not value:
        return None
    compact = value.replace(",", "").replace("\u00a0", " ")
    match = _AMOUNT.search(compact)
    if not match:
        return None
    return float(match.group(1))


def parse_int(value: str | None) -> int | None:
    """First integer in *value* (separators stripped), or None."""
    if not value:
        return None
    match = _INTEGER.search(value.replace(",", ""))
    return int(match.group()) if match else None


def sentence_around(text: str, start: int, end: int, *, limit: int = 300) -> str:
    """Return the sentence of *text* that contains the span [start, end), capped at *limit* chars."""
    left = 0
    for m in _SENTENCE_BREAK.finditer(text, 0, start):
        left = m.end()
    m = _SENTENCE_BREAK.search(text, end)
    right = m.end() if m else len(text)
    sentence = text[left:right].strip()
    if len(sentence) > limit:
        sentence = sentence[: limit - 3].rstrip() + "..."
    return sentence
