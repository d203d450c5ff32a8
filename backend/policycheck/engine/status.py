"""Map what was attempted and obtained to an analysis status and confidence."""

from collections.abc import Collection
from typing import NamedTuple

from policycheck.engine.models import AnalysisStatus, Confidence

# Less than this much cleaned text counts as no content at all.
MIN_CONTENT_CHARS = 50


class Coverage(NamedTuple):
    status: AnalysisStatus
    confidence: Confidence


def has_content(text: str | None) -> bool:
    return bool(text) and len(text.strip()) >= MIN_CONTENT_CHARS


def classify_coverage(
    attempted: Collection[str],
    obtained: Collection[str],
    *,
    text_provided: bool,
    has_content: bool,
) -> Coverage:
    """
    text_provided wins when the caller's text has content. Otherwise coverage is
    judged by how many of the attempted policy categories produced text.
    """
    if text_provided and has_content:
        return Coverage("text_provided", "high")
    if not has_content or not obtained:
        return Coverage("no_content", "none")
    if attempted and len(obtained) < len(attempted):
        fraction = len(obtained) / len(attempted)
        return Coverage("partial", "medium" if fraction >= 0.5 else "low")
    return Coverage("complete", "high")
