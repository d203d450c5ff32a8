"""
Optional generative layer on top of deterministic extraction.

The model reviews the deterministic findings, may add clauses the rules missed and may list
extra positives. Its reply is validated against `GenerativeReview` and the clause registry;
anything unexpected discards the reply and the deterministic result is returned unchanged.
The model never changes a score directly: the merged factor list is re-scored by `scorer`.
"""

import logging
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from policycheck.engine.models import AnalysisResult, GenerativeReview, RiskFactor
from policycheck.engine.prompts import build_review_prompt
from policycheck.engine.registry import DEFAULT_REGISTRY, ClauseRegistry
from policycheck.engine.scorer import apply_boilerplate_discount, score

logger = logging.getLogger(__name__)

ReviewFn = Callable[[str], Union[GenerativeReview, dict[str, Any]]]

MIN_FINDINGS_FOR_CONFIDENCE = 3
LONG_TEXT_CHARS = 25_000
# Clauses whose facts (caps, providers, opt-outs) are worth a second read.
REVIEW_CLAUSES = frozenset({"binding_arbitration", "liability_cap"})


class GenerativeReviewError(ValueError):
    """The model's reply failed schema or registry validation."""


def should_enhance(text: str, result: AnalysisResult) -> bool:
    if result.analysis_status == "no_content":
        return False
    if len(result.risk_factors) < MIN_FINDINGS_FOR_CONFIDENCE:
        return True
    if len(text) > LONG_TEXT_CHARS:
        return True
    return any(f.factor in REVIEW_CLAUSES for f in result.risk_factors)


def parse_review(reply: Union[GenerativeReview, dict[str, Any]], registry: ClauseRegistry) -> GenerativeReview:
    """Validate *reply*; raise GenerativeReviewError if it is malformed or names an unknown clause id."""
    try:
        review = reply if isinstance(reply, GenerativeReview) else GenerativeReview.model_validate(reply)
    except ValidationError as e:
        raise GenerativeReviewError(f"Reply does not match schema: {e}") from e
    unknown = [
        item.factor for item in [*review.validated, *review.additional] if item.factor not in registry
    ]
    if unknown:
        raise GenerativeReviewError(f"Reply uses unregistered clause ids: {', '.join(unknown)}")
    return review


def merge_review(
    result: AnalysisResult,
    review: GenerativeReview,
    *,
    registry: ClauseRegistry = DEFAULT_REGISTRY,
    url_sourced: bool,
) -> AnalysisResult:
    """Fold a validated review into *result* and re-score the merged factor list."""
    verdicts = {item.factor: item for item in review.validated}
    factors: list[RiskFactor] = []
    for factor in result.risk_factors:
        verdict = verdicts.get(factor.factor)
        if verdict is None:
            factors.append(factor)
            continue
        suggested = verdict.severity if verdict.severity and verdict.severity != factor.severity else None
        factors.append(
            factor.model_copy(
                update={
                    "review": "confirmed" if verdict.confirmed else "disputed",
                    "suggested_severity": suggested,
                }
            )
        )

    seen = {(f.factor, f.found_in) for f in factors}
    additions: list[RiskFactor] = []
    for item in review.additional:
        if (item.factor, item.found_in) in seen:
            continue
        seen.add((item.factor, item.found_in))
        clause_type = registry.get(item.factor)
        additions.append(
            RiskFactor(
                factor=item.factor,
                severity=clause_type.typical_severity,
                detail=item.detail or clause_type.description,
                source=clause_type.category,
                found_in=item.found_in,
                evidence=item.evidence,
                origin="generative",
            )
        )
    factors.extend(apply_boilerplate_discount(additions, url_sourced=url_sourced))

    positives = list(result.positives)
    for positive in review.positives:
        positive = positive.strip()
        if positive and positive not in positives:
            positives.append(positive)

    return result.with_scorecard(
        score(factors),
        risk_factors=tuple(factors),
        positives=tuple(positives),
        analysis_method="deterministic_plus_generative",
    )


class HybridValidator:
    """Runs the review function and merges its reply; never raises."""

    def __init__(self, review_fn: Optional[ReviewFn], registry: ClauseRegistry = DEFAULT_REGISTRY) -> None:
        self._review_fn = review_fn
        self._registry = registry

    @property
    def enabled(self) -> bool:
        return self._review_fn is not None

    def enhance(self, text: str, result: AnalysisResult, *, url_sourced: bool) -> AnalysisResult:
        if self._review_fn is None or not should_enhance(text, result):
            return result
        prompt = build_review_prompt(text, result.risk_factors, self._registry.ids())
        try:
            review = parse_review(self._review_fn(prompt), self._registry)
            merged = merge_review(result, review, registry=self._registry, url_sourced=url_sourced)
        except Exception:
            logger.exception("Generative review failed; keeping deterministic result")
            return result
        logger.info(
            "Generative review merged: %d factors (%d added)",
            len(merged.risk_factors),
            len(merged.risk_factors) - len(result.risk_factors),
        )
        return merged
