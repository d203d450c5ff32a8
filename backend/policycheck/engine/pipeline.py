"""
End-to-end analysis: text or seller URL in, `AnalysisResult` out.

Caller-supplied text is analysed as-is. A seller URL is expanded into the seller's policy pages
(returns, shipping, terms, privacy), each page is extracted separately so every risk factor
knows which document it came from, and ToS boilerplate found on the terms page is discounted.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable

import httpx

from policycheck.engine.extractor import extract, extract_positives
from policycheck.engine.hybrid import HybridValidator
from policycheck.engine.models import CATEGORY_TO_FOUND_IN, AnalysisResult, RiskFactor
from policycheck.engine.normalize import clean_text
from policycheck.engine.registry import DEFAULT_REGISTRY, ClauseRegistry
from policycheck.engine.scorer import apply_boilerplate_discount, null_scorecard, score, to_risk_factors
from policycheck.engine.status import classify_coverage, has_content
from policycheck.utils.policy_discovery import DiscoveredPolicies, discover_policies

logger = logging.getLogger(__name__)


def summarize(result: AnalysisResult) -> str:
    """One factual paragraph describing what was analysed and found. No advice."""
    if result.analysis_status == "no_content":
        return "No policy content could be retrieved or analyzed."
    if result.analysis_status == "text_provided":
        scope = "Analyzed the provided policy text."
    else:
        pages = len(result.policies_analyzed)
        scope = f"Analyzed {pages} policy page{'s' if pages != 1 else ''} ({', '.join(result.policies_analyzed)})."

    counts = Counter(f.severity for f in result.risk_factors)
    total = len(result.risk_factors)
    if total:
        breakdown = ", ".join(f"{counts[s]} {s}" for s in ("high", "medium", "low") if counts[s])
        found = f"Found {total} risk factor{'s' if total != 1 else ''} ({breakdown})"
    else:
        found = "Found no risk factors"
    if result.positives:
        found += f" and {len(result.positives)} buyer-friendly term{'s' if len(result.positives) != 1 else ''}"
    return (
        f"{scope} {found}. Risk level {result.risk_level}, score {result.risk_score}/10, "
        f"grade {result.buyer_protection_rating}."
    )


def _no_content_result(*, status_kwargs: dict, policies_analyzed: dict[str, str] | None = None) -> AnalysisResult:
    card = null_scorecard()
    result = AnalysisResult(
        risk_score=card.risk_score,
        risk_level=card.risk_level,
        buyer_protection_rating=card.grade,
        buyer_protection_score=card.buyer_protection_score,
        analysis_method="none",
        policies_analyzed=policies_analyzed or {},
        **status_kwargs,
    )
    return result.model_copy(update={"summary": summarize(result)})


def _scored_result(
    factors: Iterable[RiskFactor],
    positives: Iterable[str],
    *,
    status: str,
    confidence: str,
    policies_analyzed: dict[str, str],
) -> AnalysisResult:
    factors = tuple(factors)
    result = AnalysisResult(
        risk_factors=factors,
        positives=tuple(positives),
        analysis_status=status,
        confidence=confidence,
        analysis_method="deterministic",
        policies_analyzed=policies_analyzed,
    )
    return result.with_scorecard(score(factors))


def analyze_text(text: str, *, registry: ClauseRegistry = DEFAULT_REGISTRY) -> AnalysisResult:
    """Deterministic analysis of caller-supplied text. Never discounted."""
    cleaned = clean_text(text or "")
    coverage = classify_coverage((), (), text_provided=True, has_content=has_content(cleaned))
    if coverage.status == "no_content":
        return _no_content_result(status_kwargs={"analysis_status": coverage.status, "confidence": coverage.confidence})
    factors = to_risk_factors(extract(cleaned, registry=registry), "unknown", registry=registry)
    result = _scored_result(
        factors,
        extract_positives(cleaned),
        status=coverage.status,
        confidence=coverage.confidence,
        policies_analyzed={},
    )
    return result.model_copy(update={"summary": summarize(result)})


def analyze_policies(discovered: DiscoveredPolicies, *, registry: ClauseRegistry = DEFAULT_REGISTRY) -> AnalysisResult:
    """Deterministic analysis of fetched policy pages, one extraction per page."""
    combined = labeled_text(discovered)
    coverage = classify_coverage(
        discovered.attempted,
        discovered.obtained,
        text_provided=False,
        has_content=has_content(combined),
    )
    if coverage.status == "no_content":
        return _no_content_result(
            status_kwargs={"analysis_status": coverage.status, "confidence": coverage.confidence},
            policies_analyzed=dict(discovered.sources),
        )

    factors: list[RiskFactor] = []
    positives: list[str] = []
    for category in discovered.obtained:
        text = clean_text(discovered.texts[category])
        found_in = CATEGORY_TO_FOUND_IN.get(category, "unknown")
        page_factors = to_risk_factors(extract(text, registry=registry), found_in, registry=registry)
        factors.extend(apply_boilerplate_discount(page_factors, url_sourced=True))
        positives.extend(p for p in extract_positives(text) if p not in positives)

    result = _scored_result(
        factors,
        positives,
        status=coverage.status,
        confidence=coverage.confidence,
        policies_analyzed={c: discovered.sources[c] for c in discovered.obtained},
    )
    return result.model_copy(update={"summary": summarize(result)})


def labeled_text(discovered: DiscoveredPolicies) -> str:
    """All fetched pages joined, each under a heading naming its category and found_in label."""
    sections = []
    for category in discovered.obtained:
        label = CATEGORY_TO_FOUND_IN.get(category, "unknown")
        sections.append(f'=== {category.upper()} POLICY (found_in: "{label}") ===\n{discovered.texts[category]}')
    return "\n\n---\n\n".join(sections)


async def run_analysis(
    *,
    seller_url: str | None = None,
    policy_text: str | None = None,
    registry: ClauseRegistry = DEFAULT_REGISTRY,
    validator: HybridValidator | None = None,
    fetch_timeout: float = 10.0,
    use_browser: bool = False,
    client: httpx.AsyncClient | None = None,
) -> AnalysisResult:
    """
    Analyse *policy_text* when given (the URL then only names the subject), else discover and
    analyse the seller's policy pages. The optional generative review runs in a worker thread.
    """
    if policy_text is not None and policy_text.strip():
        source_text = clean_text(policy_text)
        result = analyze_text(source_text, registry=registry)
        url_sourced = False
    elif seller_url:
        discovered = await discover_policies(
            seller_url, timeout=fetch_timeout, use_browser=use_browser, client=client
        )
        source_text = labeled_text(discovered)
        result = analyze_policies(discovered, registry=registry)
        url_sourced = True
    else:
        raise ValueError("Either seller_url or policy_text is required")

    logger.info(
        "Deterministic analysis: status=%s score=%s flags=%s",
        result.analysis_status, result.risk_score, result.flags,
    )
    if validator is not None and validator.enabled:
        enhanced = await asyncio.to_thread(validator.enhance, source_text, result, url_sourced=url_sourced)
        if enhanced is not result:
            result = enhanced.model_copy(update={"summary": summarize(enhanced)})
    return result
